"""Rule-based selector that maps an authoring request to one template."""

import logging
import re
from enum import Enum
from typing import Optional

from docskills.skills.registry import TemplateRegistry, contains_phrase
from docskills.strings import Strings

logger = logging.getLogger(__name__)


class Audience(Enum):
    HUMAN = "human"  # README, tutorials, reference pages
    AGENT = "agent"  # SKILL.md, CLAUDE.md, rule catalogs


class TemplateSelector:
    """Classify a free-text request into a template or a clarification signal."""

    AGENT_PATTERNS = [
        r"\bagents?\b",
        r"\bllms?\b",
        r"\bclaude\b",
        r"\bai\b",
        r"\bassistants?\b",
        r"\bcopilot\b",
        r"\bbots?\b",
        r"skill\.md",
        r"claude\.md",
        r"agents\.md",
        r"machine[- ]?(?:readable|parseable)",
        r"\bprompts?\b",
    ]

    HUMAN_PATTERNS = [
        r"\bhumans?\b",
        r"\bpeople\b",
        r"\busers?\b",
        r"\bdevelopers?\b",
        r"\bcontributors?\b",
        r"\bnewcomers?\b",
        r"\bbeginners?\b",
        r"\bcustomers?\b",
        r"\breaders?\b",
        r"\breadme\b",
        r"\bonboarding\b",
        r"\bteam\s?mates?\b",
    ]

    def __init__(self, registry: Optional[TemplateRegistry] = None):
        self.registry = registry or TemplateRegistry()

    def select(self, request: str) -> dict:
        """Return the selection for *request*.

        Returns:
            Dict with template, audience, needs_clarification, reason,
            candidates and (when clarification is needed) question.
        """
        text = (request or "").strip().lower()
        if not text:
            return self._clarify(Strings.get("reason_empty"), [])

        audience = self.detect_audience(text)
        candidates = self.registry.match(text)

        if audience is not None:
            same_audience = [c for c in candidates if c["audience"] == audience.value]
            # templates named outright survive when nothing else would
            candidates = same_audience or [c for c in candidates if self._is_named(text, c)]

        if not candidates:
            if audience is None:
                return self._clarify(Strings.get("reason_no_match"), [])
            default = self.registry.default_template(audience.value)
            if default is None:
                return self._clarify(Strings.get("reason_no_match"), [])
            return self._selected(
                default,
                audience.value,
                Strings.get("reason_default", audience=audience.value),
            )

        ranked = sorted(candidates, key=self._score, reverse=True)
        names = [c["name"] for c in ranked]

        if audience is None and self._audiences_tied(ranked):
            logger.info("Request is tied between audiences: %s", names)
            return self._clarify(Strings.get("reason_ambiguous"), names)

        best = ranked[0]
        return self._selected(
            best["name"],
            best["audience"],
            Strings.get("reason_matched", triggers=", ".join(best["matched_triggers"])),
            names,
        )

    def render(self, request: str) -> tuple:
        """Select a template and return (selection, body).

        The body is None when the request needs clarification.
        """
        selection = self.select(request)
        if selection["needs_clarification"]:
            return selection, None
        return selection, self.registry.get_body(selection["template"])

    def detect_audience(self, text: str) -> Optional[Audience]:
        """Return the audience with strictly more cue hits, or None on a tie."""
        agent_hits = self._count_matches(text, self.AGENT_PATTERNS)
        human_hits = self._count_matches(text, self.HUMAN_PATTERNS)
        if agent_hits > human_hits:
            return Audience.AGENT
        if human_hits > agent_hits:
            return Audience.HUMAN
        return None

    @staticmethod
    def _is_named(text: str, template: dict) -> bool:
        names = [template["name"]] + list(template.get("aliases", []))
        return any(
            contains_phrase(text, name) or contains_phrase(text, name.replace("-", " "))
            for name in names
        )

    @staticmethod
    def _audiences_tied(ranked: list) -> bool:
        """True when the best template of each audience has the same trigger count."""
        tops = {}
        for template in ranked:
            tops.setdefault(template["audience"], template)
        if len(tops) < 2:
            return False
        return len({len(t["matched_triggers"]) for t in tops.values()}) == 1

    @staticmethod
    def _score(template: dict) -> tuple:
        triggers = template["matched_triggers"]
        return (len(triggers), max(len(t) for t in triggers))

    def _count_matches(self, text: str, patterns: list[str]) -> int:
        return sum(1 for pattern in patterns if re.search(pattern, text, re.IGNORECASE))

    def _selected(self, template: str, audience: str, reason: str, candidates=None) -> dict:
        logger.debug("Selected %s (%s): %s", template, audience, reason)
        return {
            "template": template,
            "audience": audience,
            "needs_clarification": False,
            "reason": reason,
            "candidates": candidates or [template],
        }

    def _clarify(self, reason: str, candidates: list) -> dict:
        question = Strings.get("clarify_audience")
        if candidates:
            question += "\n" + Strings.get(
                "clarify_candidates", candidates=", ".join(candidates)
            )
        return {
            "template": None,
            "audience": None,
            "needs_clarification": True,
            "reason": reason,
            "candidates": candidates,
            "question": question,
        }
