"""
docskills Template Registry: Indexes skills and templates and provides lookup.
"""

import logging
import re
from typing import Optional

from docskills.skills.skill_loader import SkillLoader

logger = logging.getLogger(__name__)


def normalize_identifier(identifier) -> str:
    """Lower-case an identifier and treat '_' and spaces as '-'."""
    if identifier is None:
        return ""
    key = str(identifier).strip().lower()
    for sep in ("_", " "):
        key = key.replace(sep, "-")
    return key


def contains_phrase(text: str, phrase: str) -> bool:
    """True if *phrase* occurs in *text* as whole words ("recipe" not in "recipient")."""
    if not phrase:
        return False
    pattern = re.escape(phrase)
    if phrase[0].isalnum():
        pattern = r"\b" + pattern
    if phrase[-1].isalnum():
        pattern = pattern + r"\b"
    return re.search(pattern, text, re.IGNORECASE) is not None


class TemplateRegistry:
    """Registry that indexes all templates and provides lookup interface for the selector."""

    def __init__(self, skills_dir: Optional[str] = None):
        self.loader = SkillLoader(skills_dir)
        self._skills: dict = {}
        self._templates: dict = {}
        self._aliases: dict = {}
        self._external_paths: list = []
        self._scan()

    def _scan(self):
        """Scan the library and any registered external paths."""
        self._skills = {}
        self._templates = {}
        self._aliases = {}

        for skill in self.loader.list_skills():
            skill["source"] = "internal"
            self._index_skill(skill)

        if self._external_paths:
            for skill in self.loader.scan_skills(self._external_paths):
                skill["source"] = "external"
                self._index_skill(skill)

        if self._templates:
            logger.info(
                "Template registry: %d templates in %d skills indexed",
                len(self._templates),
                len(self._skills),
            )
        else:
            logger.info("Template registry: no templates found")

    def _index_skill(self, skill: dict) -> int:
        """Index one skill and its templates. Returns templates added."""
        name = skill["name"]
        if name in self._skills:
            logger.warning("Duplicate skill '%s' from %s, ignoring", name, skill["path"])
            return 0
        self._skills[name] = skill

        added = 0
        for template in self.loader.list_templates(skill["dir"]):
            template["source"] = skill.get("source", "internal")
            if not template["audience"]:
                template["audience"] = skill.get("audience", "")
            if self._index_template(template):
                added += 1
        return added

    def _index_template(self, template: dict) -> bool:
        key = normalize_identifier(template["name"])
        if key in self._templates or key in self._aliases:
            logger.warning(
                "Duplicate template '%s' from %s, ignoring",
                template["name"],
                template["path"],
            )
            return False

        template["name"] = key
        self._templates[key] = template
        for alias in template.get("aliases", []):
            alias_key = normalize_identifier(alias)
            if alias_key == key:
                continue
            if alias_key in self._templates or alias_key in self._aliases:
                logger.warning(
                    "Alias '%s' of template '%s' is already taken, ignoring",
                    alias,
                    key,
                )
                continue
            self._aliases[alias_key] = key
        return True

    def refresh(self):
        """Re-scan the library (call when templates are added/removed)."""
        self._scan()

    def register_external_skills(self, search_paths: list) -> int:
        """Scan external skill paths and register discovered templates."""
        registered = 0
        new_paths = [p for p in search_paths if p and p not in self._external_paths]
        for skill in self.loader.scan_skills(new_paths):
            skill["source"] = "external"
            registered += self._index_skill(skill)
        self._external_paths.extend(new_paths)

        if registered:
            logger.info("Registered %d external templates", registered)
        return registered

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def resolve(self, identifier: str) -> Optional[str]:
        """Return the canonical template identifier for a name or alias."""
        key = normalize_identifier(identifier)
        if key in self._templates:
            return key
        return self._aliases.get(key)

    def get(self, identifier: str) -> Optional[dict]:
        """Get template metadata by identifier or alias."""
        key = self.resolve(identifier)
        if key is None:
            return None
        template = dict(self._templates[key])
        template.pop("body", None)
        return template

    def get_body(self, identifier: str, sections=None) -> Optional[str]:
        """Get the template text.

        Bodies are read once when the registry is built (or refreshed), so
        repeated calls return the same string.

        Args:
            identifier: Template identifier or alias.
            sections: Optional iterable of ``## `` section titles to keep.

        Returns:
            Template body string or None.
        """
        key = self.resolve(identifier)
        if key is None:
            return None
        body = self._templates[key]["body"]
        if sections:
            return self.loader.extract_sections(body, sections)
        return body

    def get_skill(self, name: str) -> Optional[dict]:
        """Get skill info by name."""
        return self._skills.get(name)

    def list_skills(self) -> list:
        """List all indexed skills."""
        return list(self._skills.values())

    def list_templates(self, audience: Optional[str] = None) -> list:
        """List template metadata, optionally filtered by audience."""
        templates = []
        for key in self._templates:
            template = self.get(key)
            if audience and template["audience"] != audience:
                continue
            templates.append(template)
        return templates

    def default_template(self, audience: str) -> Optional[str]:
        """Return the default template of the first skill for an audience."""
        for skill in self._skills.values():
            if skill.get("audience") != audience:
                continue
            key = self.resolve(skill.get("default_template", ""))
            if key:
                return key
        return None

    def match(self, message: str) -> list:
        """Match templates for a request message.

        Args:
            message: Request text.

        Returns:
            List of template metadata dicts, each with ``matched_triggers``.
        """
        if not message:
            return []
        matched = []
        for key in self._templates:
            template = self.get(key)
            hits = [t for t in template.get("triggers", []) if contains_phrase(message, t)]
            if hits:
                template["matched_triggers"] = hits
                matched.append(template)
        return matched
