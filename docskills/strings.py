"""
strings.py - Internationalization (i18n) Strings

All user-facing messages for docskills.
Switch between languages with DOCSKILLS_LANG or Strings.set_language().
"""

import logging
import os

logger = logging.getLogger(__name__)

# Current language setting (can be changed via environment variable)
CURRENT_LANGUAGE = os.getenv("DOCSKILLS_LANG", "en")  # "en" or "ko"

LANGUAGES = ("en", "ko")


class Strings:
    """Multilingual string repository"""

    # Language data
    MESSAGES = {
        # === Clarification ===
        "clarify_audience": {
            "en": "Who is this documentation for: human readers (README, tutorial, reference...) "
                  "or an AI agent (SKILL.md, CLAUDE.md, rule catalog)?",
            "ko": "이 문서의 독자는 누구인가요? 사람(README, 튜토리얼, 레퍼런스...)인가요, "
                  "AI 에이전트(SKILL.md, CLAUDE.md, 규칙 카탈로그)인가요?",
        },
        "clarify_candidates": {
            "en": "Possible templates: {candidates}",
            "ko": "가능한 템플릿: {candidates}",
        },
        "reason_empty": {
            "en": "empty request",
            "ko": "빈 요청",
        },
        "reason_no_match": {
            "en": "no template matched",
            "ko": "일치하는 템플릿 없음",
        },
        "reason_ambiguous": {
            "en": "ambiguous audience",
            "ko": "독자가 불분명함",
        },
        "reason_matched": {
            "en": "matched {triggers}",
            "ko": "일치: {triggers}",
        },
        "reason_default": {
            "en": "default {audience} template",
            "ko": "기본 {audience} 템플릿",
        },

        # === CLI ===
        "selected": {
            "en": "{template} ({audience}): {reason}",
            "ko": "{template} ({audience}): {reason}",
        },
        "template_not_found": {
            "en": "Unknown template: {name}",
            "ko": "알 수 없는 템플릿: {name}",
        },
        "no_templates": {
            "en": "No templates found.",
            "ko": "템플릿이 없습니다.",
        },
        "validate_ok": {
            "en": "{path}: OK",
            "ko": "{path}: 정상",
        },
        "validate_summary": {
            "en": "{count} problem(s) found.",
            "ko": "문제 {count}개 발견.",
        },
        "no_skills_found": {
            "en": "No skills found under {path}",
            "ko": "{path} 아래에 스킬이 없습니다",
        },
    }

    @classmethod
    def get(cls, key: str, lang: str = None, **kwargs) -> str:
        """
        Get translated string by key

        Args:
            key: Message key (e.g., "clarify_audience")
            lang: Language code ("en" or "ko"), defaults to CURRENT_LANGUAGE
            **kwargs: Format arguments for string interpolation

        Returns:
            Translated and formatted string

        Example:
            >>> Strings.get("template_not_found", name="faq")
            'Unknown template: faq'
        """
        if lang is None:
            lang = CURRENT_LANGUAGE

        message_dict = cls.MESSAGES.get(key)
        if not message_dict:
            return f"[Missing: {key}]"

        message = message_dict.get(lang)
        if not message:
            # Fallback to English
            message = message_dict.get("en", f"[Missing: {key}]")

        if kwargs:
            try:
                message = message.format(**kwargs)
            except KeyError as e:
                logger.warning("Missing format key %s for message '%s'", e, key)

        return message

    @classmethod
    def set_language(cls, lang: str):
        """
        Set current language globally

        Args:
            lang: "en" or "ko"
        """
        global CURRENT_LANGUAGE
        if lang in LANGUAGES:
            CURRENT_LANGUAGE = lang
        else:
            logger.warning("Invalid language: %s. Use 'en' or 'ko'.", lang)
