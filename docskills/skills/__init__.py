"""
docskills Skills System

Skills are markdown files that provide structured instructions for the LLM.
They are NOT executable code; they are templates that guide how the LLM
writes a specific kind of documentation.
"""

from docskills.skills.skill_loader import SkillLoader
from docskills.skills.registry import TemplateRegistry

__all__ = ["SkillLoader", "TemplateRegistry"]
