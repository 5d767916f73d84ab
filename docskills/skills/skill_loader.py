"""
docskills Skills: Markdown-based skill and template loader

A skill is a directory with a SKILL.md file and a references/ directory.
Every file carries YAML frontmatter; the references are the templates.
"""

import logging
import re
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

SKILL_FILE = "SKILL.md"
REFERENCES_DIR = "references"
AUDIENCES = ("human", "agent")

_KEBAB_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_FENCE_RE = re.compile(r"^(`{3,}|~{3,})")


class SkillLoader:
    """Load and parse skill directories and their reference templates."""

    def __init__(self, skills_dir: Optional[str] = None):
        if skills_dir:
            self.skills_dir = Path(skills_dir)
        else:
            self.skills_dir = Path(__file__).resolve().parent.parent / "library"

    def load_skill(self, skill_dir) -> Optional[dict]:
        """Load a skill from a directory containing SKILL.md.

        Args:
            skill_dir: Skill directory path.

        Returns:
            Dict with name, description, audience, default_template, path,
            body and references, or None if SKILL.md is missing/unreadable.
        """
        skill_dir = Path(skill_dir)
        skill_md = skill_dir / SKILL_FILE
        if not skill_md.exists():
            logger.warning("Skill not found: %s", skill_dir)
            return None

        content = self._read_text(skill_md)
        if content is None:
            return None

        header, body = self.parse_frontmatter(content)
        return {
            "name": self._as_str(header.get("name")) or skill_dir.name,
            "description": self._as_str(header.get("description")),
            "audience": self._as_str(header.get("audience")).lower(),
            "default_template": self._as_str(header.get("default_template")),
            "path": str(skill_md),
            "body": body,
            "references": self.list_reference_names(skill_dir),
        }

    def list_reference_names(self, skill_dir) -> list:
        """Return the sorted stems of references/*.md in a skill directory."""
        ref_dir = Path(skill_dir) / REFERENCES_DIR
        if not ref_dir.is_dir():
            return []
        return [path.stem for path in sorted(ref_dir.glob("*.md"))]

    def load_reference(self, skill_dir, name: str) -> Optional[dict]:
        """Load one reference template on demand.

        Args:
            skill_dir: Skill directory path.
            name: Reference file stem (without .md extension).

        Returns:
            Template dict, or None if the file is missing or has no frontmatter.
        """
        skill_dir = Path(skill_dir)
        path = skill_dir / REFERENCES_DIR / f"{name}.md"
        if not path.exists():
            logger.warning("Reference not found: %s", path)
            return None

        content = self._read_text(path)
        if content is None:
            return None

        header, body = self.parse_frontmatter(content)
        if not header:
            logger.warning("Reference %s has no frontmatter; skipped", path)
            return None

        skill_header, _ = self._read_skill_header(skill_dir)
        audience = self._as_str(header.get("audience")) or self._as_str(skill_header.get("audience"))
        return {
            "name": self._as_str(header.get("name")) or path.stem,
            "description": self._as_str(header.get("description")),
            "audience": audience.lower(),
            "aliases": self._as_list(header.get("aliases", [])),
            "triggers": self._as_list(header.get("trigger_patterns", [])),
            "skill": self._as_str(skill_header.get("name")) or skill_dir.name,
            "path": str(path),
            "body": body,
        }

    def list_templates(self, skill_dir) -> list:
        """Load every reference template of a skill.

        Returns:
            List of template dicts in file-name order.
        """
        templates = []
        for name in self.list_reference_names(skill_dir):
            template = self.load_reference(skill_dir, name)
            if template:
                templates.append(template)
        return templates

    def list_skills(self) -> list:
        """List all skills below the configured skills directory."""
        if not self.skills_dir.exists():
            return []
        return self.scan_skills([self.skills_dir])

    def scan_skills(self, search_paths: list) -> list:
        """Scan paths and load every SKILL.md found at or below them."""
        loaded = []
        seen_paths = set()

        for raw_path in search_paths:
            base = Path(raw_path).expanduser()
            if not base.exists():
                continue

            candidates = []
            if (base / SKILL_FILE).exists():
                candidates.append(base)
            else:
                for skill_file in sorted(base.rglob(SKILL_FILE)):
                    candidates.append(skill_file.parent)

            for candidate in candidates:
                skill_md = str((candidate / SKILL_FILE).resolve())
                if skill_md in seen_paths:
                    continue
                seen_paths.add(skill_md)
                skill = self.load_skill(candidate)
                if skill:
                    skill["dir"] = str(candidate)
                    loaded.append(skill)

        return loaded

    def validate_skill(self, skill_dir) -> list:
        """Check a skill directory against the SKILL.md conventions.

        Returns:
            List of problem strings; empty when the skill is valid.
        """
        skill_dir = Path(skill_dir)
        skill_md = skill_dir / SKILL_FILE
        if not skill_md.exists():
            return [f"{skill_dir}: missing {SKILL_FILE}"]

        content = self._read_text(skill_md)
        if content is None:
            return [f"{skill_md}: unreadable (not UTF-8 text?)"]
        header, _ = self.parse_frontmatter(content)
        if not header:
            return [f"{skill_md}: missing YAML frontmatter"]

        problems = []
        name = str(header.get("name") or "")
        if not name:
            problems.append(f"{skill_md}: 'name' is required")
        elif not _KEBAB_RE.match(name):
            problems.append(f"{skill_md}: name '{name}' must be lower-case kebab-case")
        if not str(header.get("description") or "").strip():
            problems.append(f"{skill_md}: 'description' is required")

        audience = header.get("audience")
        if audience is not None and str(audience).lower() not in AUDIENCES:
            problems.append(f"{skill_md}: unknown audience '{audience}'")

        template_names = set()
        for ref_name in self.list_reference_names(skill_dir):
            ref_path = skill_dir / REFERENCES_DIR / f"{ref_name}.md"
            ref_content = self._read_text(ref_path)
            if ref_content is None:
                problems.append(f"{ref_path}: unreadable (not UTF-8 text?)")
                continue
            ref_header, ref_body = self.parse_frontmatter(ref_content)
            if not ref_header:
                problems.append(f"{ref_path}: missing YAML frontmatter")
                continue
            for key in ("name", "description", "audience"):
                if not str(ref_header.get(key) or "").strip():
                    problems.append(f"{ref_path}: '{key}' is required")
            ref_audience = str(ref_header.get("audience") or "").lower()
            if ref_audience and ref_audience not in AUDIENCES:
                problems.append(f"{ref_path}: unknown audience '{ref_audience}'")
            if not ref_body.strip():
                problems.append(f"{ref_path}: template body is empty")
            template_names.add(self._as_str(ref_header.get("name")) or ref_name)

        default = self._as_str(header.get("default_template"))
        if default and default not in template_names:
            problems.append(
                f"{skill_md}: default_template '{default}' has no reference"
            )

        return problems

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def extract_sections(self, body: str, include) -> str:
        """Keep only the ``## `` sections whose titles are in *include*.

        Headings inside fenced code blocks belong to the template text and
        never start a section. Returns the whole body if nothing matches.
        """
        wanted = {title.lower() for title in include}

        sections = []
        current_section = None
        current_lines: list = []
        fence = None

        for line in body.split("\n"):
            stripped = line.strip()
            if fence is None:
                match = _FENCE_RE.match(stripped)
                if match:
                    fence = match.group(1)
            elif stripped and set(stripped) == {fence[0]} and len(stripped) >= len(fence):
                fence = None
                current_lines.append(line)
                continue

            if fence is None and line.startswith("## "):
                if current_section and current_section.lower() in wanted:
                    sections.append("\n".join(current_lines).rstrip())
                current_section = line[3:].strip()
                current_lines = [line]
            else:
                current_lines.append(line)

        # Last section
        if current_section and current_section.lower() in wanted:
            sections.append("\n".join(current_lines).rstrip())

        return "\n\n".join(sections) if sections else body

    # ------------------------------------------------------------------
    # Frontmatter parsing
    # ------------------------------------------------------------------

    def parse_frontmatter(self, content: str) -> tuple:
        """Parse YAML frontmatter from markdown content.

        Returns:
            (header_dict, body_string)
        """
        if not content.startswith("---"):
            return {}, content

        end_idx = content.find("\n---", 3)
        if end_idx == -1:
            return {}, content

        frontmatter = content[3:end_idx].strip()
        body = content[end_idx + 4:].strip()

        try:
            header = yaml.safe_load(frontmatter)
        except yaml.YAMLError as e:
            logger.warning("YAML parse error: %s", e)
            return {}, body

        if not isinstance(header, dict):
            return {}, body
        return header, body

    def _read_skill_header(self, skill_dir: Path) -> tuple:
        skill_md = skill_dir / SKILL_FILE
        if not skill_md.exists():
            return {}, ""
        content = self._read_text(skill_md)
        if content is None:
            return {}, ""
        return self.parse_frontmatter(content)

    def _read_text(self, path: Path) -> Optional[str]:
        """Read a UTF-8 file; log and return None when it cannot be read."""
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read %s: %s", path, e)
            return None

    def _as_str(self, value) -> str:
        """Coerce a scalar frontmatter value (YAML may yield int/bool) into str."""
        if value is None:
            return ""
        return str(value).strip()

    def _as_list(self, value) -> list:
        """Coerce a frontmatter value into a list of lower-case strings."""
        if not value:
            return []
        if isinstance(value, str):
            value = value.split(",")
        return [str(item).strip().lower() for item in value if str(item).strip()]
