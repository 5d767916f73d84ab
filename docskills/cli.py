"""
docskills command line interface.

    docskills select "write a README for new contributors"
    docskills show how-to --section Template
    docskills list --audience agent
    docskills validate path/to/my-skill
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from docskills.selector import TemplateSelector
from docskills.skills import SkillLoader, TemplateRegistry
from docskills.strings import Strings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_CLARIFY = 2


def _external_paths(args) -> list:
    paths = list(args.external or [])
    env_paths = os.getenv("DOCSKILLS_EXTERNAL_SKILLS", "")
    if env_paths:
        paths.extend([p for p in env_paths.split(":") if p.strip()])
    return paths


def build_registry(args) -> TemplateRegistry:
    """Create the registry from CLI options and environment."""
    skills_dir = args.skills_dir or os.getenv("DOCSKILLS_SKILLS_DIR") or None
    registry = TemplateRegistry(skills_dir)
    external = _external_paths(args)
    if external:
        registry.register_external_skills(external)
    return registry


def cmd_select(args) -> int:
    selector = TemplateSelector(build_registry(args))
    selection = selector.select(args.request)

    if args.json:
        print(json.dumps(selection, ensure_ascii=False, indent=2))
    elif selection["needs_clarification"]:
        print(selection["question"])
    else:
        print(Strings.get("selected", **selection))

    return EXIT_CLARIFY if selection["needs_clarification"] else EXIT_OK


def cmd_show(args) -> int:
    registry = build_registry(args)
    body = registry.get_body(args.template, sections=args.section)
    if body is None:
        print(Strings.get("template_not_found", name=args.template), file=sys.stderr)
        return EXIT_NOT_FOUND
    print(body)
    return EXIT_OK


def cmd_list(args) -> int:
    registry = build_registry(args)
    templates = registry.list_templates(audience=args.audience)
    if not templates:
        print(Strings.get("no_templates"))
        return EXIT_OK
    width = max(len(t["name"]) for t in templates)
    for template in templates:
        print(f"{template['name']:<{width}}  {template['audience']:<5}  {template['description']}")
    return EXIT_OK


def cmd_validate(args) -> int:
    loader = SkillLoader(args.skills_dir or os.getenv("DOCSKILLS_SKILLS_DIR") or None)
    roots = [Path(p) for p in args.paths] if args.paths else [loader.skills_dir]

    problems = []
    for root in roots:
        skills = loader.scan_skills([root])
        if not skills:
            problems.append(Strings.get("no_skills_found", path=root))
            continue
        for skill in skills:
            found = loader.validate_skill(skill["dir"])
            if not found:
                print(Strings.get("validate_ok", path=skill["dir"]))
            problems.extend(found)

    for problem in problems:
        print(problem, file=sys.stderr)
    if problems:
        print(Strings.get("validate_summary", count=len(problems)), file=sys.stderr)
        return EXIT_NOT_FOUND
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docskills",
        description="Pick and print documentation templates for humans or AI agents",
    )
    parser.add_argument('--skills-dir', type=str, default=None,
                        help='Template library root (default: bundled library)')
    parser.add_argument('--external', action='append', default=[],
                        help='Extra skill search path (repeatable)')
    parser.add_argument('--lang', choices=['en', 'ko'], default=None,
                        help='Message language')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log at INFO level')

    sub = parser.add_subparsers(dest="command", required=True)

    p_select = sub.add_parser("select", help="Select the template for a request")
    p_select.add_argument("request", help="Free-text description of what to document")
    p_select.add_argument("--json", action="store_true", help="Print the full selection as JSON")
    p_select.set_defaults(func=cmd_select)

    p_show = sub.add_parser("show", help="Print a template body")
    p_show.add_argument("template", help="Template identifier or alias")
    p_show.add_argument("--section", action="append", default=None,
                        help="Only print this '## ' section (repeatable)")
    p_show.set_defaults(func=cmd_show)

    p_list = sub.add_parser("list", help="List templates")
    p_list.add_argument("--audience", choices=["human", "agent"], default=None)
    p_list.set_defaults(func=cmd_list)

    p_validate = sub.add_parser("validate", help="Validate skill directories")
    p_validate.add_argument("paths", nargs="*", help="Skill directories (default: bundled library)")
    p_validate.set_defaults(func=cmd_validate)

    return parser


def main(argv=None) -> int:
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    level = "INFO" if args.verbose else os.getenv("DOCSKILLS_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, level, logging.WARNING),
    )

    if args.lang:
        Strings.set_language(args.lang)
    elif os.getenv("DOCSKILLS_LANG"):
        Strings.set_language(os.getenv("DOCSKILLS_LANG"))

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
