"""
Boilerplate console commands

    boilerplate publish --tag lang --dest .
    boilerplate make-menu-item Reports --order 200 --dest myapp/menu
"""
import argparse
import keyword
import logging
import re
import shutil
import sys
from pathlib import Path
from typing import List, Optional

from jinja2 import Template

from boilerplate.config import RESOURCES_DIR
from boilerplate.core.provider import BoilerplateProvider, PUBLISH_TAGS

logger = logging.getLogger(__name__)

STUB_FILE = RESOURCES_DIR / "stubs" / "menu_item.py.stub"


def snake_case(name: str) -> str:
    name = re.sub(r'[^0-9a-zA-Z]+', '_', name.strip())
    name = re.sub(r'(?<=[a-z0-9])(?=[A-Z])', '_', name)
    return name.strip('_').lower()


def publish(tag: str, dest: Path, force: bool = False) -> List[Path]:
    """Copy publishable files, skipping existing ones unless forced"""
    written = []
    for source, target in BoilerplateProvider.publishables(tag, dest).items():
        if target.exists() and not force:
            logger.info(f"Skipped (exists): {target}")
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, target)
        written.append(target)
        logger.info(f"Published: {target}")
    return written


def make_menu_item(name: str, dest: Path, order: Optional[int] = None) -> Path:
    """Write a menu item factory module, never overwriting an existing one"""
    key = snake_case(name)
    if not key:
        raise ValueError(f"Invalid menu item name: {name!r}")
    # Module and factory names must be importable
    if not key.isidentifier() or keyword.iskeyword(key):
        key = f"item_{key}"

    target = dest / f"{key}.py"
    if target.exists():
        raise FileExistsError(f"{target} already exists")

    code = Template(STUB_FILE.read_text(encoding="utf-8"), keep_trailing_newline=True).render(
        key=key,
        label=name.strip(),
        function=f"{key}_menu_item",
        order=order,
    )
    dest.mkdir(parents=True, exist_ok=True)
    target.write_text(code, encoding="utf-8")
    logger.info(f"Menu item created: {target}")
    return target


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="boilerplate", description="Boilerplate admin panel tools")
    sub = parser.add_subparsers(dest="command", required=True)

    p_publish = sub.add_parser("publish", help="Copy package resources into the application")
    p_publish.add_argument("--tag", choices=PUBLISH_TAGS, required=True)
    p_publish.add_argument("--dest", default=".", help="Application root")
    p_publish.add_argument("--force", action="store_true", help="Overwrite existing files")

    p_menu = sub.add_parser("make-menu-item", help="Generate a menu item module")
    p_menu.add_argument("name", help="Menu item name, e.g. Reports")
    p_menu.add_argument("--order", type=int, default=None)
    p_menu.add_argument("--dest", default="menu", help="Target directory")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format='%(message)s')
    args = build_parser().parse_args(argv)

    if args.command == "publish":
        written = publish(args.tag, Path(args.dest), args.force)
        print(f"Published {len(written)} file(s) [{args.tag}]")
        return 0

    if args.command == "make-menu-item":
        try:
            target = make_menu_item(args.name, Path(args.dest), args.order)
        except (FileExistsError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(f"Menu item created: {target}")
        return 0

    return 1


if __name__ == "__main__":
    sys.exit(main())
