"""gemkiln command-line interface.

Usage::

    gemkiln my_cool-gem
    gemkiln my_cool-gem --yard --markdown --bundler -T gemcutter
    python -m gemkiln --list
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.table import Table

from gemkiln import __version__
from gemkiln.config import GeneratorOptions, default_options_path
from gemkiln.scaffolder import ProjectGenerator, TemplateSet, UnknownTemplateError
from gemkiln.scaffolder.registry import TemplateRegistry, default_registry
from gemkiln.utils import (
    console,
    print_action,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
)

GIT_COMMANDS: list[list[str]] = [
    ["git", "init"],
    ["git", "add", "."],
    ["git", "commit", "-m", "Initial commit."],
]

# CLI destinations copied onto GeneratorOptions when given
_OPTION_FIELDS = (
    "markdown",
    "textile",
    "templates",
    "name",
    "version",
    "summary",
    "description",
    "homepage",
    "email",
    "authors",
    "license",
    "rdoc",
    "yard",
    "test_unit",
    "rspec",
    "bundler",
    "jeweler",
    "git",
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gemkiln",
        description="Generate a new Ruby gem project from composable template sets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  gemkiln my_cool-gem\n"
            "  gemkiln my_cool-gem --yard --markdown --bundler\n"
            "  gemkiln my_cool-gem -T gemcutter --no-git\n"
        ),
    )
    flag = argparse.BooleanOptionalAction

    parser.add_argument("path", nargs="?", help="Destination directory of the new project")
    parser.add_argument("--list", action="store_true", help="List the available template sets")
    parser.add_argument(
        "--options",
        type=Path,
        default=None,
        help=f"YAML file with default options (default: {default_options_path()})",
    )
    parser.add_argument("--quiet", "-q", action="store_true", help="Suppress per-file output")
    parser.add_argument("--kiln-version", action="version", version=f"gemkiln {__version__}")

    meta = parser.add_argument_group("project metadata")
    meta.add_argument("--name", "-n", default=None, help="Gem name (default: destination directory name)")
    meta.add_argument("--version", "-V", default=None, help="Initial version (default: 0.1.0)")
    meta.add_argument("--summary", "-s", default=None)
    meta.add_argument("--description", "-D", default=None)
    meta.add_argument("--homepage", "-U", default=None)
    meta.add_argument("--email", "-e", default=None)
    meta.add_argument("--authors", "-a", nargs="+", default=None)
    meta.add_argument("--license", "-L", default=None)

    sets = parser.add_argument_group("template sets")
    sets.add_argument(
        "--templates", "-T", nargs="+", action="extend", default=None,
        help="Additional template sets, in precedence order",
    )
    sets.add_argument("--rdoc", action=flag, default=None)
    sets.add_argument("--yard", action=flag, default=None)
    sets.add_argument("--markdown", action=flag, default=None)
    sets.add_argument("--textile", action=flag, default=None)
    sets.add_argument("--test-unit", dest="test_unit", action=flag, default=None)
    sets.add_argument("--rspec", action=flag, default=None)
    sets.add_argument("--bundler", action=flag, default=None)
    sets.add_argument("--jeweler", action=flag, default=None)
    sets.add_argument("--git", action=flag, default=None, help="Initialise a git repository afterwards")

    return parser


def resolve_options(args: argparse.Namespace) -> GeneratorOptions:
    """Defaults, then the options file, then the environment, then the CLI."""
    options = GeneratorOptions.from_env(GeneratorOptions.load(args.options))
    return options.merged(**{field: getattr(args, field) for field in _OPTION_FIELDS})


def print_template_list(registry: TemplateRegistry) -> None:
    table = Table(title="Template sets", show_header=True, header_style="bold cyan")
    table.add_column("Name", no_wrap=True)
    table.add_column("Description")
    table.add_column("Path", style="dim")
    for name, path in registry.items():
        table.add_row(name, TemplateSet(path).description, str(path))
    console.print(table)


async def initialize_git(root: Path) -> bool:
    """Create a git repository with an initial commit in *root*.

    Returns ``False`` when *root* already is a repository or a git command
    fails.
    """
    if (root / ".git").is_dir():
        return False

    for cmd in GIT_COMMANDS:
        print_action("run", " ".join(cmd))
        returncode, _, stderr = await run_command(cmd, cwd=root)
        if returncode != 0:
            print_warning(f"  {' '.join(cmd)} failed: {stderr}")
            return False
    return True


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``gemkiln`` and ``python -m gemkiln``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    registry = default_registry()
    if args.list:
        print_template_list(registry)
        return

    if not args.path:
        parser.error("the destination PATH is required")

    try:
        options = resolve_options(args)
    except (ValueError, ValidationError) as exc:
        print_error(f"Invalid options: {exc}")
        sys.exit(1)

    root = Path(args.path)
    generator = ProjectGenerator(options, registry, quiet=args.quiet)
    try:
        result = asyncio.run(generator.generate(root))
    except UnknownTemplateError as exc:
        print_error(str(exc))
        sys.exit(1)

    git_initialized = False
    if options.git:
        git_initialized = asyncio.run(initialize_git(root))

    print_summary_table(
        {
            "Project": generator.variables.name if generator.variables else root.name,
            "Templates": ", ".join(result.enabled_templates),
            "Files": str(len(result.files)),
            "Git": "initialized" if git_initialized else "skipped",
        },
        title="gemkiln",
    )
    print_success(f"Generated {root}")


if __name__ == "__main__":
    main()
