"""CLI entrypoints for pathgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, Sequence

from .config import ConfigError, PathgenConfig, load_config
from .errors import PathgenError
from .llm.provider import shared_registry
from .logging import configure_logging
from .models import PathKind, PathPlanItem, RadioToken
from .orchestrator import Orchestrator, glob_selector
from .templating.resolver import Selection
from .templating.scanner import choice_tokens
from .templating.store import PromptTemplate, TemplateStore

_LISTING_PREVIEW = 60


def _add_log_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    default: object = argparse.SUPPRESS if suppress_default else False
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=default,
        help="Only log warnings and errors.",
    )


def _add_root_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        default=".",
        help="Workspace root (defaults to current directory).",
    )


def _add_only_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--only",
        action="append",
        default=[],
        metavar="GLOB",
        help="Keep only planned paths matching GLOB (repeatable).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pathgen",
        description="Plan and generate workspace files from prompt templates.",
    )
    _add_log_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    plan_parser = subparsers.add_parser(
        "plan",
        help="Ask the provider for directories/files and create the selected ones.",
    )
    _add_log_options(plan_parser, suppress_default=True)
    _add_root_option(plan_parser)
    _add_only_option(plan_parser)
    plan_parser.add_argument("instructions", help="What the workspace should contain.")
    plan_parser.add_argument(
        "--kind",
        action="append",
        choices=[kind.value for kind in PathKind],
        help="Restrict the plan to this kind (repeatable).",
    )
    plan_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the plan without creating anything.",
    )

    run_parser = subparsers.add_parser(
        "run",
        help="Resolve a prompt template and generate the planned files.",
    )
    _add_log_options(run_parser, suppress_default=True)
    _add_root_option(run_parser)
    _add_only_option(run_parser)
    source = run_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--prompt", help="Prompt template text.")
    source.add_argument("--template", help="Name or id of a stored template.")
    source.add_argument("--file", type=Path, help="Read the prompt template from a file.")
    run_parser.add_argument(
        "--set",
        dest="values",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Value for a {{name}} placeholder (repeatable).",
    )
    run_parser.add_argument(
        "--choice",
        action="append",
        default=[],
        metavar="INDEX=VALUE",
        help="Selection for the INDEX-th choice placeholder; radio values are comma separated.",
    )
    run_parser.add_argument(
        "--path",
        dest="paths",
        action="append",
        default=[],
        metavar="PATH",
        help="Generate exactly these paths instead of the planned ones (repeatable).",
    )
    overwrite = run_parser.add_mutually_exclusive_group()
    overwrite.add_argument("--overwrite", dest="overwrite", action="store_true", default=None)
    overwrite.add_argument("--no-overwrite", dest="overwrite", action="store_false")

    template_parser = subparsers.add_parser("template", help="Manage stored prompt templates.")
    _add_log_options(template_parser, suppress_default=True)
    _add_root_option(template_parser)
    template_parser.add_argument("--store", type=Path, help="Template store file to use.")
    template_commands = template_parser.add_subparsers(dest="template_command", required=True)

    template_commands.add_parser("list", help="List stored templates.")
    show_parser = template_commands.add_parser("show", help="Print a template.")
    show_parser.add_argument("key", help="Template name or id.")

    add_parser = template_commands.add_parser("add", help="Store a new template.")
    add_parser.add_argument("name")
    add_parser.add_argument("--description", default="")
    add_content = add_parser.add_mutually_exclusive_group(required=True)
    add_content.add_argument("--content")
    add_content.add_argument("--file", type=Path)

    update_parser = template_commands.add_parser("update", help="Edit a stored template.")
    update_parser.add_argument("key", help="Template name or id.")
    update_parser.add_argument("--name")
    update_parser.add_argument("--description")
    update_content = update_parser.add_mutually_exclusive_group()
    update_content.add_argument("--content")
    update_content.add_argument("--file", type=Path)

    delete_parser = template_commands.add_parser("delete", help="Delete stored templates.")
    delete_parser.add_argument("keys", nargs="+", help="Template names or ids.")

    duplicate_parser = template_commands.add_parser("duplicate", help="Copy a stored template.")
    duplicate_parser.add_argument("key", help="Template name or id.")
    duplicate_parser.add_argument("--name", help="Name for the copy.")

    search_parser = template_commands.add_parser("search", help="Search stored templates.")
    search_parser.add_argument("term")

    models_parser = subparsers.add_parser("models", help="List models offered by the provider.")
    _add_log_options(models_parser, suppress_default=True)
    _add_root_option(models_parser)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service.")
    _add_log_options(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for pathgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet))

    try:
        if args.command == "plan":
            _run_plan(args)
        elif args.command == "run":
            _run_prompt(parser, args)
        elif args.command == "template":
            _run_template(args)
        elif args.command == "models":
            _run_models(args)
        elif args.command == "serve":
            from .service import run_service

            run_service(host=args.host, port=args.port)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except (PathgenError, ConfigError) as exc:
        parser.exit(1, f"pathgen {args.command} failed: {exc}\n")
    except OSError as exc:
        parser.exit(1, f"pathgen {args.command} failed: {exc}\nRun with --verbose for more details.\n")


def _run_plan(args: argparse.Namespace) -> None:
    orchestrator = Orchestrator()
    kinds = [PathKind(kind) for kind in args.kind] if args.kind else None
    if args.dry_run:
        plan = orchestrator.preview_paths(args.root, args.instructions, kinds=kinds)
        _print_plan(plan.items, fallback=plan.fallback)
        return

    outcome = orchestrator.run_generate_paths(
        args.root,
        args.instructions,
        kinds=kinds,
        selector=glob_selector(args.only),
    )
    if outcome.plan.fallback:
        print("Provider unavailable; used the fallback plan")
    for path in outcome.created:
        print(f"created {path}")
    for failure in outcome.failed:
        print(f"failed {failure.path}: {failure.reason}")
    if not outcome.created and not outcome.failed:
        print("Nothing created")


def _run_prompt(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    root = Path(args.root)
    template = _read_template_source(args, root)
    picks = _parse_choices(parser, template, args.choice)
    values = _parse_values(parser, args.values)
    targets = args.paths or None

    orchestrator = Orchestrator(progress=_print_progress)
    outcome = orchestrator.run_prompt(
        args.root,
        template,
        picks=picks,
        values=values,
        selector=glob_selector(args.only),
        targets=targets,
        overwrite=args.overwrite,
    )
    if outcome.plan.fallback:
        print("Provider unavailable; used the fallback plan")
    if not outcome.targets:
        print("No files to generate")
        return
    for failure in outcome.result.failed:
        print(f"failed {failure.path}: {failure.reason}")
    if outcome.result.fallbacks:
        print(f"fallback content written for {len(outcome.result.fallbacks)} file(s)")
    print(f"Done: {outcome.result.summary()}")


def _run_template(args: argparse.Namespace) -> None:
    store = TemplateStore(args.store or _load_config(Path(args.root)).store_path)
    command = args.template_command

    if command == "list":
        templates = store.list()
        if not templates:
            print("No templates stored")
        for template in templates:
            _print_template_line(template)
    elif command == "show":
        template = store.get(args.key)
        print(f"# {template.name}")
        if template.description:
            print(template.description)
        print(template.content)
    elif command == "add":
        content = _read_text(args.file) if args.file else args.content
        template = store.create(args.name, content, args.description)
        print(f"Saved template {template.name} ({template.id})")
    elif command == "update":
        content = _read_text(args.file) if args.file else args.content
        template = store.update(
            args.key, name=args.name, description=args.description, content=content
        )
        print(f"Updated template {template.name}")
    elif command == "delete":
        deleted = store.delete(args.keys)
        print(f"Deleted {len(deleted)} template(s)")
    elif command == "duplicate":
        template = store.duplicate(args.key, args.name)
        print(f"Saved template {template.name} ({template.id})")
    elif command == "search":
        matches = store.search(args.term)
        if not matches:
            print("No matching templates")
        for template in matches:
            _print_template_line(template)


def _run_models(args: argparse.Namespace) -> None:
    config = _load_config(Path(args.root))
    runner = shared_registry().resolve(config.llm)
    for model_id in runner.list_models():
        print(model_id)


def _load_config(root: Path) -> PathgenConfig:
    return load_config(root.expanduser())


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _read_template_source(args: argparse.Namespace, root: Path) -> str:
    if args.prompt is not None:
        return args.prompt
    if args.file is not None:
        return _read_text(args.file)
    store = TemplateStore(_load_config(root).store_path)
    return store.get(args.template).content


def _parse_values(parser: argparse.ArgumentParser, raw_values: Sequence[str]) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for raw in raw_values:
        name, sep, value = raw.partition("=")
        if not sep or not name.strip():
            parser.error(f"--set expects NAME=VALUE, got {raw!r}")
        values[name.strip()] = value
    return values


def _parse_choices(
    parser: argparse.ArgumentParser, template: str, raw_choices: Sequence[str]
) -> Dict[int, Selection]:
    tokens = choice_tokens(template)
    picks: Dict[int, Selection] = {}
    for raw in raw_choices:
        index_text, sep, value = raw.partition("=")
        try:
            index = int(index_text)
        except ValueError:
            index = -1
        if not sep or not 0 <= index < len(tokens):
            parser.error(
                f"--choice expects INDEX=VALUE with INDEX below {len(tokens)}, got {raw!r}"
            )
        if isinstance(tokens[index], RadioToken):
            picks[index] = [part.strip() for part in value.split(",") if part.strip()]
        else:
            picks[index] = value
    return picks


def _print_plan(items: Sequence[PathPlanItem], *, fallback: bool) -> None:
    if fallback:
        print("Provider unavailable; showing the fallback plan")
    if not items:
        print("The plan is empty")
    for item in items:
        suffix = "/" if item.kind is PathKind.DIRECTORY else ""
        print(f"{item.kind.value:<9} {item.path}{suffix}")


def _print_template_line(template: PromptTemplate) -> None:
    line = f"{template.id}  {template.name}"
    if template.description:
        line += f" - {template.description}"
    print(line)
    print(f"    {template.preview(_LISTING_PREVIEW)}".replace("\n", " "))


def _print_progress(done: int, total: int, message: str) -> None:
    print(f"[{done}/{total}] {message}")


if __name__ == "__main__":
    main(sys.argv[1:])
