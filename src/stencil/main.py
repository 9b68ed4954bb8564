"""Command line interface for inspecting and rendering templates."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .builder import TemplateBuilder
from .components import build_component_registry
from .config import DEFAULT_OUTPUT_FILENAME_TEMPLATE
from .log import configure_logging
from .settings import available_settings_profiles, resolve_settings
from .variables import load_vars_file, parse_var_pairs

logger = logging.getLogger(__name__)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--component-plugin",
        action="append",
        default=[],
        help="Additional component plugin module path (repeatable).",
    )
    parser.add_argument(
        "--settings-profile",
        choices=available_settings_profiles(),
        default="default",
        help="Built-in settings profile name.",
    )
    parser.add_argument(
        "--settings-file",
        type=Path,
        default=None,
        help="JSON file with settings overrides.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug details.")


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stencil", description="Render JSON templates to PDF.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    variables_parser = subparsers.add_parser(
        "variables", help="List the variables a template needs."
    )
    variables_parser.add_argument("template", type=Path, help="Template JSON file.")
    _add_common_arguments(variables_parser)

    render_parser = subparsers.add_parser("render", help="Render a template to PDF.")
    render_parser.add_argument("template", type=Path, help="Template JSON file.")
    render_parser.add_argument(
        "--var",
        action="append",
        default=[],
        help="Variable value in key=value form; JSON literals are decoded (repeatable).",
    )
    render_parser.add_argument(
        "--vars-file",
        type=Path,
        default=None,
        help="JSON object file with variable values. --var entries override it.",
    )
    render_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output PDF path. Default: <template>.pdf",
    )
    _add_common_arguments(render_parser)

    components_parser = subparsers.add_parser("components", help="Inspect component kinds.")
    components_subparsers = components_parser.add_subparsers(dest="components_command", required=True)
    list_parser = components_subparsers.add_parser("list", help="List component kinds.")
    list_parser.add_argument(
        "--component-plugin",
        action="append",
        default=[],
        help="Additional component plugin module path (repeatable).",
    )
    return parser


def _load_builder(args: argparse.Namespace) -> TemplateBuilder:
    registry, warnings = build_component_registry(plugin_modules=args.component_plugin)
    for warning in warnings:
        print(warning, file=sys.stderr)
    settings = resolve_settings(profile=args.settings_profile, settings_file=args.settings_file)
    builder = TemplateBuilder(registry=registry, settings=settings)
    return builder.load_components_file(args.template)


def _run_variables(args: argparse.Namespace) -> int:
    builder = _load_builder(args)
    print(json.dumps(builder.named_properties_list(), indent=2, sort_keys=True))
    return 0


def _run_render(args: argparse.Namespace) -> int:
    values = load_vars_file(args.vars_file) if args.vars_file is not None else {}
    values.update(parse_var_pairs(args.var))
    builder = _load_builder(args)
    missing = sorted(name for name in builder.named_properties_list() if name not in values)
    if missing:
        logger.info("no value supplied for: %s", ", ".join(missing))
    builder = builder.set_named_properties(values)
    builder = builder.apply_components()

    destination = args.output
    if destination is None:
        destination = Path(DEFAULT_OUTPUT_FILENAME_TEMPLATE.format(template=args.template.stem))
    destination.write_bytes(builder.write_to_pdf())
    print(f"Rendered template at: {destination}")
    return 0


def _run_components(args: argparse.Namespace) -> int:
    registry, warnings = build_component_registry(plugin_modules=args.component_plugin)
    for warning in warnings:
        print(warning, file=sys.stderr)
    for spec in registry.list_specs():
        aliases = f" (aliases: {', '.join(spec.aliases)})" if spec.aliases else ""
        print(f"{spec.kind}\t{spec.title}{aliases}")
    return 0


def main(argv: list[str] | None = None) -> int:
    argv_list = list(sys.argv[1:] if argv is None else argv)
    parser = _build_arg_parser()
    args = parser.parse_args(argv_list)
    configure_logging(getattr(args, "verbose", False))

    try:
        if args.command == "variables":
            return _run_variables(args)
        if args.command == "render":
            return _run_render(args)
        if args.command == "components":
            return _run_components(args)
    except (OSError, ValueError) as exc:
        parser.exit(status=2, message=f"error: {exc}\n")

    parser.exit(status=2, message=f"error: unknown command '{args.command}'\n")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
