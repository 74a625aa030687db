"""Application entry point: input registry and command line runner."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from importlib import import_module
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class InputSpec:
    name: str
    section: str
    description: str
    sample_config: str
    gather: Callable


INPUTS: dict[str, InputSpec] = {}


def register_input(name, *, section, description, sample_config):
    def decorator(func):
        INPUTS[name] = InputSpec(name, section, description, sample_config, func)
        return func

    return decorator


def load_inputs() -> dict[str, InputSpec]:
    """Import every module in ``jira_kpis/inputs`` so each one registers itself."""
    inputs_dir = Path(__file__).parent / "inputs"
    for py in sorted(inputs_dir.glob("[!_]*.py")):
        import_module(f"jira_kpis.inputs.{py.stem}")
    return INPUTS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jira-kpis",
        description="Gather Jira and cron KPIs and print them as metric records.",
    )
    parser.add_argument("-c", "--config", help="YAML settings file")
    parser.add_argument(
        "-i",
        "--input",
        action="append",
        dest="inputs",
        metavar="NAME",
        help="Run only this input (repeatable); default: every input configured in the file",
    )
    parser.add_argument(
        "--format",
        choices=("line", "table"),
        default="line",
        help="Output format: InfluxDB line protocol or a text table (default: line)",
    )
    parser.add_argument("--sample-config", action="store_true", help="Print a sample settings file and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    from jira_kpis.core.config_loader import load_settings
    from jira_kpis.core.errors import ConfigurationError, JiraKpisError
    from jira_kpis.output.accumulator import MemoryAccumulator

    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    registry = load_inputs()
    unknown = [name for name in args.inputs or [] if name not in registry]
    if unknown:
        parser.error(f"unknown input(s): {', '.join(unknown)} (available: {', '.join(sorted(registry))})")

    if args.sample_config:
        names = args.inputs or sorted(registry)
        for name in names:
            print(f"# {name}: {registry[name].description}")
            print(registry[name].sample_config)
        return 0

    if not args.config:
        parser.error("--config is required unless --sample-config is given")

    try:
        settings = load_settings(args.config)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return 2

    if args.inputs:
        selected = [registry[name] for name in args.inputs]
        missing = [spec.name for spec in selected if getattr(settings, spec.section) is None]
        if missing:
            logger.error("Configuration error: no settings for input(s) %s", ", ".join(missing))
            return 2
    else:
        selected = [
            spec for _, spec in sorted(registry.items()) if getattr(settings, spec.section) is not None
        ]
    if not selected:
        logger.warning("No inputs configured in %s", args.config)

    acc = MemoryAccumulator()
    for spec in selected:
        try:
            spec.gather(settings, acc)
        except JiraKpisError as exc:
            logger.error("Input %s failed: %s", spec.name, exc)
            acc.add_error(exc)

    if args.format == "table":
        df = acc.to_dataframe()
        if not df.empty:
            print(df.to_string(index=False))
    else:
        sys.stdout.write(acc.to_line_protocol())

    return 1 if acc.errors else 0

