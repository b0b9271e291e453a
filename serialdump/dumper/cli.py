"""Command-line interface for decoding serialization streams."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from serialdump.dumper.report import ObjectReport, StreamSummary, build_report, summarize
from serialdump.stream.decoder import StreamDecoder
from serialdump.stream.errors import StreamError
from serialdump.stream.model import ClassDescriptorChain


@click.group()
def cli() -> None:
    """Java Object Serialization Stream decoder."""


@contextmanager
def _verbose_logging(verbose: bool) -> Iterator[None]:
    """Log decoder tracing to stderr for the duration of the block."""
    if not verbose:
        yield
        return

    log = logging.getLogger("serialdump")
    handler = RichHandler(console=Console(stderr=True), show_time=False, show_path=False, markup=False)
    level = log.level
    log.addHandler(handler)
    log.setLevel(logging.DEBUG)
    try:
        yield
    finally:
        log.removeHandler(handler)
        log.setLevel(level)


def _decode(
    input_file: str, max_depth: int | None, verbose: bool
) -> tuple[list[ClassDescriptorChain], StreamDecoder]:
    """Decode a stream file, exiting with status 1 on failure."""
    with open(input_file, "rb") as f:
        data = f.read()

    decoder = StreamDecoder(data, max_depth=max_depth)
    try:
        with _verbose_logging(verbose):
            objects, ok = decoder.decode()
    except StreamError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if not ok:
        print("Invalid stream header, should start with 0xACED 0x0005")
        sys.exit(1)

    return objects, decoder


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Serialized stream file")
@click.option("--class", "-c", "class_name", default=None, help="Only show classes with this name")
@click.option("--field", "-f", "field_name", default=None, help="Only show fields with this name")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.option("--max-depth", type=int, default=None, help="Maximum element nesting depth")
@click.option("--verbose", "-v", is_flag=True, help="Log every decoded element")
def dump(
    input_file: str,
    class_name: str | None,
    field_name: str | None,
    output_json: bool,
    max_depth: int | None,
    verbose: bool,
) -> None:
    """Decode a stream and print its objects."""
    objects, _ = _decode(input_file, max_depth, verbose)
    reports = build_report(objects, class_name=class_name, field_name=field_name)

    if output_json:
        print(json.dumps([report.to_dict() for report in reports], indent=2))
    else:
        _output_tree(reports)


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Serialized stream file")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.option("--max-depth", type=int, default=None, help="Maximum element nesting depth")
def info(input_file: str, output_json: bool, max_depth: int | None) -> None:
    """Display stream statistics."""
    objects, decoder = _decode(input_file, max_depth, False)
    summary = summarize(objects, decoder.handles)

    if output_json:
        print(summary.to_json(indent=2))
    else:
        _output_summary(summary)


def _add_classes(node: Tree, report: ObjectReport) -> None:
    for cls in report.classes:
        flags = " | ".join(cls.flags) or "no flags"
        branch = node.add(f"[bold cyan]{escape(cls.name)}[/bold cyan] [dim]{flags}[/dim]")
        for fr in cls.fields:
            label = escape(fr.name) if fr.name else "[dim]<entry>[/dim]"
            if isinstance(fr.value, ObjectReport):
                _add_classes(branch.add(f"{label}:"), fr.value)
            else:
                branch.add(f"{label}: [yellow]{escape(repr(fr.value))}[/yellow]")


def _output_tree(reports: list[ObjectReport]) -> None:
    """Output objects as rich trees."""
    console = Console()

    if not reports:
        console.print("[dim]No objects[/dim]")
        return

    for index, report in enumerate(reports):
        tree = Tree(f"[bold]Object {index}[/bold]")
        _add_classes(tree, report)
        console.print(tree)


def _output_summary(summary: StreamSummary) -> None:
    """Output stream statistics using rich tables."""
    console = Console()

    console.print("[bold cyan]Stream[/bold cyan]")
    stream_table = Table(show_header=False, box=None, padding=(0, 2, 0, 2))
    stream_table.add_column("Label", style="dim")
    stream_table.add_column("Value", style="white")
    stream_table.add_row("Objects", str(summary.objects))
    stream_table.add_row("Handles", str(summary.handles))
    console.print(stream_table)
    console.print()

    console.print("[bold cyan]Classes[/bold cyan]")
    class_table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    class_table.add_column("Name", style="white")
    class_table.add_column("Instances", style="yellow", justify="right")
    for name, count in summary.class_counts.items():
        class_table.add_row(escape(name), str(count))
    console.print(class_table)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
