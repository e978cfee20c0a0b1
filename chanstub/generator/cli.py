"""Command-line interface for chanstub code generation."""

from __future__ import annotations

import json
import logging
import sys
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.table import Table

from chanstub.generator.errors import GenerationError
from chanstub.generator.options import ContextFlavor, PathsMode, parse_parameter
from chanstub.generator.plugin import directory_sink, generate, handle_request
from chanstub.generator.shapes import plan_service
from chanstub.generator.types import CodeGenRequest

if TYPE_CHECKING:
    from chanstub.generator.types import FileDescriptor


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log progress to stderr")
def cli(verbose: bool) -> None:
    """Channel-based gRPC client stub generator for Go."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _read_request(input_file: str) -> CodeGenRequest:
    with open(input_file, encoding="utf-8") as f:
        return CodeGenRequest.from_json(f.read())


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Input request file (JSON)")
@click.option("--output", "-o", "output_path", default=".", help="Output directory")
@click.option(
    "--paths",
    type=click.Choice([m.value for m in PathsMode]),
    default=None,
    help="Output layout, overrides the request parameter (default: import)",
)
@click.option(
    "--context",
    "context_flavor",
    type=click.Choice([c.value for c in ContextFlavor]),
    default=None,
    help="Package providing context.Context (default: x/net)",
)
def gen(input_file: str, output_path: str, paths: str | None, context_flavor: str | None) -> None:
    """Generate channel client stubs from a request file."""
    request = _read_request(input_file)

    try:
        options = parse_parameter(request.parameter).override(paths=paths, context=context_flavor)
        emitted = generate(request, directory_sink(output_path), options)
    except GenerationError as e:
        print(f"Error: {e}")
        sys.exit(1)

    for name in emitted:
        print(f"Generated {name}")


@cli.command()
def plugin() -> None:
    """Read a JSON request on stdin and write the JSON response to stdout."""
    request = CodeGenRequest.from_json(sys.stdin.read())
    response = handle_request(request)
    sys.stdout.write(response.to_json(indent=2))
    sys.stdout.write("\n")


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Input request file (JSON)")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info(input_file: str, output_json: bool) -> None:
    """Display services, call shapes and stream indices."""
    request = _read_request(input_file)

    try:
        units = request.units_to_generate()
    except GenerationError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if output_json:
        _output_json(units)
    else:
        _output_plain(units)


def _method_rows(fd: FileDescriptor) -> list[dict]:
    rows = []
    for sd in fd.services:
        wire_name = fd.qualify(sd.name)
        for plan in plan_service(sd):
            rows.append(
                {
                    "service": wire_name,
                    "method": plan.method.name,
                    "shape": plan.shape.value,
                    "stream_index": plan.stream_index,
                    "path": f"/{wire_name}/{plan.method.name}",
                }
            )
    return rows


def _output_json(units: list[FileDescriptor]) -> None:
    """Output method info as JSON."""
    data = {fd.name: _method_rows(fd) for fd in units}
    print(json.dumps(data, indent=2))


def _output_plain(units: list[FileDescriptor]) -> None:
    """Output method info using rich text formatting."""
    console = Console()

    for fd in units:
        console.print(f"[bold cyan]{fd.name}[/bold cyan]")
        if not fd.services:
            console.print("[dim]no services[/dim]")
            console.print()
            continue

        table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
        table.add_column("Service", style="white")
        table.add_column("Method", style="white")
        table.add_column("Shape", style="yellow")
        table.add_column("Stream", style="green", justify="right")
        table.add_column("Path", style="dim")

        for row in _method_rows(fd):
            stream = "" if row["stream_index"] is None else str(row["stream_index"])
            table.add_row(row["service"], row["method"], row["shape"], stream, row["path"])

        console.print(table)
        console.print()


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
