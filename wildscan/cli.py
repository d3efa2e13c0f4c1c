"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from wildscan.core.anchor import select_anchor
from wildscan.core.errors import WildscanError
from wildscan.core.pattern import parse_pattern, strip_leading_wildcards
from wildscan.core.service import ScanService

app = typer.Typer(help="Batch wildcard byte-signature search over binary files")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _build_service() -> ScanService:
    service = ScanService()
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


@app.command("scan")
def scan(
    file: Path = typer.Argument(..., help="File to scan"),
    patterns: list[str] | None = typer.Argument(None, help="Patterns such as '48 8B ?? 2E'"),
    set_ids: list[str] | None = typer.Option(None, "--set", help="Signature set ID (repeatable)"),
    decimal: bool = typer.Option(False, "--decimal", help="Print offsets in decimal"),
    require_all: bool = typer.Option(False, "--require-all", help="Exit 1 if any signature is not found"),
) -> None:
    """Report the first offset of every pattern in FILE."""
    try:
        service = _build_service()
        report = service.scan_file(file, patterns=patterns or [], set_ids=set_ids or [])
    except WildscanError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    for hit in report.hits:
        if hit.offset is None:
            typer.echo(f"{hit.signature.name}: not found")
        elif decimal:
            typer.echo(f"{hit.signature.name}: {hit.offset}")
        else:
            typer.echo(f"{hit.signature.name}: 0x{hit.offset:X}")

    if require_all and report.missing:
        typer.echo(f"{len(report.missing)} of {len(report.hits)} signatures not found", err=True)
        raise typer.Exit(code=1)


@app.command("sets")
def list_sets() -> None:
    """List available signature sets and their signatures."""
    try:
        service = _build_service()
        signature_sets = service.list_signature_sets()
        if not signature_sets:
            typer.echo("No signature sets loaded")
            raise typer.Exit(code=1)

        for signature_set in signature_sets:
            typer.echo(f"{signature_set.id}: {signature_set.name}")
            for signature in signature_set.signatures:
                typer.echo(f"  {signature.name}: {signature.pattern}")
    except WildscanError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("inspect")
def inspect(pattern: str = typer.Argument(..., help="Pattern such as '?? 48 ?? 2E'")) -> None:
    """Show how a pattern is normalized and which anchor it is searched by."""
    try:
        parsed = parse_pattern(pattern)
    except WildscanError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    stripped = strip_leading_wildcards(parsed)
    record = select_anchor(stripped.pattern)
    typer.echo(f"Pattern: {parsed}")
    typer.echo(f"Stripped: {stripped.pattern} (leading wildcards removed: {stripped.strip_count})")
    if record.anchor:
        typer.echo(f"Anchor: {record.anchor.hex(' ').upper()} at offset {record.offset}")
    else:
        typer.echo("Anchor: <none> (pattern has no known bytes and never matches)")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
