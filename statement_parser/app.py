#!/usr/bin/env python3
"""
CLI interface for the bank statement parser.
"""
import typer
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from statement_parser.core.anchors import Strictness
from statement_parser.core.detectors import detect_template, resolve_template
from statement_parser.core.errors import StatementParseError
from statement_parser.core.export import to_csv
from statement_parser.core.loader import extract_raw_text
from statement_parser.core.runner import parse_statement
from statement_parser.tools.debug_rows import print_rows

app = typer.Typer(help="Bank statement parser")
console = Console()


def _read_source(source: Path, text_input: bool) -> str:
    """Raw statement text from a PDF, or from a text file with --text."""
    if not source.exists():
        console.print(f"[red]Error: File not found: {source}[/red]")
        raise typer.Exit(1)

    if text_input:
        return source.read_text(encoding="utf-8")
    return extract_raw_text(source)


def _resolve_template(raw_text: str, template: Optional[str]) -> str:
    if template:
        return template

    detected = resolve_template(raw_text)
    if not detected:
        console.print("[red]Error: Could not detect template for this statement[/red]")
        raise typer.Exit(1)
    return detected


@app.command()
def parse(
    source: Path = typer.Argument(..., help="Path to statement PDF (or extracted text with --text)"),
    output: Optional[Path] = typer.Option(None, "--out", "-o", help="Output file path (.csv or .json)"),
    output_format: str = typer.Option("csv", "--format", "-f", help="Output format: csv or json"),
    template: Optional[str] = typer.Option(None, "--template", "-t", help="Template ID to use"),
    text_input: bool = typer.Option(False, "--text", help="SOURCE is already-extracted statement text"),
    collect_warnings: bool = typer.Option(False, "--collect-warnings", help="Report every missing header field, not just the first"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output")
):
    """Parse a bank statement into CSV or JSON."""
    if output and output.suffix.lower() == ".json":
        output_format = "json"
    output_format = output_format.lower()
    if output_format not in ("csv", "json"):
        console.print(f"[red]Error: Unsupported format: {output_format}[/red]")
        raise typer.Exit(1)

    strictness = Strictness.COLLECT_WARNINGS if collect_warnings else Strictness.FAIL_FAST

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True
        ) as progress:
            task = progress.add_task("Reading statement...", total=None)
            raw_text = _read_source(source, text_input)

            if not template:
                progress.update(task, description="Detecting template...")
            template = _resolve_template(raw_text, template)

            progress.update(task, description="Extracting transactions...")
            result = parse_statement(raw_text, template, strictness, verbose)

        if output_format == "json":
            rendered = result.model_dump_json(indent=2, by_alias=True)
        else:
            rendered = to_csv(result)

        if output:
            output.write_text(rendered, encoding="utf-8")
            console.print(
                f"[green]✓ Parsed {len(result.transactions)} transactions! "
                f"Output written to: {output}[/green]"
            )
        else:
            typer.echo(rendered.rstrip("\n"))

    except (StatementParseError, ValueError) as e:
        console.print(f"[red]Error parsing statement: {escape(str(e))}[/red]")
        if verbose:
            import traceback
            console.print(traceback.format_exc())
        raise typer.Exit(1)


@app.command()
def detect(
    source: Path = typer.Argument(..., help="Path to statement PDF"),
    text_input: bool = typer.Option(False, "--text", help="SOURCE is already-extracted statement text")
):
    """Detect which template matches a statement."""
    try:
        template = detect_template(_read_source(source, text_input))
    except (StatementParseError, ValueError) as e:
        console.print(f"[red]Error detecting template: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if template:
        console.print(f"[green]Detected template: {template}[/green]")
    else:
        console.print("[red]No matching template found[/red]")
        raise typer.Exit(1)


@app.command()
def rows(
    source: Path = typer.Argument(..., help="Path to statement PDF"),
    template: Optional[str] = typer.Option(None, "--template", "-t", help="Template ID to use"),
    text_input: bool = typer.Option(False, "--text", help="SOURCE is already-extracted statement text")
):
    """Show how the transaction table is split into rows."""
    try:
        raw_text = _read_source(source, text_input)
        print_rows(raw_text, _resolve_template(raw_text, template), console)
    except (StatementParseError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command()
def validate(
    json_path: Path = typer.Argument(..., help="Path to JSON file to validate")
):
    """Validate a JSON file against the schema."""
    from statement_parser.models.schema import StatementDocument

    try:
        data = StatementDocument.model_validate_json(json_path.read_text(encoding="utf-8"))
        console.print("[green]✓ JSON is valid[/green]")
        console.print(f"Account: {data.header.account_number} ({data.header.currency})")
        console.print(f"Period: {data.header.period_start} - {data.header.period_end}")
        console.print(f"Transactions: {len(data.transactions)}")
    except Exception as e:
        console.print(f"[red]Validation failed: {escape(str(e))}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
