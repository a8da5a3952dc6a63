import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from pkp_report.config import settings
from pkp_report.models.report import ReportInput, suggested_filename
from pkp_report.services.loaders import load_report
from pkp_report.services.xlsx.layout import SHEET_SUMMARY, TABLE_SHEETS, generate

app = typer.Typer(add_completion=False)
console = Console()
logger = logging.getLogger("pkp_report")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging.")) -> None:
    """PKP quality report workbook export."""
    level = logging.DEBUG if verbose else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_or_exit(path: Path) -> ReportInput:
    try:
        return load_report(path)
    except (ValidationError, ValueError) as e:
        console.print(f"[red]ERROR[/red] invalid report input {path}:\n{escape(str(e))}")
        raise typer.Exit(code=1) from e


@app.command()
def export(
    input_path: Path = typer.Option(..., "--input", "-i", exists=True, file_okay=True, dir_okay=False),
    out: Path | None = typer.Option(None, "--out", "-o", help="Default: <pkp_name>_<date>.xlsx in CWD."),
) -> None:
    """Render a report document (YAML/JSON) into the PKP workbook."""
    report = _load_or_exit(input_path)
    out_path = out if out is not None else Path.cwd() / suggested_filename(report.root)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with out_path.open("wb") as f:
            generate(report, f, layout=settings.layout())
    except Exception as e:
        logger.debug("export failed", exc_info=True)
        console.print(f"[red]ERROR[/red] failed to write {out_path}: {type(e).__name__}: {escape(str(e))}")
        # a half-written workbook is not a valid deliverable
        out_path.unlink(missing_ok=True)
        raise typer.Exit(code=1) from e

    console.print(f"[green]OK[/green] wrote {out_path}")


@app.command()
def validate(
    input_path: Path = typer.Option(..., "--input", "-i", exists=True, file_okay=True, dir_okay=False),
) -> None:
    """Validate a report document and show the row count per sheet."""
    report = _load_or_exit(input_path)

    table = Table(title=f"{report.root.pkp_name}")
    table.add_column("Sheet")
    table.add_column("Records", justify="right")
    table.add_row(SHEET_SUMMARY, str(len(report.pks)))
    for t in TABLE_SHEETS:
        table.add_row(t.name, str(len(getattr(report, t.source))))
    console.print(table)
    console.print("[green]OK[/green] schema validated")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1"),
    port: int = typer.Option(8000),
    reload: bool = typer.Option(False),
) -> None:
    """Run API server."""
    import uvicorn

    uvicorn.run("pkp_report.api:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
