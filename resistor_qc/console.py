from __future__ import annotations

import logging
from typing import Iterable, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .bands import BandSet, color_name
from .classifier import ClassificationResult
from .nominal import format_ohms
from .record import FIELD_LABELS, FIELD_NAMES, BatchRecord

console = Console()

LOG_FORMAT = "%(name)s: %(message)s"


def configure_logging(level: str = "WARNING", err_console: Optional[Console] = None) -> None:
    """Route stdlib logging through rich on stderr. Only the first call installs a handler."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))
    if any(isinstance(h, RichHandler) for h in root.handlers):
        return
    handler = RichHandler(console=err_console or Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)


def _cell(record: BatchRecord, name: str) -> str:
    value = getattr(record, name)
    if isinstance(value, str):
        return escape(value)
    return f"{value:g}" if name in ("failure_rate", "tolerance") else f"{value:.6f}"


def render_record(record: BatchRecord, out: Optional[Console] = None) -> None:
    out = out or console
    table = Table(title="Batch Summary", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for name in FIELD_NAMES:
        table.add_row(FIELD_LABELS[name], _cell(record, name))
    out.print(table)


def render_records(records: Iterable[BatchRecord], title: str = "Data Log", out: Optional[Console] = None) -> int:
    """Print *records* as one table and return how many rows were shown."""
    out = out or console
    table = Table(title=title)
    for name in FIELD_NAMES:
        table.add_column(FIELD_LABELS[name], justify="left" if name in ("company", "date") else "right")
    count = 0
    for record in records:
        table.add_row(*(_cell(record, name) for name in FIELD_NAMES))
        count += 1
    if count:
        out.print(table)
    else:
        out.print("[yellow]No matching records.[/yellow]")
    return count


def render_bands(bands: BandSet, nominal: float, out: Optional[Console] = None) -> None:
    out = out or console
    line = f"Bands: [bold]{bands.describe()}[/bold]  Nominal: {format_ohms(nominal)}  Tolerance: ±{bands.tolerance_value * 100:g}%"
    if bands.temp_coefficient is not None:
        line += f"  TempCo: {bands.temp_coefficient_value} ppm/°C ({color_name(bands.temp_coefficient)})"
    out.print(line)


def render_verdicts(values: Iterable[float], results: Iterable[ClassificationResult], out: Optional[Console] = None) -> None:
    out = out or console
    for i, (value, res) in enumerate(zip(values, results), start=1):
        color = "green" if res.verdict == "PASS" else "red"
        out.print(f"[{color}]#{i:<3} value={value:g}\tverdict={res.verdict}\treason={res.reason or ''}[/{color}]")
