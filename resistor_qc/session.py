from __future__ import annotations

import logging
import pathlib
from typing import Optional

from rich.console import Console
from rich.markup import escape

from .bands import BAND_LAYOUTS, SUPPORTED_BAND_COUNTS, BandSet
from .classifier import classify_sample, tolerance_window
from .config import AppConfig
from .console import render_bands, render_record, render_records, render_verdicts
from .errors import InvalidSelection
from .logging_utils import append_record, check_store, filter_by_supplier, read_records, select_store
from .nominal import nominal_from_bands
from .prompts import Prompter
from .record import BatchRecord, evaluate_batch
from .simulator import SampleSimulator

logger = logging.getLogger(__name__)

OPERATIONS = [
    "Input resistor batch",
    "Input batch and store data in log",
    "View data log",
    "View data log (filtered by supplier)",
]
BAND_MENU = [f"{n} Band Resistors" for n in SUPPORTED_BAND_COUNTS]


class Session:
    """One interactive run: a single batch entry or a single log review."""

    def __init__(
        self,
        cfg: AppConfig,
        prompter: Prompter,
        out: Console,
        simulator: Optional[SampleSimulator] = None,
    ):
        self.cfg = cfg
        self.prompter = prompter
        self.out = out
        self.simulator = simulator

    def run(self) -> Optional[BatchRecord]:
        """Ask for an operation and perform it. UserExit propagates from any menu."""
        choice = self.prompter.select("Select operation", OPERATIONS)
        if choice == 1:
            record = self.enter_batch()
            render_record(record, self.out)
            return record
        if choice == 2:
            path = self._ask_store(must_exist=False)
            check_store(path, self.cfg.sample.formula)
            record = self.enter_batch()
            render_record(record, self.out)
            append_record(path, record, formula=self.cfg.sample.formula)
            self.out.print(f"[green]Record stored in {path}[/green]")
            return record
        if choice == 3:
            self.review(self._ask_store(must_exist=True))
            return None
        path = self._ask_store(must_exist=True)
        supplier = self._ask_supplier()
        self.review(path, supplier)
        return None

    def enter_batch(self) -> BatchRecord:
        company = self._ask_supplier()
        date = self.prompter.ask_date()

        band_count = SUPPORTED_BAND_COUNTS[self.prompter.select("Select resistor type", BAND_MENU) - 1]
        layout = BAND_LAYOUTS[band_count]
        indices = [self.prompter.ask_band(role, n) for n, role in enumerate(layout, start=1)]
        bands = BandSet.from_indices(band_count, indices)
        nominal = nominal_from_bands(bands)
        render_bands(bands, nominal, self.out)

        size = self.cfg.sample.size
        if self.simulator is not None:
            values = self.simulator.sample(nominal, size)
            logger.info("Generated %d demo measurements around %s", size, nominal)
        else:
            values = [self.prompter.ask_measurement(i) for i in range(1, size + 1)]

        window = tolerance_window(nominal, bands.tolerance_value)
        render_verdicts(values, classify_sample(values, window), self.out)

        return evaluate_batch(company, date, bands, values, sample_size=size, formula=self.cfg.sample.formula)

    def review(self, path: pathlib.Path, supplier: Optional[str] = None) -> int:
        return review_log(path, supplier, self.out)

    def _ask_supplier(self) -> str:
        suppliers = self.cfg.suppliers
        return suppliers[self.prompter.select("Select supplier", suppliers) - 1]

    def _ask_store(self, must_exist: bool) -> pathlib.Path:
        while True:
            name = self.prompter.ask_text("Please input the name of the log file for the application to use: ")
            try:
                return select_store(name, self.cfg.store.directory, self.cfg.store.extension, must_exist=must_exist)
            except InvalidSelection as e:
                self.out.print(f"[yellow]{escape(str(e))}[/yellow]")


def review_log(path: pathlib.Path, supplier: Optional[str], out: Console) -> int:
    records = read_records(path)
    if supplier is not None:
        records = filter_by_supplier(records, supplier)
        title = f"Data Log: {escape(supplier)}"
    else:
        title = "Data Log"
    return render_records(records, title=title, out=out)
