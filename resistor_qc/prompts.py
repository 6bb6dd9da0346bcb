from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from .bands import BandRole, palette_names
from .errors import InvalidDate, InvalidMeasurement, InvalidSelection, UserExit
from .parsing import parse_bounded_int, parse_date, parse_measurement

logger = logging.getLogger(__name__)

RULE = "=" * 54


class Prompter:
    """Interactive input over a rich Console.

    Every ask_* method loops until the parser in :mod:`resistor_qc.parsing`
    accepts the answer. *input_func* replaces ``console.input`` so sessions
    can be scripted.
    """

    def __init__(self, console: Console, input_func: Optional[Callable[[str], str]] = None):
        self.console = console
        self._input = input_func or (lambda prompt: console.input(prompt))

    def _read(self, prompt: str) -> str:
        try:
            return self._input(prompt)
        except EOFError:
            raise UserExit() from None

    def _retry(self, message: str) -> None:
        self.console.print(f"[yellow]{escape(message)}[/yellow]")

    def select(self, title: str, options: Sequence[str], exit_option: bool = True) -> int:
        """Show a 1-indexed menu and return the chosen option number.

        With *exit_option* an "Exit" entry is appended; choosing it raises UserExit.
        """
        entries = list(options) + (["Exit"] if exit_option else [])
        while True:
            self.console.print(RULE)
            if title:
                self.console.print(f"[bold]{escape(title)}[/bold]")
            for i, name in enumerate(entries, start=1):
                self.console.print(f"{i} - {escape(name)}")
            self.console.print(RULE)
            raw = self._read("> ")
            try:
                choice = parse_bounded_int(raw, 1, len(entries))
            except InvalidSelection as e:
                logger.debug("Rejected menu input %r: %s", raw, e)
                self._retry(str(e))
                continue
            if exit_option and choice == len(entries):
                raise UserExit()
            return choice

    def ask_band(self, role: BandRole, band_number: int) -> int:
        """Return the 0-based palette index chosen for band *band_number*."""
        names = palette_names(role)
        while True:
            for i, name in enumerate(names, start=1):
                self.console.print(f"{i} - {name}")
            raw = self._read(f"Please input the colour of band {band_number} ({role.value}) using the table provided: ")
            try:
                return parse_bounded_int(raw, 1, len(names)) - 1
            except InvalidSelection as e:
                self._retry(str(e))

    def ask_date(self) -> str:
        while True:
            raw = self._read("Please input the date in form ddMMyyyy (e.g. 07062020 is 7 June 2020): ")
            try:
                return parse_date(raw)
            except InvalidDate as e:
                self._retry(str(e))

    def ask_measurement(self, unit_number: int) -> float:
        while True:
            raw = self._read(f"Please input the actual resistance for resistor {unit_number}: ")
            try:
                return parse_measurement(raw)
            except InvalidMeasurement as e:
                self._retry(str(e))

    def ask_text(self, prompt: str) -> str:
        while True:
            raw = self._read(prompt).strip()
            if raw:
                return raw
            self._retry("A value is required, please try again.")
