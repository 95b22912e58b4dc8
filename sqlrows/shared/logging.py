"""Rich-based logging for mock setup diagnostics."""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.theme import Theme

_THEME = Theme({"error": "bold red", "debug": "dim"})

# All diagnostics go to stderr so CLI payloads on stdout stay parseable.
# Highlighting is off so column names such as "UPDATE_TS" print verbatim.
_stderr_console = Console(stderr=True, theme=_THEME, highlight=False)


@dataclass(slots=True)
class Logger:
    """Setup logger: failures always, parsed-column detail only when verbose."""

    verbose: bool = False

    def error(self, message: str) -> None:
        _stderr_console.print(message, style="error", markup=False)

    def debug(self, message: str) -> None:
        if self.verbose:
            _stderr_console.print(message, style="debug", markup=False)


def get_logger(verbose: bool = False) -> Logger:
    """Return a Logger for the requested verbosity."""
    return Logger(verbose=verbose)
