"""Thread-safe user-facing notifications for render jobs."""

from __future__ import annotations

import threading
from typing import List, Optional

from rich.console import Console
from rich.markup import escape


class RenderLogger:
    """Serialises writes from concurrent render jobs onto Rich consoles.

    Notifications go to *console* (stdout by default), errors to
    *error_console* (stderr by default). ``error_code`` is the highest code
    any job has reported.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        error_console: Optional[Console] = None,
    ) -> None:
        self._console = console or Console(highlight=False)
        self._error_console = error_console or Console(stderr=True, highlight=False)
        self._lock = threading.Lock()
        self._error_code = 0
        self._errors: List[str] = []

    @property
    def error_code(self) -> int:
        with self._lock:
            return self._error_code

    @property
    def errors(self) -> List[str]:
        with self._lock:
            return list(self._errors)

    def info(self, message: str) -> None:
        with self._lock:
            self._console.print(escape(message))

    def error(self, message: str, code: int = 0) -> None:
        with self._lock:
            if code:
                self._error_code = max(self._error_code, code)
            self._errors.append(message)
            self._error_console.print(f"[bold red]{escape(message)}[/bold red]")
