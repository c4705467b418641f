from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from rich.console import Console

logger = logging.getLogger(__name__)

_console = Console()


@contextmanager
def task_status(message: str, *, console: Optional[Console] = None) -> Iterator[None]:
    """Spinner around a long-running synchronous call.

    The spinner only redraws the terminal; the wrapped call still runs to
    completion on the calling thread.
    """

    console = console or _console
    logger.info("%s", message)
    with console.status(f"[grey50]{message}[/grey50]", spinner="dots"):
        yield
    console.print(f"[green]✔[/green] {message.rstrip('.')}")
