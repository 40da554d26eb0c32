"""Interrupt handling.

A single :class:`CancellationToken` is created by the CLI, set from the SIGINT
handler, and handed to the pipeline. Running git processes are never killed;
the token only changes the final exit message and status.
"""

from __future__ import annotations

import signal
import threading
from typing import Any


class CancellationToken:
    """Thread-safe, set-once interrupt flag."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


def install_interrupt_handler(token: CancellationToken) -> Any:
    """Route SIGINT to *token* and return the previous handler."""

    def _handler(signum: int, frame: object) -> None:
        token.cancel()

    return signal.signal(signal.SIGINT, _handler)
