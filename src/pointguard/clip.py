"""Clipboard relay: copy stdin to the clipboard, then clear it later.

This runs as its own process (``python -m pointguard clip``) so the
clipboard is cleared even after the ``show`` command has exited.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import IO

import pyperclip

from pointguard import ClipboardRelayUnavailable

logger = logging.getLogger(__name__)


def run_clip(
    stdin: IO[bytes],
    clip_time: int,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Copy the bytes read from ``stdin`` and clear them after ``clip_time``.

    The clipboard is only cleared if it still holds the copied value, so
    anything the user copied in the meantime is left alone.

    Args:
        stdin: Stream holding the secret as UTF-8 bytes.
        clip_time: Seconds to wait before clearing.
        sleep: Sleep function.

    Raises:
        ClipboardRelayUnavailable: If the clipboard cannot be used.
    """
    secret = stdin.read().decode("utf-8")
    try:
        pyperclip.copy(secret)
        sleep(clip_time)
        if pyperclip.paste() == secret:
            pyperclip.copy("")
            logger.debug("Cleared clipboard after %d seconds", clip_time)
    except pyperclip.PyperclipException as exc:
        raise ClipboardRelayUnavailable(f"Clipboard is not available: {exc}") from exc
