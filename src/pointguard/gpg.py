"""Decrypt secrets by shelling out to gpg."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Final

from pointguard import DecryptionFailed

logger = logging.getLogger(__name__)

GPG_COMMAND: Final = "gpg"


def decrypt(path: Path) -> str:
    """Decrypt ``path`` and return its plaintext.

    Args:
        path: Encrypted secret file.

    Returns:
        str: Decrypted text, exactly as gpg produced it.

    Raises:
        DecryptionFailed: If gpg is not installed, exits non-zero, or
            produces output that is not UTF-8.
    """
    cmd = [GPG_COMMAND, "--quiet", "--batch", "--decrypt", str(path)]
    try:
        proc = subprocess.run(
            cmd,
            check=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except FileNotFoundError as exc:
        raise DecryptionFailed(f"Command not found: {GPG_COMMAND}") from exc
    except subprocess.CalledProcessError as exc:
        err = exc.stderr.decode("utf-8", "replace").strip()
        raise DecryptionFailed(f"Could not decrypt '{path}': {err}") from exc

    logger.debug("Decrypted %s", path)
    try:
        return proc.stdout.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecryptionFailed(f"Decrypted content of '{path}' is not UTF-8") from exc
