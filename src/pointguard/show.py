"""Reveal a secret or browse the store: the ``show`` command."""

from __future__ import annotations

import logging
import subprocess
import sys
from collections.abc import Callable
from pathlib import Path, PurePath
from typing import IO, Literal, Protocol

from pointguard import (
    DEFAULT_TITLE,
    SECRET_SUFFIX,
    ClipboardRelayUnavailable,
    EmptySecretContent,
    NotFound,
)
from pointguard import gpg
from pointguard.render import RenderOptions, render_tree
from pointguard.settings import Settings
from pointguard.tree import build_tree
from pointguard.walker import HiddenFilter

logger = logging.getLogger(__name__)


class Relay(Protocol):
    """The part of a spawned relay process ``show`` talks to."""

    stdin: IO[bytes] | None
    returncode: int | None


Decrypt = Callable[[Path], str]
SpawnRelay = Callable[[Settings], Relay]


def spawn_clip_relay(settings: Settings) -> subprocess.Popen[bytes]:
    """Launch ``python -m pointguard clip`` detached, with a piped stdin.

    The relay lives in its own session so it keeps running, and clears
    the clipboard, after this process exits. It is never waited on.
    """
    cmd = [
        sys.executable,
        "-m",
        "pointguard",
        "clip",
        "--clip-time",
        str(settings.clip_time),
    ]
    logger.debug("Spawning clipboard relay: %s", cmd)
    return subprocess.Popen(
        cmd,
        stdin=subprocess.PIPE,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
    )


def _resolve_candidates(store: Path, target: str | None) -> tuple[Path, Path]:
    """Return ``(directory, secret)`` candidate paths for ``target``.

    The secret candidate appends the suffix to the raw name, so a target
    with a trailing separator (``dir/``) never matches a secret.

    Raises:
        NotFound: If ``target`` would escape the store or names a hidden entry.
    """
    if target is None:
        return store, store
    path = PurePath(target)
    if path.is_absolute() or ".." in path.parts:
        raise NotFound(target)
    hidden = HiddenFilter()
    if any(hidden.should_exclude(part, False) for part in path.parts):
        raise NotFound(target)
    return store / target, store / (target + SECRET_SUFFIX)


def _first_line(plaintext: str) -> str:
    lines = plaintext.splitlines()
    if not lines:
        raise EmptySecretContent("Error reading the line from the password file.")
    return lines[0]


def _send_to_relay(secret_line: str, settings: Settings, spawn_relay: SpawnRelay) -> None:
    """Hand ``secret_line`` to a new relay process and return without waiting."""
    try:
        relay = spawn_relay(settings)
    except OSError as exc:
        raise ClipboardRelayUnavailable(
            f"Error launching child to copy to clipboard: {exc}"
        ) from exc

    if relay.stdin is None:
        raise ClipboardRelayUnavailable("Error launching child to copy to clipboard.")

    try:
        relay.stdin.write(secret_line.encode("utf-8"))
        relay.stdin.close()
    except OSError as exc:
        raise ClipboardRelayUnavailable(
            f"Error writing to clipboard relay: {exc}"
        ) from exc

    # Never waited on; mark it reaped so Popen does not warn when collected
    relay.returncode = 0


def show(
    out: IO[str],
    target: str | None,
    settings: Settings,
    *,
    clip: bool = False,
    decrypt: Decrypt | None = None,
    spawn_relay: SpawnRelay | None = None,
    charset: Literal["unicode", "ascii"] = "unicode",
) -> None:
    """Reveal the secret named ``target`` or print the tree under it.

    A secret file takes precedence over a directory of the same name.

    Args:
        out: Output sink.
        target: Slash-separated name relative to the store root, or
            ``None`` for the whole store.
        settings: Store settings.
        clip: Copy the first line of the secret to the clipboard instead
            of printing the secret.
        decrypt: Decryption function. Defaults to ``gpg.decrypt``.
        spawn_relay: Launches the clipboard relay process. Defaults to
            ``spawn_clip_relay``.
        charset: Tree drawing character set.

    Raises:
        NotFound: If ``target`` is neither a secret nor a directory.
        DecryptionFailed: If the secret cannot be decrypted.
        EmptySecretContent: In clip mode, if the secret has no first line.
        ClipboardRelayUnavailable: If the relay cannot be launched or written.
        InvalidEntryName: If a store entry name cannot be displayed.
    """
    directory, secret_file = _resolve_candidates(settings.dir, target)

    if secret_file.exists() and not secret_file.is_dir():
        plaintext = (decrypt or gpg.decrypt)(secret_file)
        if not clip:
            out.write(plaintext)
            return

        _send_to_relay(
            _first_line(plaintext), settings, spawn_relay or spawn_clip_relay
        )
        del plaintext
        out.write(
            f"Copied {target} to clipboard. "
            f"Will clear in {settings.clip_time} seconds.\n"
        )
        return

    if directory.is_dir():
        tree = build_tree(directory, target or DEFAULT_TITLE)
        out.write(render_tree(tree, RenderOptions(charset=charset)) + "\n")
        return

    raise NotFound(target or "File or folder")
