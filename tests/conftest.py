"""Shared fixtures for pointguard tests."""

from __future__ import annotations

import io
import os
from pathlib import Path

import pytest

from pointguard.settings import Settings


@pytest.fixture
def sample_store(tmp_path: Path) -> Path:
    """Create a standard test password store.

    Secret files hold their own name as plaintext, so the fake decrypt
    below can stand in for gpg.

    Structure::

        store/
        ├── .git/
        │   └── notinstore
        ├── .gpg-id
        ├── dir/
        │   ├── test.gpg
        │   └── unique.gpg
        ├── dir.gpg
        ├── pointguard.dev.gpg
        └── test.gpg
    """
    store = tmp_path / "store"
    store.mkdir()
    (store / ".git").mkdir()
    (store / ".git" / "notinstore").write_text("notinstore\n")
    (store / ".gpg-id").write_text("ABCDEF0123456789\n")
    (store / "dir").mkdir()
    (store / "dir" / "test.gpg").write_text("dir/test\n")
    (store / "dir" / "unique.gpg").write_text("dir/unique\n")
    (store / "dir.gpg").write_text("dir\n")
    (store / "pointguard.dev.gpg").write_text("pointguard.dev\n")
    (store / "test.gpg").write_text("test\n")
    return store


@pytest.fixture
def settings(sample_store: Path) -> Settings:
    return Settings(dir=sample_store, clip_time=45, generated_length=25, editor="vim")


def fake_decrypt(path: Path) -> str:
    """Read a test secret as plaintext."""
    return path.read_text(encoding="utf-8")


class RecordingStdin(io.BytesIO):
    """Byte stream that remembers what was written before it was closed."""

    received: bytes | None = None

    def close(self) -> None:
        if not self.closed:
            self.received = self.getvalue()
        super().close()


class FakeRelay:
    """Stand-in for the spawned relay process."""

    def __init__(self) -> None:
        self.stdin: RecordingStdin | None = RecordingStdin()
        self.returncode: int | None = None


class RelaySpawner:
    """Records every relay launch ``show`` asks for."""

    def __init__(self) -> None:
        self.relays: list[FakeRelay] = []
        self.settings: list[Settings] = []

    def __call__(self, settings: Settings) -> FakeRelay:
        relay = FakeRelay()
        self.relays.append(relay)
        self.settings.append(settings)
        return relay


@pytest.fixture
def spawner() -> RelaySpawner:
    return RelaySpawner()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate settings from the developer's config file and environment."""
    monkeypatch.setenv("POINTGUARD_CONFIG", str(tmp_path / "no-such-config.toml"))
    monkeypatch.delenv("POINTGUARD_DIR", raising=False)
    monkeypatch.delenv("POINTGUARD_CLIP_TIME", raising=False)


GOLDEN_DIR = Path(__file__).parent / "golden"


def _golden_path(name: str) -> Path:
    return GOLDEN_DIR / f"{name}.txt"


def assert_golden(output: str, name: str) -> None:
    """Compare output against a golden file.

    Set ``UPDATE_GOLDEN=true`` in the environment to regenerate golden files.
    """
    golden_file = _golden_path(name)
    update = os.environ.get("UPDATE_GOLDEN", "").lower() in ("1", "true")

    if update or not golden_file.exists():
        golden_file.parent.mkdir(parents=True, exist_ok=True)
        golden_file.write_text(output, encoding="utf-8", newline="")
        if not update:
            pytest.fail(
                f"Golden file '{golden_file.name}' did not exist, created it. "
                f"Re-run the test to verify."
            )
        return

    expected = golden_file.read_text(encoding="utf-8")
    assert output == expected, (
        f"Output differs from golden file '{golden_file.name}'.\n"
        f"Run with UPDATE_GOLDEN=true to regenerate."
    )
