"""Pytest configuration and fixtures."""

import os
import sys
from pathlib import Path

import pytest

# Add src to path (for 'filemason.*' imports without installing)
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root / "src"))

from filemason.core import diagnostics  # noqa: E402
from filemason.core.config import ConfigResolver  # noqa: E402
from filemason.core.events import get_event_bus  # noqa: E402
from filemason.core.log_bus import get_log_bus  # noqa: E402
from filemason.core.logging import (  # noqa: E402
    VerbosityLevel,
    set_colors,
    set_log_stream,
    set_verbosity,
)


def _reset_globals() -> None:
    get_event_bus().clear()
    get_log_bus().clear()
    diagnostics.reset_jsonl_sink()
    set_verbosity(VerbosityLevel.NORMAL)
    set_colors(False)
    set_log_stream(None)


@pytest.fixture(autouse=True)
def _isolate_global_state(monkeypatch):
    """Buses, verbosity and FILEMASON_* env vars must not leak between tests."""
    for key in list(os.environ):
        if key.startswith("FILEMASON_"):
            monkeypatch.delenv(key)
    _reset_globals()
    yield
    _reset_globals()


@pytest.fixture
def make_resolver(tmp_path):
    """Build a ConfigResolver that never reads the real user/system config."""

    def _make(cli_args=None):
        return ConfigResolver(
            cli_args=cli_args or {},
            user_config_path=tmp_path / "user_config.yaml",
            system_config_path=tmp_path / "system_config.yaml",
        )

    return _make


@pytest.fixture
def sample_tree(tmp_path):
    """Create a small source tree.

    Layout:
        src/
            a.txt
            b.bin
            docs/
                readme.md
                nested/
                    deep.txt
            empty/
    """
    root = tmp_path / "src"
    (root / "docs" / "nested").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "a.txt").write_text("alpha", encoding="utf-8")
    (root / "b.bin").write_bytes(bytes(range(256)))
    (root / "docs" / "readme.md").write_text("# readme\n", encoding="utf-8")
    (root / "docs" / "nested" / "deep.txt").write_text("deep", encoding="utf-8")
    return root
