"""Diagnostics envelope + JSONL sink.

The sink is registered at most once per process and self-filters when
diagnostics are disabled in configuration.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from filemason.core.config import ConfigError, ConfigResolver, coerce_bool
from filemason.core.events import get_event_bus
from filemason.core.logging import get_logger

_logger = get_logger(__name__)

ENVELOPE_KEYS = frozenset({"event", "component", "operation", "timestamp", "data"})


def build_envelope(
    *,
    event: str,
    component: str,
    operation: str,
    data: dict[str, Any],
) -> dict[str, Any]:
    """Build the canonical diagnostics envelope.

    Schema:
        {
          "event": "<string>",
          "component": "<string>",
          "operation": "<string>",
          "timestamp": "<iso8601 utc>",
          "data": { ... }
        }
    """
    ts = datetime.now(UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")
    return {
        "event": event,
        "component": component,
        "operation": operation,
        "timestamp": ts,
        "data": data,
    }


def is_diagnostics_enabled(resolver: ConfigResolver) -> bool:
    """Return whether diagnostics.enabled resolves to true (default False)."""
    value = resolver.resolve_or("diagnostics.enabled", False)
    try:
        return coerce_bool("diagnostics.enabled", value)
    except ConfigError:
        _logger.warning(f"Invalid diagnostics.enabled value; treating as disabled. value={value!r}")
        return False


def _is_envelope(obj: Any) -> bool:
    return isinstance(obj, dict) and set(obj.keys()) == ENVELOPE_KEYS


_SINK_INSTALLED = False


def install_jsonl_sink(*, resolver: ConfigResolver) -> None:
    """Install the JSONL diagnostics sink subscriber (idempotent).

    Sink path:
        <diagnostics.dir>/diagnostics.jsonl
    """
    global _SINK_INSTALLED
    if _SINK_INSTALLED:
        return

    def _on_any_event(event: str, data: dict[str, Any]) -> None:
        if not is_diagnostics_enabled(resolver):
            return

        out_dir = resolver.resolve_or("diagnostics.dir", None)
        if not out_dir:
            _logger.warning("Missing diagnostics.dir; cannot write diagnostics JSONL.")
            return
        out_path = Path(str(out_dir)).expanduser() / "diagnostics.jsonl"

        payload = data if _is_envelope(data) else build_envelope(
            event=event, component="unknown", operation="unknown", data=data
        )
        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
            line = json.dumps(
                payload, ensure_ascii=True, separators=(",", ":"), sort_keys=True, default=str
            )
            with out_path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            _logger.warning(f"Diagnostics sink write failed: {type(e).__name__}: {e}")

    get_event_bus().subscribe_all(_on_any_event)
    _SINK_INSTALLED = True


def reset_jsonl_sink() -> None:
    """Forget the installed flag (the event bus must be cleared separately)."""
    global _SINK_INSTALLED
    _SINK_INSTALLED = False
