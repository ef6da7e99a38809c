"""Tests for the verbosity logger and log bus."""

from __future__ import annotations

import sys

import pytest

from filemason.core.config import ConfigSource, LoggingPolicy
from filemason.core.log_bus import LogRecord, get_log_bus
from filemason.core.logging import (
    VerbosityLevel,
    apply_logging_policy,
    get_logger,
    get_verbosity,
    set_log_stream,
    set_verbosity,
)


class TestVerbosityLevel:
    """Test VerbosityLevel enum."""

    def test_verbosity_values(self):
        assert VerbosityLevel.QUIET == 0
        assert VerbosityLevel.NORMAL == 1
        assert VerbosityLevel.VERBOSE == 2
        assert VerbosityLevel.DEBUG == 3

    def test_set_get_verbosity(self):
        set_verbosity(2)
        assert get_verbosity() == VerbosityLevel.VERBOSE

        set_verbosity(VerbosityLevel.DEBUG)
        assert get_verbosity() == VerbosityLevel.DEBUG


def test_logger_is_cached() -> None:
    assert get_logger("same") is get_logger("same")


def test_messages_filtered_by_verbosity(capsys: pytest.CaptureFixture[str]) -> None:
    log = get_logger("filter_test")

    log.verbose("hidden")
    log.info("shown")

    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "[info] shown" in out


def test_error_goes_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    set_verbosity(VerbosityLevel.QUIET)

    get_logger("err_test").error("bad thing")

    captured = capsys.readouterr()
    assert "[error] bad thing" in captured.err
    assert captured.out == ""


def test_log_bus_receives_records() -> None:
    records: list[LogRecord] = []
    get_log_bus().subscribe_all(records.append)

    get_logger("bus_test").warning("careful")

    assert records == [
        LogRecord(level_name="WARNING", plain="[warning] careful", logger_name="bus_test")
    ]


def test_log_bus_subscriber_failure_is_suppressed(capsys: pytest.CaptureFixture[str]) -> None:
    def boom(record: LogRecord) -> None:
        raise RuntimeError("subscriber failure")

    get_log_bus().subscribe("INFO", boom)

    get_logger("bus_test").info("still printed")

    captured = capsys.readouterr()
    assert "[info] still printed" in captured.out
    assert "LogBus subscriber raised" in captured.err


def test_apply_logging_policy() -> None:
    policy = LoggingPolicy(
        level_name="debug",
        color=False,
        sources={"level_name": ConfigSource(value="debug", source="cli")},
    )

    apply_logging_policy(policy)

    assert get_verbosity() == VerbosityLevel.DEBUG


def test_log_stream_redirects_every_level(capsys: pytest.CaptureFixture[str]) -> None:
    set_log_stream(sys.stderr)
    log = get_logger("stream_test")

    log.info("to stderr")
    log.error("also stderr")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "[info] to stderr" in captured.err
    assert "[error] also stderr" in captured.err
