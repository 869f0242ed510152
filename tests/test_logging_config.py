from __future__ import annotations

import logging

from logging_config import ContextualFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="services.pager",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Fetched station window",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_known_context_keys() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    line = formatter.format(_record(station_id=1001, record_count=42, unknown="x"))

    assert line == "Fetched station window | station_id=1001 record_count=42"


def test_formatter_skips_none_values() -> None:
    formatter = ContextualFormatter(fmt="%(message)s", extra_keys=["station_id", "page"])

    line = formatter.format(_record(station_id=None, page=3))

    assert line == "Fetched station window | page=3"
