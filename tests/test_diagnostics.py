import logging

import pytest

from lpr_printer.diagnostics import DiagnosticLog, EventKind


def test_events_are_kept_in_order():
    log = DiagnosticLog()
    log.message("Connecting...")
    log.error("Error in connection")
    log.message("retrying by hand")

    assert [e.message for e in log.events] == ["Connecting...", "Error in connection", "retrying by hand"]
    assert [e.kind for e in log.events] == [EventKind.MESSAGE, EventKind.ERROR, EventKind.MESSAGE]
    assert len(log) == 3


def test_last_error_is_newest_error():
    log = DiagnosticLog()
    assert log.last_error is None
    log.error("first")
    log.message("between")
    log.error("second")
    assert log.last_error == "second"


def test_events_view_cannot_modify_log():
    log = DiagnosticLog()
    log.message("only")
    events = log.events
    assert isinstance(events, tuple)
    with pytest.raises(AttributeError):
        events[0].message = "changed"
    assert log.events[0].message == "only"


def test_events_are_mirrored_to_logging(caplog):
    log = DiagnosticLog()
    with caplog.at_level(logging.INFO, logger="lpr_printer.diagnostics"):
        log.message("Sending data...")
        log.error("Error while sending data file")
    assert ("lpr_printer.diagnostics", logging.INFO, "Sending data...") in caplog.record_tuples
    assert ("lpr_printer.diagnostics", logging.ERROR, "Error while sending data file") in caplog.record_tuples
