"""Unit tests for core.logging, core.log_bus and core.events."""

from pickandgo.core.events import EventBus
from pickandgo.core.log_bus import LogBus, LogRecord
from pickandgo.core.logging import VerbosityLevel, get_logger, get_verbosity, set_verbosity


def test_set_verbosity_accepts_names_and_ints():
    set_verbosity("debug")
    assert get_verbosity() is VerbosityLevel.DEBUG

    set_verbosity(0)
    assert get_verbosity() is VerbosityLevel.QUIET


def test_records_respect_verbosity(log_records, capsys):
    logger = get_logger("tests.verbosity")
    set_verbosity(VerbosityLevel.QUIET)

    logger.info("hidden")
    logger.debug("hidden too")
    logger.error("shown")

    assert [r.message for r in log_records] == ["shown"]
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "[error] shown" in captured.err


def test_debug_level_emits_everything(log_records):
    logger = get_logger("tests.debug")
    set_verbosity(VerbosityLevel.DEBUG)

    logger.debug("d")
    logger.verbose("v")
    logger.info("i")
    logger.warning("w")

    assert [r.level_name for r in log_records] == ["DEBUG", "VERBOSE", "INFO", "WARNING"]
    assert all(r.logger_name == "tests.debug" for r in log_records)


def test_get_logger_is_cached():
    assert get_logger("tests.same") is get_logger("tests.same")


class TestLogBus:
    """Tests for LogBus."""

    def test_every_record_reaches_subscribers(self):
        bus = LogBus()
        seen: list[LogRecord] = []
        bus.subscribe(seen.append)

        bus.publish(LogRecord("INFO", "first", "x"))
        bus.publish(LogRecord("ERROR", "second", "x"))

        assert [r.message for r in seen] == ["first", "second"]

    def test_failing_subscriber_is_suppressed(self, capsys):
        bus = LogBus()
        seen: list[LogRecord] = []

        def broken(_record):
            raise RuntimeError("boom")

        bus.subscribe(broken)
        bus.subscribe(seen.append)

        bus.publish(LogRecord("INFO", "hello", "x"))

        assert len(seen) == 1
        assert "raised; suppressed" in capsys.readouterr().err

    def test_unsubscribe(self):
        bus = LogBus()
        seen: list[LogRecord] = []
        bus.subscribe(seen.append)
        bus.unsubscribe(seen.append)
        bus.unsubscribe(seen.append)

        bus.publish(LogRecord("INFO", "hello", "x"))

        assert seen == []

    def test_plain(self):
        assert LogRecord("WARNING", "careful", "x").plain == "[warning] careful"


class TestEventBus:
    """Tests for EventBus."""

    def test_publish_to_subscribers(self):
        bus = EventBus()
        received = []
        bus.subscribe("vehicle.added", received.append)

        bus.publish("vehicle.added", {"vehicle_id": "v1"})

        assert received == [{"vehicle_id": "v1"}]

    def test_handler_error_is_logged(self, log_records):
        bus = EventBus()
        received = []

        def broken(_data):
            raise ValueError("nope")

        bus.subscribe("vehicle.added", broken)
        bus.subscribe("vehicle.added", received.append)

        bus.publish("vehicle.added")

        assert received == [{}]
        assert any("Error in event handler" in r.message for r in log_records)
