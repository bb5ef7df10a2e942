"""Tests for conlog.logger — the Logger facade and module singleton."""

import pytest
from colorama import Fore, Style

from conlog import logger as logger_mod
from conlog.errors import FatalError, UnknownColorError
from conlog.levels import LEVELS
from conlog.logger import Logger, get_logger, init_logger
from conlog.record import LogRecord


# Logger method for each level name, in level order
METHODS = ["error", "warn", "highlight", "info", "log", "debug", "deep_debug"]


# =============================================================================
# Level gating
# =============================================================================

class TestGating:
    """A message is written iff not silent and level >= its index."""

    @pytest.mark.parametrize("threshold", range(len(LEVELS)))
    @pytest.mark.parametrize("index,method", list(enumerate(METHODS)))
    def test_threshold(self, make_logger, sink, threshold, index, method):
        log = make_logger(threshold)
        getattr(log, method)("M")
        assert bool(sink.lines()) == (threshold >= index)

    def test_default_level_is_info(self, sink):
        log = Logger(console=sink, hide_arguments=True)
        assert log.level == 3
        log.log("hidden")
        log.info("shown")
        assert sink.lines() == ["[INF] shown"]

    def test_silence_and_talk(self, log, sink):
        log.silence()
        log.error("nope")
        assert sink.calls == []
        log.talk()
        log.error("yes")
        assert sink.lines() == ["[ERR] yes"]

    def test_enabled_for(self, log):
        assert log.enabled_for("log")
        assert not log.enabled_for("debug")
        log.silence()
        assert not log.enabled_for("error")

    def test_methods_chain(self, log, sink):
        assert log.info("a").warn("b") is log
        assert len(sink.lines()) == 2


# =============================================================================
# Output routing and formatting
# =============================================================================

class TestEmission:
    @pytest.mark.parametrize("method,sink_method,line", [
        ("error", "error", "[ERR] M"),
        ("warn", "warn", "[WRN] M"),
        ("highlight", "info", "[HGH] M"),
        ("info", "info", "[INF] M"),
        ("log", "log", "[LOG] M"),
    ])
    def test_sink_method_and_tag(self, log, sink, method, sink_method, line):
        getattr(log, method)("M")
        assert sink.calls == [(sink_method, line)]

    def test_debug_lines_carry_call_site(self, make_logger, sink):
        log = make_logger("debug")
        log.debug("M")
        method, line = sink.calls[0]
        assert method == "debug"
        assert line.startswith("[DBG] M (test_logger.py ")

    def test_deep_debug_tag(self, make_logger, sink):
        make_logger("deepDebug").deep_debug("M")
        assert sink.lines()[0].startswith("[DBG] M")

    def test_console_log_routes_everything_to_log(self, make_logger, sink):
        log = make_logger(use_console_log=True)
        log.error("E")
        log.warn("W")
        assert [m for m, _ in sink.calls] == ["log", "log"]

    def test_console_log_toggle(self, log, sink):
        log.console_log = True
        log.error("E")
        assert sink.calls == [("log", "[ERR] E")]

    def test_title_and_message(self, log, sink):
        log.info("Sync", "done")
        assert sink.lines() == ["[INF] [Sync] done"]

    def test_message_and_data(self, log, sink):
        log.info("Message", {"data": 1})
        assert sink.lines() == ['[INF] Message {"data":1}']

    def test_title_and_error(self, log, sink):
        log.error("Sync", ValueError("bad"))
        assert sink.lines() == ["[ERR] [Sync] bad"]

    def test_mapping_argument(self, log, sink):
        log.warn({"title": "T", "msg": "hi", "borderBottom": 3})
        assert sink.calls == [("warn", "[WRN] [T] hi"), ("warn", "--")]

    def test_log_record_argument(self, log, sink):
        log.info(LogRecord(title="T", message="M", prefix=False))
        assert sink.lines() == ["[T] M"]

    def test_record_suffix_false_beats_debugging(self, make_logger, sink):
        log = make_logger("debug")
        log.debug(LogRecord(message="m", suffix=False))
        assert sink.lines() == ["[DBG] m"]

    def test_record_color_none_beats_level_color(self, make_logger, sink):
        log = make_logger(boring=False)
        log.error(LogRecord(message="m", color=None))
        assert sink.lines() == ["[ERR] m"]

    def test_empty_message_is_noop(self, log, sink):
        log.info("")
        log.info({"title": "only"})
        assert sink.calls == []

    def test_level_color_applied(self, make_logger, sink):
        log = make_logger(boring=False)
        log.error("M")
        assert sink.lines() == [f"{Fore.RED}[ERR] M{Style.RESET_ALL}"]

    def test_boring_toggle(self, make_logger, sink):
        log = make_logger(boring=False)
        log.boring = True
        log.error("M")
        assert sink.lines() == ["[ERR] M"]


# =============================================================================
# Banners and level changes
# =============================================================================

class TestBanners:
    def test_startup_banner(self, make_logger, sink):
        make_logger("log", hide_arguments=False)
        assert sink.calls == [
            ("log", "[LOG] Logging level set to 4 | is not debugging"
                    " | is not silent"),
        ]

    def test_startup_banner_debugging_silent(self, make_logger, sink):
        make_logger("debug", hide_arguments=False, silent=True)
        assert sink.lines() == [
            "[LOG] Logging level set to 5 | is debugging | is silent",
        ]

    def test_level_change_banner(self, make_logger, sink):
        log = make_logger("info", hide_arguments=False)
        sink.clear()
        log.level = "debug"
        assert sink.lines() == [
            "[LOG] Requested logging level to change to 'debug'",
        ]
        assert log.level == 5
        assert log.is_debugging

    def test_level_change_hidden(self, log, sink):
        log.level = 0
        assert sink.calls == []
        assert log.level == 0

    def test_unknown_level_falls_back_to_errors_only(self, log, sink):
        log.level = "shouty"
        log.warn("W")
        log.error("E")
        assert sink.lines() == ["[ERR] E"]


# =============================================================================
# fatal()
# =============================================================================

class TestFatal:
    def test_logs_then_raises(self, log, sink):
        with pytest.raises(FatalError, match="bad config"):
            log.fatal("bad config")
        assert sink.calls == [("error", "[ERR] bad config")]

    def test_raises_when_silent(self, log, sink):
        log.silence()
        with pytest.raises(FatalError):
            log.fatal("quiet death")
        assert sink.calls == []

    def test_is_type_error(self, log):
        with pytest.raises(TypeError):
            log.fatal("x")


# =============================================================================
# Assertions
# =============================================================================

class TestAssertions:
    """Assertions return a bool and warn on failure."""

    def test_assert_passes(self, log, sink):
        assert log.assert_(1, "a", [0]) is True
        assert sink.calls == []

    def test_assert_fails(self, log, sink):
        assert log.assert_(1, 0) is False
        assert sink.lines("warn") == [
            "[WRN] Assertion Failed: There is a falsy value",
        ]

    def test_assert_one(self, log, sink):
        assert log.assert_one(0, "", 3) is True
        assert log.assert_one(0, None) is False
        assert sink.lines() == ["[WRN] Assertion Failed: No values are truthy"]

    def test_assert_only_one(self, log, sink):
        assert log.assert_only_one(1, 0) is True
        assert log.assert_only_one(1, 1) is False
        assert sink.lines() == ["[WRN] Assertion Failed: '1' is similar to '1'"]

    def test_assert_equal(self, log, sink):
        assert log.assert_equal(2, 2) is True
        assert log.assert_equal(1, 2) is False
        assert sink.lines() == [
            "[WRN] Assertion Failed: Value 1 is not equal to 2",
        ]

    def test_assert_not_equal(self, log, sink):
        assert log.assert_not_equal("a", "b") is True
        assert log.assert_not_equal("a", "a") is False
        assert sink.lines() == [
            "[WRN] Assertion Failed: Value 'a' is equal to 'a'",
        ]

    def test_assert_greater_than(self, log, sink):
        assert log.assert_greater_than(3, 2) is True
        assert log.assert_greater_than(2, 3) is False
        assert sink.lines() == [
            "[WRN] Assertion Failed: Value 2 is not greater than 3",
        ]

    def test_assert_less_than(self, log, sink):
        assert log.assert_less_than(2, 3) is True
        assert log.assert_less_than(3, 2) is False
        assert sink.lines() == [
            "[WRN] Assertion Failed: Value 3 is not smaller than 2",
        ]

    def test_uncomparable_values_fail(self, log):
        assert log.assert_greater_than(1, "a") is False
        assert log.assert_less_than(None, 1) is False

    def test_assert_length(self, log, sink):
        assert log.assert_length("abc", [1]) is True
        assert log.assert_length([1], []) is False
        assert sink.lines() == [
            "[WRN] Assertion Failed: Value '[]' has no length",
        ]

    def test_assert_length_without_len(self, log):
        assert log.assert_length(5) is False

    def test_assert_type(self, log, sink):
        assert log.assert_type("s", "string") is True
        assert log.assert_type([1], "array") is True
        assert log.assert_type(3, "string") is False
        assert sink.lines() == ["[WRN] Assertion Failed: Value 3 is not string"]

    def test_assertions_respect_level(self, make_logger, sink):
        log = make_logger("error")
        assert log.assert_(0) is False
        assert sink.calls == []


# =============================================================================
# Grouping
# =============================================================================

class TestGrouping:
    def test_group_title_applied(self, log, sink):
        log.group_start("Sync")
        log.info("M")
        log.group_end()
        assert sink.calls == [
            ("group", "Sync"), ("info", "[INF] [Sync] M"), ("group_end", ""),
        ]
        assert log.is_grouped is False
        assert log.group_title == ""

    def test_long_title_truncated(self, log):
        log.group_start("A" * 30)
        assert log.group_title == "A" * 22 + "..."

    def test_title_at_limit_kept(self, log):
        log.group_start("B" * 25)
        assert log.group_title == "B" * 25

    def test_non_string_label_has_no_title(self, log, sink):
        log.group_start(42)
        log.info("M")
        assert sink.lines() == ["[INF] M"]

    def test_new_group_closes_current(self, log, sink):
        log.group_start("one")
        log.group_start("two")
        assert [m for m, _ in sink.calls] == ["group", "group_end", "group"]
        assert log.group_title == "two"

    @pytest.mark.parametrize("closer", ["group_end", "ungroup", "done"])
    def test_closers(self, log, sink, closer):
        log.group("G")
        getattr(log, closer)()
        assert sink.calls[-1] == ("group_end", "")
        assert not log.is_grouped

    def test_grouped_context_manager(self, log, sink):
        with pytest.raises(RuntimeError):
            with log.grouped("Ctx") as inner:
                assert inner is log
                log.info("M")
                raise RuntimeError("leave")
        assert sink.calls[-1] == ("group_end", "")
        assert not log.is_grouped


# =============================================================================
# Throttling through the facade
# =============================================================================

class TestLoggerThrottle:
    def test_burst(self, log, sink, timers):
        for _ in range(4):
            log.warn_throttle("busy", 0.5)
        assert sink.lines() == ["[WRN] busy"]
        assert timers[-1].interval == 0.5
        assert log.pending_throttles == 1

        timers[-1].fire()
        lines = sink.lines()
        assert len(lines) == 2
        assert lines[1].startswith("[WRN] busy (Throttled - test_logger.py ")
        assert log.pending_throttles == 0

    @pytest.mark.parametrize("method,tag", [
        ("error_throttle", "ERR"), ("highlight_throttle", "HGH"),
        ("info_throttle", "INF"), ("log_throttle", "LOG"),
    ])
    def test_shortcuts(self, log, sink, method, tag):
        getattr(log, method)("m")
        assert sink.lines() == [f"[{tag}] m"]

    def test_level_name_method(self, make_logger, sink):
        log = make_logger("deepDebug")
        log.throttle("deep", method="deepDebug")
        assert sink.lines()[0].startswith("[DBG] deep")

    def test_gated_by_level(self, log, sink, timers):
        log.debug_throttle("hidden")
        timers[-1].fire()
        assert sink.calls == []

    def test_close_cancels_pending(self, log, sink, timers):
        log.log_throttle("m")
        log.close()
        timers[-1].fire()
        assert sink.lines() == ["[LOG] m"]
        assert log.pending_throttles == 0

    def test_bad_color_leaves_nothing_pending(self, log, sink, timers):
        with pytest.raises(UnknownColorError):
            log.warn_throttle({"message": "x", "color": "nope"})
        assert log.pending_throttles == 0
        assert timers == []
        assert sink.calls == []

    def test_loggers_do_not_share_throttles(self, make_logger, sink):
        first = make_logger()
        second = make_logger()
        first.info_throttle("same")
        second.info_throttle("same")
        assert sink.lines() == ["[INF] same", "[INF] same"]


# =============================================================================
# from_exec()
# =============================================================================

class TestFromExec:
    def test_error_and_stderr(self, log, sink):
        log.from_exec(ValueError("failed"), "out", b"warned\n")
        assert sink.calls == [("error", "[ERR] failed"),
                              ("error", "[ERR] warned")]

    def test_stdout_at_debug(self, make_logger, sink):
        log = make_logger("debug")
        log.from_exec(None, b"listing\n", "")
        assert sink.calls[0][0] == "debug"
        assert sink.calls[0][1].startswith("[DBG] listing")

    def test_nothing_to_log(self, make_logger, sink):
        make_logger("debug").from_exec(None, "", None)
        assert sink.calls == []


# =============================================================================
# Construction from settings and the singleton
# =============================================================================

class TestConstruction:
    def test_env_level(self, monkeypatch, sink):
        monkeypatch.setenv("LOG_LEVEL", "error")
        log = Logger(console=sink, hide_arguments=True)
        log.warn("W")
        assert sink.calls == []

    def test_explicit_beats_env(self, monkeypatch, sink):
        monkeypatch.setenv("LOG_LEVEL", "error")
        log = Logger(level="warn", console=sink, hide_arguments=True)
        assert log.level == 1

    def test_env_silent(self, monkeypatch, sink):
        monkeypatch.setenv("LOG_SILENT", "true")
        log = Logger(console=sink, hide_arguments=True)
        assert log.silent is True

    def test_repr(self, log):
        assert repr(log) == "Logger(level=4, silent=False)"


class TestSingleton:
    def test_get_logger_reuses_instance(self, monkeypatch):
        monkeypatch.setenv("HIDE_ARGUMENTS", "1")
        assert get_logger() is get_logger()

    def test_init_logger_replaces(self, sink):
        first = init_logger(console=sink, hide_arguments=True)
        second = init_logger(console=sink, hide_arguments=True, level="debug")
        assert first is not second
        assert get_logger() is second
        assert logger_mod._logger is second

    def test_init_logger_closes_previous(self, sink, timer_factory, timers):
        first = init_logger(console=sink, hide_arguments=True,
                            timer_factory=timer_factory)
        first.info_throttle("pending")
        init_logger(console=sink, hide_arguments=True)
        assert first.pending_throttles == 0
        assert timers[0].cancelled
