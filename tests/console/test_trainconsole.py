"""Tests for console/: singleton behaviour, modes and message rendering."""

import pytest

from console import ConsoleConfig, ConsoleMode, ContentItem, TimeFormat, TrainConsole


@pytest.fixture(autouse=True)
def _restore_null_console():
    yield
    TrainConsole(ConsoleConfig(mode=ConsoleMode.NULL))


class TestSingleton:

    def test_same_instance(self):
        assert TrainConsole() is TrainConsole()

    def test_new_config_reinitializes(self):
        console = TrainConsole(ConsoleConfig(mode=ConsoleMode.SILENT))
        assert console.get_console_config().mode is ConsoleMode.SILENT
        assert TrainConsole(ConsoleConfig(mode=ConsoleMode.NULL)) is console
        assert console.get_console_config().mode is ConsoleMode.NULL


class TestLoggingMode:

    def test_writes_to_file(self, tmp_path):
        log = tmp_path / "train.log"
        console = TrainConsole(ConsoleConfig(mode=ConsoleMode.LOGGING, log_file=str(log),
                                             show_time=False))
        console.print_notification("hello log")
        console.print_warning("careful")
        console.close()
        text = log.read_text(encoding="utf-8")
        assert "hello log" in text
        assert "careful" in text

    def test_close_switches_to_null(self, tmp_path):
        console = TrainConsole(ConsoleConfig(mode=ConsoleMode.LOGGING,
                                             log_file=str(tmp_path / "a.log")))
        console.close()
        console.print("dropped")
        assert "dropped" not in (tmp_path / "a.log").read_text(encoding="utf-8")

    def test_requires_log_file(self):
        with pytest.raises(ValueError):
            TrainConsole(ConsoleConfig(mode=ConsoleMode.LOGGING))

    def test_progress_is_terminal_only(self, tmp_path):
        console = TrainConsole(ConsoleConfig(mode=ConsoleMode.LOGGING,
                                             log_file=str(tmp_path / "b.log")))
        console.create_progress_task("t", "task", total=3)
        assert console.update_progress_task("t", advance=1) is False
        console.close()


class TestContentItem:

    def test_notification_icon_and_style(self):
        cfg = ConsoleConfig(show_time=False)
        rendered = ContentItem(type="notification", content="msg").render(cfg)
        assert "ⓘ" in rendered
        assert "[notification.content]msg[/notification.content]" in rendered

    def test_text_with_style(self):
        cfg = ConsoleConfig(show_time=False)
        assert ContentItem(type="text", content="x", style="label").render(cfg) == "[label]x[/label]"

    def test_time_prefix(self):
        cfg = ConsoleConfig(show_time=True, time_format=TimeFormat.TWENTY_FOUR_HOUR)
        rendered = ContentItem(type="text", content="x", time=0.0).render(cfg)
        assert "00:00:00" in rendered

    def test_no_time_without_timestamp(self):
        cfg = ConsoleConfig(show_time=True)
        assert ContentItem(type="text", content="x").render(cfg) == "x"
