from __future__ import annotations

import io
import sys
import threading
from typing import Generator, List
from unittest.mock import patch

import pytest
from rich.console import Console
from rich.table import Table

import depcore.utils.console as console_module
from depcore.utils.console import (
    DEPCORE_THEME,
    _get_console,
    _should_use_color,
    get_raw_console,
    print_error,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)


# ==============================================================================
# Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def reset_console() -> Generator[None, None, None]:
    """Reset the console singleton before and after each test."""
    reconfigure_console()
    yield
    reconfigure_console()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove environment variables that affect color detection."""
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("CI", raising=False)


@pytest.fixture
def captured_console(monkeypatch: pytest.MonkeyPatch) -> io.StringIO:
    """Install a shared console that writes plain text to a buffer."""
    buffer = io.StringIO()
    console = Console(
        file=buffer, theme=DEPCORE_THEME, no_color=True, highlight=False, width=80
    )
    monkeypatch.setattr(console_module, "_console", console)
    return buffer


# ==============================================================================
# Theme and color detection
# ==============================================================================


@pytest.mark.unit
class TestTheme:
    """Tests for DEPCORE_THEME."""

    @pytest.mark.parametrize(
        "style_name", ["success", "error", "warning", "info", "dim"]
    )
    def test_has_style(self, style_name: str) -> None:
        assert style_name in DEPCORE_THEME.styles


@pytest.mark.unit
class TestShouldUseColor:
    """Tests for _should_use_color."""

    def test_no_color_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NO_COLOR", "1")

        with patch.object(sys.stdout, "isatty", return_value=True):
            assert _should_use_color() is False

    def test_ci_env(self, clean_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CI", "true")

        with patch.object(sys.stdout, "isatty", return_value=True):
            assert _should_use_color() is False

    @pytest.mark.parametrize("is_tty", [True, False])
    def test_follows_tty(self, clean_env: None, is_tty: bool) -> None:
        with patch.object(sys.stdout, "isatty", return_value=is_tty):
            assert _should_use_color() is is_tty

    @pytest.mark.parametrize("error", [AttributeError, OSError])
    def test_isatty_failure(self, clean_env: None, error: type) -> None:
        with patch.object(sys.stdout, "isatty", side_effect=error):
            assert _should_use_color() is False


# ==============================================================================
# Console singleton
# ==============================================================================


@pytest.mark.unit
class TestGetConsole:
    """Tests for the shared console."""

    def test_singleton(self) -> None:
        console = _get_console()

        assert isinstance(console, Console)
        assert _get_console() is console
        assert get_raw_console() is console

    def test_respects_no_color(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NO_COLOR", "1")

        assert _get_console().no_color is True

    def test_thread_safety(self) -> None:
        consoles: List[Console] = []

        def grab() -> None:
            consoles.append(_get_console())

        threads = [threading.Thread(target=grab) for _ in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len({id(console) for console in consoles}) == 1

    def test_reconfigure_picks_up_environment(
        self, clean_env: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        with patch.object(sys.stdout, "isatty", return_value=True):
            first = _get_console()
            monkeypatch.setenv("NO_COLOR", "1")
            reconfigure_console()
            second = _get_console()

        assert first is not second
        assert second.no_color is True


# ==============================================================================
# Message helpers
# ==============================================================================


@pytest.mark.unit
class TestMessages:
    """Tests for print_success, print_error and print_warning."""

    def test_success(self) -> None:
        with patch.object(Console, "print") as mock_print:
            print_success("Best match: 0.3.4")

        mock_print.assert_called_once_with("[OK] Best match: 0.3.4", style="success")

    def test_error(self) -> None:
        with patch.object(Console, "print") as mock_print:
            print_error("Problem parsing version: x")

        mock_print.assert_called_once_with(
            "[ERROR] Problem parsing version: x", style="error"
        )

    def test_warning(self) -> None:
        with patch.object(Console, "print") as mock_print:
            print_warning("No version satisfies every constraint")

        mock_print.assert_called_once_with(
            "[WARNING] No version satisfies every constraint", style="warning"
        )

    def test_custom_prefix(self) -> None:
        with patch.object(Console, "print") as mock_print:
            print_error("failed", prefix="!!")

        mock_print.assert_called_once_with("!! failed", style="error")

    def test_prefix_is_not_markup(self, captured_console: io.StringIO) -> None:
        """Test the bracketed prefix reaches the terminal as text."""
        print_success("done")

        assert captured_console.getvalue() == "[OK] done\n"


# ==============================================================================
# Tables
# ==============================================================================


@pytest.mark.unit
class TestPrintTable:
    """Tests for print_table."""

    def test_prints_table(self) -> None:
        with patch.object(Console, "print") as mock_print:
            print_table([{"Version": "0.3.4", "Compatible": "yes"}])

        table = mock_print.call_args[0][0]
        assert isinstance(table, Table)
        assert [c.header for c in table.columns] == ["Version", "Compatible"]
        assert table.row_count == 1

    def test_empty_data_prints_nothing(self) -> None:
        with patch.object(Console, "print") as mock_print:
            print_table([])

        mock_print.assert_not_called()

    def test_headers_and_title(self) -> None:
        with patch.object(Console, "print") as mock_print:
            print_table(
                [{"a": 1, "b": 2}],
                headers=["b", "a", "c"],
                title="Candidates",
            )

        table = mock_print.call_args[0][0]
        assert table.title == "Candidates"
        assert [c.header for c in table.columns] == ["b", "a", "c"]

    def test_column_styles(self) -> None:
        with patch.object(Console, "print") as mock_print:
            print_table(
                [{"Version": "1.0"}],
                column_styles={"Version": {"style": "cyan", "justify": "right"}},
            )

        column = mock_print.call_args[0][0].columns[0]
        assert column.style == "cyan"
        assert column.justify == "right"

    def test_renders_values_as_text(self, captured_console: io.StringIO) -> None:
        print_table([{"Field": "Python", "Value": None}], title="Requirement")

        output = captured_console.getvalue()
        assert "Requirement" in output
        assert "Python" in output
        assert "None" in output
