"""Unit tests for pkgmgr.utils.console."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

import pkgmgr.utils.console as console_module
from pkgmgr.utils.console import (
    PKGMGR_THEME,
    colorize_update_type,
    get_raw_console,
    print_error,
    print_info,
    print_success,
    print_table,
    print_tree,
    print_warning,
    reconfigure_console,
)


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> io.StringIO:
    """Route the shared console into a StringIO buffer."""
    buffer = io.StringIO()
    console = Console(file=buffer, theme=PKGMGR_THEME, no_color=True, width=120)
    monkeypatch.setattr(console_module, "_console", console)
    return buffer


@pytest.mark.unit
class TestStatusLines:
    """Tests for the status line helpers."""

    def test_prefixes(self, captured: io.StringIO) -> None:
        print_success("Installation complete!")
        print_error("boom")
        print_warning("careful")
        print_info("Resolving dependencies...")

        assert captured.getvalue().splitlines() == [
            "✓ Installation complete!",
            "[ERROR] boom",
            "[WARNING] careful",
            "Resolving dependencies...",
        ]

    def test_markup_not_interpreted(self, captured: io.StringIO) -> None:
        """Test user text with brackets is printed literally."""
        print_info("[bold]serde[/bold]")
        assert captured.getvalue().strip() == "[bold]serde[/bold]"


@pytest.mark.unit
class TestStructuredOutput:
    def test_table(self, captured: io.StringIO) -> None:
        print_table(
            [{"Package": "serde", "Versions": "1.0.195"}],
            title="Registry",
        )
        output = captured.getvalue()
        assert "Registry" in output
        assert "Package" in output
        assert "serde" in output

    def test_empty_table_prints_nothing(self, captured: io.StringIO) -> None:
        print_table([])
        assert captured.getvalue() == ""

    def test_tree(self, captured: io.StringIO) -> None:
        rendered = "├─ web v2.1.0\n  ├─ serde v1.0.195\n├─ cli v0.3.0\n  ├─ serde v1.0.195 (*)"
        print_tree(rendered)
        assert captured.getvalue().rstrip("\n") == rendered

    @pytest.mark.parametrize("update_type", ["major", "minor", "patch", "new", "removed"])
    def test_colorize(self, update_type: str) -> None:
        label = colorize_update_type(update_type)
        assert update_type in label
        assert label.startswith("[")


@pytest.mark.unit
class TestConsoleLifecycle:
    def test_singleton_and_reconfigure(self) -> None:
        first = get_raw_console()
        assert get_raw_console() is first
        reconfigure_console()
        assert get_raw_console() is not first

    def test_no_color_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NO_COLOR", "1")
        reconfigure_console()
        assert get_raw_console().no_color is True
