"""Display test fixtures: capture console output for assertion."""

import io

import pytest
from rich.console import Console

from console.config import ConsoleMode
from console.trainconsole import TrainConsole
from console.themes import DarkTheme


@pytest.fixture
def capture_console():
    """Swap TrainConsole to NORMAL mode writing into a StringIO buffer.

    Yields a callable returning the captured text; restores NULL mode on
    teardown.
    """
    console = TrainConsole()
    original_console = console._console
    original_mode = console._mode

    buffer = io.StringIO()
    console._console = Console(file=buffer, width=120, highlight=False, no_color=True,
                               theme=DarkTheme())
    console._mode = ConsoleMode.NORMAL

    yield buffer.getvalue

    console._console = original_console
    console._mode = original_mode
