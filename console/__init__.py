from .config import ConsoleConfig, ConsoleMode, TimeFormat
from .themes import DarkTheme
from .dataclasses import ContentItem, apply_style
from .trainconsole import TrainConsole

__all__ = [
    "TrainConsole",
    "ConsoleConfig",
    "ConsoleMode",
    "TimeFormat",
    "DarkTheme",
    "ContentItem",
    "apply_style",
]
