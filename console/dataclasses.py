import datetime
from dataclasses import dataclass
from typing import Literal
from zoneinfo import ZoneInfo

from rich.style import Style

from .config import ConsoleConfig


def apply_style(text: str, style: str) -> str:
    return f"[{style}]{text}[/{style}]"


_ICONS = {
    "notification": ("notification.icon", "ⓘ", "notification.content"),
    "error": ("error.icon", "ⓧ", "error.content"),
    "complete": ("complete.icon", "✔", "complete.content"),
    "warning": ("warning.icon", "⚠", "warning.content"),
}


@dataclass
class ContentItem:
    """
    A single printable message with an optional style and timestamp.

    The ``type`` selects the icon and default style applied when the item is
    rendered to markup; ``time`` (seconds since the epoch) is rendered as a
    bracketed prefix when the console config asks for timestamps.

    :ivar type: Kind of message ("text", "notification", "warning", ...).
    :ivar content: Rich markup text of the message.
    :ivar style: Style overriding the type's default content style.
    :ivar time: Timestamp of the message, or None for no time prefix.
    """
    type: Literal[
            "text",
            "notification",
            "error",
            "complete",
            "warning",
            "rule",
        ]
    content: str
    style: str|Style|None = None
    time: float|None = None

    def render(self, cfg: ConsoleConfig, tz_info: ZoneInfo|None = None) -> str:
        """Render to a Rich markup string according to ``cfg``."""
        content = self.content
        if self.type in _ICONS:
            icon_style, icon, content_style = _ICONS[self.type]
            content_style = self.style or content_style
            content = f"[{icon_style}]{icon}[/{icon_style}] {apply_style(content, content_style)}"
        elif self.type == "text" and self.style:
            content = apply_style(content, self.style)

        if cfg.show_time and self.time is not None:
            dt_utc = datetime.datetime.fromtimestamp(self.time, tz=datetime.timezone.utc)
            formatted = dt_utc.astimezone(tz_info).strftime(cfg.time_format.value)
            content = (f"[time.brackets]\\[[/time.brackets]"
                       f"[time.numbers]{formatted}[/time.numbers]"
                       f"[time.brackets]][/time.brackets] {content}")
        return content
