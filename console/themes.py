from rich.style import Style
from rich.theme import Theme


class DarkTheme(Theme):
    """
    Dark color palette for training output.

    Maps the semantic style names used across the package (notification,
    warning, metric, progress, ...) onto a small set of base colors.

    :ivar BLUE: Light blue used for notifications and rules.
    :ivar GREEN: Green used for success indicators.
    :ivar YELLOW: Yellow used for warnings and elapsed time.
    :ivar RED: Red used for error indicators.
    :ivar MED_GREY: Medium grey for labels and subtle text.
    """
    BLUE = '#61AFEF'
    RICH_BLUE = '#4B6BFF'
    CYAN = '#56B6C2'
    GREEN = '#98C379'
    YELLOW = '#E5C07B'
    RED = '#E06C75'
    ORANGE = '#D19A66'
    MED_GREY = '#8A8F98'
    PURPLE = '#663399'
    DARK_PURPLE = '#4B0082'
    MAGENTA = '#BE50AE'
    PINK = '#FF69B4'
    RICH_PINK = '#FF1493'
    DEFAULT_TEXT = '#F8E8EC'

    def __init__(self):
        super().__init__({
            # Basic colors
            "blue": Style(color=self.BLUE),
            "cyan": Style(color=self.CYAN),
            "green": Style(color=self.GREEN),
            "yellow": Style(color=self.YELLOW),
            "red": Style(color=self.RED),
            "med_grey": Style(color=self.MED_GREY),
            "magenta": Style(color=self.MAGENTA),

            "text": Style(color=self.DEFAULT_TEXT),

            # Content type styles
            "notification.icon": Style(color=self.PURPLE),
            "notification.content": Style(color=self.BLUE),
            "complete.icon": Style(color=self.GREEN),
            "complete.content": Style(color=self.BLUE),
            "warning.icon": Style(color=self.ORANGE),
            "warning.content": Style(color=self.YELLOW),
            "error.icon": Style(color=self.RED),
            "error.content": Style(color=self.RED),

            # Rules
            "rule.text": Style(color=self.ORANGE),
            "rule.line": Style(color=self.BLUE),

            # Time display
            "time.numbers": Style(color=self.ORANGE),
            "time.brackets": Style(color=self.DARK_PURPLE),

            # Progress
            "bar.complete": Style(color=self.RICH_BLUE),
            "bar.finished": Style(color=self.GREEN),
            "bar.pulse": Style(color=self.RICH_PINK),
            "progress.description": Style(color=self.RICH_BLUE),
            "progress.elapsed": Style(color=self.YELLOW),
            "progress.percentage": Style(color=self.RICH_BLUE),
            "progress.remaining": Style(color=self.PINK),
            "progress.spinner": Style(color=self.RICH_PINK),

            # Training semantic styles
            "metric.improved": Style(color=self.GREEN, bold=True),
            "metric.degraded": Style(color=self.RED, bold=True),
            "metric.value": Style(color=self.CYAN),
            "policy": Style(color=self.YELLOW),
            "success": Style(color=self.GREEN, bold=True),
            "label": Style(color=self.MED_GREY),
            "path": Style(color=self.GREEN),
        })
