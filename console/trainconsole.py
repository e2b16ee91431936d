import time
from zoneinfo import ZoneInfo

from rich.console import Console
from rich.progress import (
    Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn,
    TimeElapsedColumn, TimeRemainingColumn,
)
from rich.table import Column

from .config import ConsoleConfig, ConsoleMode
from .dataclasses import ContentItem
from .themes import DarkTheme


class TrainConsole:
    """
    Singleton console used for all training output.

    Initialize once with a `ConsoleConfig`; later calls to ``TrainConsole()``
    return the same instance. Passing a different config re-initializes it.

    Modes:
      - NORMAL: Rich output to the terminal.
      - LOGGING: plain output appended to ``cfg.log_file``.
      - SILENT: progress bars only, text suppressed.
      - NULL: nothing at all (used by the test suite).

    :raises ValueError: LOGGING mode without a ``log_file``.
    :raises RuntimeError: When the log file cannot be opened.
    """
    _instance = None
    _console: Console|None = None
    _cfg: ConsoleConfig|None = None
    _log_file_handle = None
    _mode: ConsoleMode|None = None
    _progress_bar: Progress|None = None
    _progress_tasks: dict = {}
    _tz_info: ZoneInfo|None = None

    def __new__(cls, cfg: ConsoleConfig|None = None):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialize(cfg)
        elif cfg is not None and cls._instance._cfg != cfg:
            cls._instance._initialize(cfg)
        return cls._instance

    def _initialize(self, cfg: ConsoleConfig|None = None):
        # Close existing log file if re-initializing
        if self._log_file_handle:
            self._log_file_handle.close()
            self._log_file_handle = None
        self._progress_bar = None
        self._progress_tasks = {}

        self._cfg = cfg if cfg is not None else ConsoleConfig()
        self._mode = self._cfg.mode
        self._tz_info = ZoneInfo(self._cfg.timezone) if self._cfg.timezone else None

        theme = DarkTheme()

        if self._mode == ConsoleMode.NULL:
            self._console = Console(quiet=True)

        elif self._mode == ConsoleMode.LOGGING:
            if not self._cfg.log_file:
                raise ValueError("log_file must be specified in ConsoleConfig for logging mode")
            try:
                self._log_file_handle = open(self._cfg.log_file, "a+", encoding="utf-8")
            except OSError as e:
                raise RuntimeError(f"Failed to open log file {self._cfg.log_file}: {e}") from e
            self._console = Console(
                file=self._log_file_handle,
                theme=theme,
                force_terminal=False,
                no_color=True,
            )

        elif self._mode in (ConsoleMode.NORMAL, ConsoleMode.SILENT):
            self._console = Console(
                theme=theme,
                no_color=not self._cfg.use_colors,
                highlight=False,
            )

        else:
            raise ValueError(f"Unsupported console mode: {self._mode}")

    def _should_do_terminal(self):
        return self._mode in (ConsoleMode.NORMAL, ConsoleMode.SILENT)

    def _should_do_print(self):
        return self._mode not in (ConsoleMode.NULL, ConsoleMode.SILENT)

    # --- Text output ---

    def print(self, content: str = "", style: str = ""):
        self._print_message(ContentItem(type="text", content=content, style=style or None,
                                        time=time.time()))

    def print_notification(self, content: str):
        self._print_message(ContentItem(type="notification", content=content, time=time.time()))

    def print_warning(self, content: str):
        self._print_message(ContentItem(type="warning", content=content, time=time.time()))

    def print_error(self, content: str):
        self._print_message(ContentItem(type="error", content=content, time=time.time()))

    def print_complete(self, content: str):
        self._print_message(ContentItem(type="complete", content=content, time=time.time()))

    def rule(self, content: str = ""):
        if not self._should_do_print():
            return
        self._console.rule(f"[rule.text]{content}[/rule.text]", style="rule.line")

    def handle_exception(self, show_locals: bool = False):
        self._console.print_exception(show_locals=show_locals)

    def _print_message(self, item: ContentItem):
        if not self._should_do_print():
            return
        self._console.print(item.render(self._cfg, self._tz_info))

    # --- Progress ---

    def progress_start(self):
        if not self._should_do_terminal():
            return
        if self._progress_bar is None:
            self._progress_bar = Progress(
                SpinnerColumn(table_column=Column(max_width=3)),
                TextColumn("[progress.description]{task.description}",
                           table_column=Column(max_width=40, min_width=15)),
                BarColumn(bar_width=None),
                TaskProgressColumn(table_column=Column(max_width=10)),
                TimeElapsedColumn(table_column=Column(max_width=15)),
                TimeRemainingColumn(table_column=Column(max_width=15)),
                console=self._console, transient=True, expand=True,
            )
            self._progress_bar.start()

    def progress_stop(self):
        if not self._should_do_terminal() or self._progress_bar is None:
            return
        self._progress_bar.stop()
        self._progress_bar = None
        self._progress_tasks = {}

    def create_progress_task(self, task_name: str, task_desc: str, total: float|None = None, **kwargs):
        if not self._should_do_terminal():
            return
        if self._progress_bar is None:
            self.progress_start()
        task_id = self._progress_bar.add_task(task_desc, total=total, **kwargs)
        self._progress_tasks[task_name] = task_id

    def update_progress_task(self, task_name: str, completed: float|None = None, **kwargs) -> bool:
        if not self._should_do_terminal() or task_name not in self._progress_tasks:
            return False
        self._progress_bar.update(self._progress_tasks[task_name], completed=completed, **kwargs)
        return True

    def remove_progress_task(self, task_name: str) -> bool:
        if not self._should_do_terminal() or task_name not in self._progress_tasks:
            return False
        self._progress_bar.remove_task(self._progress_tasks.pop(task_name))
        if not self._progress_tasks:
            self.progress_stop()
        return True

    def has_progress_task(self, task_name: str) -> bool:
        return task_name in self._progress_tasks

    # --- Accessors ---

    def get_console_config(self) -> ConsoleConfig:
        return self._cfg

    def get_tz_info(self) -> ZoneInfo|None:
        return self._tz_info

    def close(self):
        """Stop progress output and release the log file, if any."""
        self.progress_stop()
        if self._log_file_handle:
            self._log_file_handle.close()
            self._log_file_handle = None
            self._mode = ConsoleMode.NULL
            self._console = Console(quiet=True)
