"""Argument parser with Rich-rendered help and errors, and the shared flags."""

import argparse

from rich.table import Table

from console import TrainConsole, ConsoleConfig, ConsoleMode
from .policies import GANPolicy


class GANArgumentParser(argparse.ArgumentParser):
    """ArgumentParser whose help and error output go through TrainConsole.

    Errors print one line and exit with status 1; help exits with 0.
    """

    def __init__(self, experiment_name=None, **kwargs):
        kwargs.setdefault('add_help', False)
        super().__init__(**kwargs)
        self.experiment_name = experiment_name
        self.add_argument('-h', '--help', action='help', default=argparse.SUPPRESS,
                          help='Show this help message and exit')

    def error(self, message):
        self._ensure_console().print_error(message)
        raise SystemExit(1)

    def exit(self, status=0, message=None):
        if message:
            console = self._ensure_console()
            if status != 0:
                console.print_error(message.strip())
            else:
                console.print(message.strip())
        raise SystemExit(status)

    def print_help(self, file=None):
        console = self._ensure_console()
        console.rule(self.experiment_name or 'gancore')
        if self.description:
            console.print(f'  {self.description}')
        console.print()
        for group in self._action_groups:
            actions = [a for a in group._group_actions
                       if not isinstance(a, argparse._HelpAction)]
            if not actions:
                continue
            console.print(f'  [bold]{(group.title or "options").upper()}[/bold]')
            table = Table(box=None, show_header=False, padding=(0, 2), pad_edge=False)
            table.add_column('flags', no_wrap=True)
            table.add_column('help')
            for action in actions:
                flags = ', '.join(action.option_strings) or action.dest
                if action.choices:
                    flags += ' {' + ','.join(str(c) for c in action.choices) + '}'
                help_text = action.help or ''
                if '%(default)s' in help_text:
                    help_text = help_text % {'default': action.default}
                table.add_row(f'    [metric.value]{flags}[/metric.value]',
                              f'[label]{help_text}[/label]')
            console.print(table)
            console.print()

    @staticmethod
    def _ensure_console():
        # Help/error paths exit before the run's console mode is chosen.
        return TrainConsole(ConsoleConfig(mode=ConsoleMode.NORMAL, show_time=False))


def add_common_args(parser):
    """Flags every GAN experiment accepts; defaults come from GANConfig."""
    group = parser.add_argument_group('GAN options')
    group.add_argument('--policy', choices=[p.value for p in GANPolicy], default=None,
                       help='Adversarial objective')
    group.add_argument('--batch-size', type=int, default=None, dest='batch_size',
                       help='Samples per discriminator step')
    group.add_argument('--generator-update-step', type=int, default=None,
                       dest='generator_update_step',
                       help='Update the generator every N steps')
    group.add_argument('--pre-train-size', type=int, default=None, dest='pre_train_size',
                       help='Discriminator-only warm-up steps')
    group.add_argument('--multiplier', type=float, default=None,
                       help='Scale applied to the generator gradient')
    group.add_argument('--seed', type=int, default=None, help='Random seed')

    group = parser.add_argument_group('Output options')
    group.add_argument('--output-dir', default='output', dest='output_dir',
                       help='Checkpoint directory (default: %(default)s)')
    group.add_argument('--save-checkpoint', action='store_true', dest='save_checkpoint',
                       help='Save a checkpoint after training')
    group.add_argument('--silent', action='store_true',
                       help='Show the progress bar only; suppress text output')
    group.add_argument('--log-file', default=None, dest='log_file',
                       help='Write console output to this file instead of the terminal')
    group.add_argument('--no-console-output', action='store_true', dest='no_console_output',
                       help='Suppress all console output')


def overrides_from_args(args, config_class) -> dict:
    """Config fields explicitly set on the command line (non-None values)."""
    fields = config_class.__dataclass_fields__
    return {name: value for name, value in vars(args).items()
            if name in fields and value is not None}
