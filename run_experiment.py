"""Entry point for running GAN experiments.

Usage:
    python run_experiment.py <experiment_name> [experiment-specific args]
    python run_experiment.py --list

Examples:
    python run_experiment.py gaussian_mixture --policy wgan_gp --epochs 50
    python run_experiment.py gaussian_mixture --save-checkpoint --output-dir runs
"""

import sys

from console import TrainConsole, ConsoleConfig, ConsoleMode
from gancore import ExperimentRegistry, GANError
from gancore.cli import GANArgumentParser, add_common_args


def _usage_console():
    return TrainConsole(ConsoleConfig(mode=ConsoleMode.NORMAL, show_time=False))


def list_experiments():
    """Print all registered experiments."""
    import experiments  # noqa: F401

    console = _usage_console()
    console.print("\n[bold]Available experiments:[/bold]")
    for name in ExperimentRegistry.list_all():
        doc = (ExperimentRegistry.get(name).__doc__ or "").strip()
        first_line = doc.split('\n')[0] if doc else ""
        console.print(f"  [metric.value]{name:25s}[/metric.value]  {first_line}")
    console.print()


def _console_config(args) -> ConsoleConfig:
    if args.no_console_output:
        return ConsoleConfig(mode=ConsoleMode.NULL)
    if args.log_file:
        return ConsoleConfig(mode=ConsoleMode.LOGGING, log_file=args.log_file)
    if args.silent:
        return ConsoleConfig(mode=ConsoleMode.SILENT, show_time=False)
    return ConsoleConfig(mode=ConsoleMode.NORMAL, show_time=False)


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv

    if '--list' in argv:
        list_experiments()
        return None

    if not argv or argv[0].startswith('-'):
        is_help = '--help' in argv or '-h' in argv
        console = _usage_console()
        console.print()
        console.print("  [bold]Usage:[/bold]")
        console.print("    [metric.value]python run_experiment.py[/metric.value] <experiment> [args...]")
        console.print("    [metric.value]python run_experiment.py[/metric.value] --list")
        console.print()
        list_experiments()
        sys.exit(0 if is_help else 1)

    experiment_name = argv[0]

    import experiments  # noqa: F401

    try:
        experiment_cls = ExperimentRegistry.get(experiment_name)
    except KeyError as e:
        _usage_console().print_error(str(e))
        sys.exit(1)

    parser = GANArgumentParser(
        experiment_name=experiment_name,
        description=f'Run the {experiment_name} experiment',
    )
    add_common_args(parser)
    experiment_cls.add_args(parser)
    args = parser.parse_args(argv[1:])

    console = TrainConsole(_console_config(args))
    try:
        config = experiment_cls.build_config(args)
        return experiment_cls.run(config)
    except GANError as e:
        console.print_error(str(e))
        sys.exit(1)
    except ValueError as e:
        console.print_error(f"Invalid configuration: {e}")
        sys.exit(1)
    finally:
        if args.log_file:
            console.close()


if __name__ == "__main__":
    main()
