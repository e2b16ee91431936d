"""Display functions called by the training code.

All functions obtain the TrainConsole singleton internally and use the
semantic theme styles from console/themes.py.
"""

from console import TrainConsole


# Progress task name constants
TASK_TRAINING = "training"


def display_reset(gen_weights, disc_weights):
    TrainConsole().print_notification(
        f"Parameters allocated: [label]generator[/label] "
        f"[metric.value]{gen_weights:,}[/metric.value]  "
        f"[label]discriminator[/label] [metric.value]{disc_weights:,}[/metric.value]"
    )


def display_training_start(policy_name, num_functions, batch_size, max_epochs):
    console = TrainConsole()
    console.rule(f"{policy_name} training")
    console.print(
        f"[label]samples=[/label][metric.value]{num_functions}[/metric.value] "
        f"[label]batch=[/label][metric.value]{batch_size}[/metric.value] "
        f"[label]epochs=[/label][metric.value]{max_epochs}[/metric.value]"
    )


def display_training_end(final_loss, epochs_run):
    TrainConsole().print_complete(
        f"Optimization finished after {epochs_run} epoch(s): "
        f"[label]loss=[/label][metric.value]{final_loss:.4f}[/metric.value]"
    )


def display_early_stop(reason):
    TrainConsole().print_warning(f"Stopping early: {reason}")


def display_epoch_loss(epoch, loss):
    TrainConsole().print(
        f"[label]epoch {epoch}[/label] "
        f"[label]loss=[/label][metric.value]{loss:.4f}[/metric.value]"
    )


def training_progress_start(policy_name, total):
    """Create the main training progress bar (one tick per batch)."""
    TrainConsole().create_progress_task(
        TASK_TRAINING,
        f"[policy]{policy_name}[/policy]",
        total=total,
    )


def training_progress_update(policy_name, loss):
    """Advance the training progress bar by one batch."""
    desc = (f"[policy]{policy_name}[/policy] "
            f"[label]loss=[/label][metric.value]{loss:.4f}[/metric.value]")
    TrainConsole().update_progress_task(TASK_TRAINING, description=desc, advance=1)


def training_progress_end():
    TrainConsole().remove_progress_task(TASK_TRAINING)
