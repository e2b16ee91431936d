"""Callbacks observed by TorchOptimizer.

A callback may implement any of the four hooks; the defaults do nothing.
end_epoch() returning True asks the optimizer to stop after this epoch.
"""

from __future__ import annotations

from . import display


class OptimizerCallback:
    """Base class with no-op hooks."""

    def begin_optimization(self, optimizer, function, parameters) -> None:
        pass

    def step_taken(self, optimizer, function, parameters, loss: float) -> None:
        pass

    def end_epoch(self, optimizer, function, parameters, epoch: int, loss: float) -> bool:
        return False

    def end_optimization(self, optimizer, function, parameters) -> None:
        pass


def _policy_name(function) -> str:
    policy = getattr(function, 'policy', None)
    return getattr(policy, 'value', 'gan')


class PrintLoss(OptimizerCallback):
    """Print the mean loss after every epoch."""

    def end_epoch(self, optimizer, function, parameters, epoch, loss):
        display.display_epoch_loss(epoch, loss)
        return False


class ProgressBar(OptimizerCallback):
    """One progress tick per optimizer step across all epochs."""

    def begin_optimization(self, optimizer, function, parameters):
        total = optimizer.steps_per_epoch(function) * optimizer.max_epochs
        display.training_progress_start(_policy_name(function), total)

    def step_taken(self, optimizer, function, parameters, loss):
        display.training_progress_update(_policy_name(function), loss)

    def end_optimization(self, optimizer, function, parameters):
        display.training_progress_end()


class EarlyStopAtMinLoss(OptimizerCallback):
    """Stop when the epoch loss has not improved for ``patience`` epochs."""

    def __init__(self, patience: int = 10):
        if patience <= 0:
            raise ValueError(f"patience must be > 0, got {patience}")
        self.patience = patience
        self.best_loss = float('inf')
        self.best_epoch = 0

    def begin_optimization(self, optimizer, function, parameters):
        self.best_loss = float('inf')
        self.best_epoch = 0

    def end_epoch(self, optimizer, function, parameters, epoch, loss):
        if loss < self.best_loss:
            self.best_loss = loss
            self.best_epoch = epoch
            return False
        if epoch - self.best_epoch >= self.patience:
            display.display_early_stop(
                f"no improvement for {self.patience} epoch(s) "
                f"(best {self.best_loss:.4f} at epoch {self.best_epoch})"
            )
            return True
        return False


class StoreLoss(OptimizerCallback):
    """Record per-step and per-epoch losses."""

    def __init__(self):
        self.step_losses: list[float] = []
        self.epoch_losses: list[float] = []

    def step_taken(self, optimizer, function, parameters, loss):
        self.step_losses.append(loss)

    def end_epoch(self, optimizer, function, parameters, epoch, loss):
        self.epoch_losses.append(loss)
        return False
