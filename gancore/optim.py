"""Separable-objective driver over a single flat parameter tensor.

TorchOptimizer walks ``function`` batch by batch the way a stochastic
optimizer walks a separable objective:

    for each epoch:
        function.shuffle()
        for i in range(0, function.num_functions, batch_size):
            loss = function.evaluate_with_gradient(parameters, i, gradient, batch_size)
            step

The update rule itself is any torch.optim optimizer; it owns exactly one
parameter, the flat tensor, whose ``.grad`` is set to the objective's
combined gradient before each step.
"""

from __future__ import annotations

import torch

from . import display
from .errors import ConfigurationError


class TorchOptimizer:
    """Epoch/batch loop around a torch.optim optimizer.

    Args:
        optimizer_cls: torch.optim optimizer class.
        max_epochs: Upper bound on passes over the data.
        shuffle: Call ``function.shuffle()`` at the start of each epoch.
        tolerance: Stop when the epoch-mean loss changes by less than this.
            Negative disables the check.
        batch_size: Step size over ``i``; defaults to ``function.batch_size``
            and must equal it when given.
        **optimizer_kwargs: Forwarded to ``optimizer_cls`` (lr, betas, ...).
    """

    def __init__(self, optimizer_cls=torch.optim.Adam, max_epochs: int = 10,
                 shuffle: bool = True, tolerance: float = -1.0,
                 batch_size: int | None = None, **optimizer_kwargs):
        if max_epochs <= 0:
            raise ValueError(f"max_epochs must be > 0, got {max_epochs}")
        self.optimizer_cls = optimizer_cls
        self.max_epochs = max_epochs
        self.shuffle = shuffle
        self.tolerance = tolerance
        self.batch_size = batch_size
        self.optimizer_kwargs = optimizer_kwargs
        self.optimizer: torch.optim.Optimizer | None = None
        self.epochs_run = 0

    def _batch_size(self, function) -> int:
        return self.batch_size or function.batch_size

    def steps_per_epoch(self, function) -> int:
        b = self._batch_size(function)
        return (function.num_functions + b - 1) // b

    def optimize(self, function, parameters: torch.Tensor, *callbacks) -> float:
        """Run the loop; return the last epoch's mean loss."""
        batch_size = self._batch_size(function)
        if batch_size != function.batch_size:
            raise ConfigurationError(
                f"optimizer batch_size {batch_size} does not match the "
                f"function's batch_size {function.batch_size}"
            )
        self.optimizer = self.optimizer_cls([parameters], **self.optimizer_kwargs)
        gradient = torch.empty(0, dtype=parameters.dtype, device=parameters.device)
        policy = getattr(getattr(function, 'policy', None), 'value', 'gan')

        display.display_training_start(policy, function.num_functions, batch_size,
                                       self.max_epochs)
        for callback in callbacks:
            callback.begin_optimization(self, function, parameters)

        last_loss = float('nan')
        previous_loss = None
        self.epochs_run = 0
        for epoch in range(1, self.max_epochs + 1):
            if self.shuffle:
                function.shuffle()

            total = 0.0
            steps = 0
            for i in range(0, function.num_functions, batch_size):
                loss = function.evaluate_with_gradient(parameters, i, gradient, batch_size)
                parameters.grad = gradient
                self.optimizer.step()
                total += loss
                steps += 1
                for callback in callbacks:
                    callback.step_taken(self, function, parameters, loss)

            last_loss = total / steps
            self.epochs_run = epoch
            # Every callback sees the epoch, even after one has asked to stop.
            stop = [callback.end_epoch(self, function, parameters, epoch, last_loss)
                    for callback in callbacks]
            if any(stop):
                break
            if (previous_loss is not None and self.tolerance >= 0
                    and abs(previous_loss - last_loss) < self.tolerance):
                display.display_early_stop(
                    f"loss change below tolerance {self.tolerance:g}"
                )
                break
            previous_loss = last_loss

        for callback in callbacks:
            callback.end_optimization(self, function, parameters)
        parameters.grad = None
        display.display_training_end(last_loss, self.epochs_run)
        return last_loss
