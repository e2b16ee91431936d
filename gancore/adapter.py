"""Per-network adapter used by the GAN orchestrator.

Wraps a torch.nn.Module and exposes the narrow contract the training loop
needs: forward, loss/gradient evaluation against a criterion, the gradient
of the loss with respect to the network input, and backpropagation of an
externally supplied error signal. Gradients are written into views
supplied by the caller; the adapter owns no parameter or gradient storage.
"""

from __future__ import annotations

from typing import Callable

import torch
import torch.autograd as autograd
import torch.nn as nn

from .parameters import ParameterSpan, alias_parameters, flatten_into, layer_weight_counts


Criterion = Callable[[torch.Tensor, torch.Tensor], torch.Tensor]


class NetworkAdapter:
    """Generator or discriminator wrapper.

    Attributes:
        network: The wrapped module.
        name: Display name ("generator" / "discriminator").
        parameters: Span over the GAN's flat parameter vector, set by bind().
        predictors / responses: Staging views assigned by the GAN.
        output: Result of the most recent forward().
        deterministic: Inference-mode flag mirrored onto the module.
    """

    def __init__(self, network: nn.Module, name: str):
        self.network = network
        self.name = name
        self.parameters: ParameterSpan | None = None
        self.predictors: torch.Tensor | None = None
        self.responses: torch.Tensor | None = None
        self.output: torch.Tensor | None = None
        self.deterministic = False

    # --- Parameters ---

    def layer_weight_counts(self) -> list[int]:
        return layer_weight_counts(self.network)

    def weight_count(self) -> int:
        return sum(self.layer_weight_counts())

    def bind(self, span: ParameterSpan) -> None:
        """Alias the module's parameters onto ``span``."""
        alias_parameters(self.network, span)
        self.parameters = span

    def _params(self) -> list[nn.Parameter]:
        return list(self.network.parameters())

    # --- Mode ---

    def set_deterministic(self, deterministic: bool) -> None:
        self.deterministic = deterministic
        self.reset_deterministic()

    def reset_deterministic(self) -> None:
        """Push the flag into every submodule (eval() when deterministic)."""
        self.network.train(not self.deterministic)

    # --- Passes ---

    def forward(self, inputs: torch.Tensor, track_grad: bool = False) -> torch.Tensor:
        """Run the network; keep the autograd graph only when ``track_grad``."""
        with torch.set_grad_enabled(track_grad):
            self.output = self.network(inputs)
        return self.output

    def evaluate(self, inputs: torch.Tensor, targets: torch.Tensor,
                 criterion: Criterion) -> float:
        """Loss on ``inputs`` without touching gradients."""
        output = self.forward(inputs)
        return float(criterion(output, targets))

    def gradient(self, inputs: torch.Tensor, targets: torch.Tensor,
                 criterion: Criterion, out: torch.Tensor) -> float:
        """Write d(loss)/d(parameters) into ``out`` (a flat view); return the loss."""
        params = self._params()
        output = self.forward(inputs, track_grad=True)
        loss = criterion(output, targets)
        grads = autograd.grad(loss, params, allow_unused=True)
        flatten_into(grads, out, params)
        return float(loss.detach())

    def input_gradient(self, inputs: torch.Tensor, targets: torch.Tensor,
                       criterion: Criterion) -> torch.Tensor:
        """d(loss)/d(inputs): the error signal handed back to the generator."""
        x = inputs.detach().requires_grad_(True)
        with torch.enable_grad():
            self.output = self.network(x)
            loss = criterion(self.output, targets)
            (delta,) = autograd.grad(loss, x)
        return delta

    def backward(self, error: torch.Tensor, out: torch.Tensor) -> None:
        """Backpropagate ``error`` from the last tracked forward() into ``out``.

        ``out`` receives the vector-Jacobian product of the stored output
        with respect to the parameters.
        """
        if self.output is None or not self.output.requires_grad:
            raise RuntimeError(
                f"{self.name}.backward() needs a preceding forward(track_grad=True)"
            )
        params = self._params()
        grads = autograd.grad(self.output, params, grad_outputs=error.reshape(self.output.shape),
                              allow_unused=True)
        flatten_into(grads, out, params)

    def __getstate__(self):
        # The last output may carry an autograd graph, which cannot be copied.
        state = self.__dict__.copy()
        state['output'] = None
        return state

    def __repr__(self) -> str:
        return f"NetworkAdapter(name={self.name!r}, weights={self.weight_count()})"
