"""Weight initialization rules writing directly into the flat parameter vector.

``initialize(network, parameters, offset)`` fills the region of
``parameters`` starting at ``offset`` that belongs to ``network`` (its
weight count long), parameter by parameter in ``network.parameters()``
order. Nothing is allocated; values land in place.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import torch
import torch.nn as nn

from .parameters import weight_count


class InitializationRule(ABC):
    """Strategy for filling a network's share of the flat parameter vector."""

    def initialize(self, network: nn.Module, parameters: torch.Tensor, offset: int = 0) -> None:
        n = weight_count(network)
        if offset < 0 or offset + n > parameters.numel():
            raise ValueError(
                f"region [{offset}, {offset + n}) outside parameter vector "
                f"of length {parameters.numel()}"
            )
        with torch.no_grad():
            position = offset
            for name, param in network.named_parameters():
                k = param.numel()
                self.fill_(parameters.narrow(0, position, k).view(param.shape), name)
                position += k

    @abstractmethod
    def fill_(self, region: torch.Tensor, name: str) -> None:
        """Fill the region of parameter ``name`` in place."""
        ...


class GaussianInitialization(InitializationRule):
    """Every weight drawn from N(mean, std^2)."""

    def __init__(self, mean: float = 0.0, std: float = 1.0):
        self.mean = mean
        self.std = std

    def fill_(self, region, name):
        region.normal_(self.mean, self.std)


class UniformInitialization(InitializationRule):
    """Every weight drawn from U(low, high)."""

    def __init__(self, low: float = -1.0, high: float = 1.0):
        self.low = low
        self.high = high

    def fill_(self, region, name):
        region.uniform_(self.low, self.high)


class XavierInitialization(InitializationRule):
    """Xavier-uniform for matrices and kernels, zero biases, unit 1-D scales."""

    def __init__(self, gain: float = 1.0):
        self.gain = gain

    def fill_(self, region, name):
        if region.dim() >= 2:
            nn.init.xavier_uniform_(region, gain=self.gain)
        elif name.endswith("bias"):
            region.zero_()
        else:
            region.fill_(1.0)
