"""Noise sources for the generator input.

A noise source is any zero-argument callable returning a float; the GAN
calls it once per element of the noise buffer. The classes below also
provide a vectorized ``fill_`` that fill_noise() prefers when present.
"""

from __future__ import annotations

from typing import Callable

import torch


class GaussianNoise:
    """N(mean, std^2) samples."""

    def __init__(self, mean: float = 0.0, std: float = 1.0,
                 generator: torch.Generator | None = None):
        if std <= 0:
            raise ValueError(f"std must be > 0, got {std}")
        self.mean = mean
        self.std = std
        self.generator = generator

    def __call__(self) -> float:
        return float(torch.normal(self.mean, self.std, size=(1,), generator=self.generator))

    def fill_(self, tensor: torch.Tensor) -> torch.Tensor:
        return tensor.normal_(self.mean, self.std, generator=self.generator)


class UniformNoise:
    """U(low, high) samples."""

    def __init__(self, low: float = -1.0, high: float = 1.0,
                 generator: torch.Generator | None = None):
        if high <= low:
            raise ValueError(f"high must be > low, got low={low}, high={high}")
        self.low = low
        self.high = high
        self.generator = generator

    def __call__(self) -> float:
        u = torch.rand(1, generator=self.generator)
        return float(self.low + (self.high - self.low) * u)

    def fill_(self, tensor: torch.Tensor) -> torch.Tensor:
        return tensor.uniform_(self.low, self.high, generator=self.generator)


def fill_noise(tensor: torch.Tensor, source: Callable[[], float]) -> torch.Tensor:
    """Fill ``tensor`` in place from ``source``, one draw per element."""
    fill = getattr(source, 'fill_', None)
    if fill is not None:
        return fill(tensor)
    values = [float(source()) for _ in range(tensor.numel())]
    with torch.no_grad():
        tensor.copy_(torch.tensor(values, dtype=tensor.dtype).view(tensor.shape))
    return tensor
