"""Samples from a ring of isotropic 2-D Gaussians."""

import math

import torch


def mode_centers(num_modes: int, radius: float) -> torch.Tensor:
    angles = torch.arange(num_modes, dtype=torch.get_default_dtype()) * (2 * math.pi / num_modes)
    return torch.stack([radius * torch.cos(angles), radius * torch.sin(angles)], dim=1)


def sample_ring_mixture(num_samples: int, num_modes: int = 8, radius: float = 2.0,
                        std: float = 0.05, generator: torch.Generator | None = None) -> torch.Tensor:
    """(num_samples, 2) points, each drawn around a uniformly chosen mode."""
    centers = mode_centers(num_modes, radius)
    modes = torch.randint(num_modes, (num_samples,), generator=generator)
    noise = torch.randn(num_samples, 2, generator=generator) * std
    return centers[modes] + noise
