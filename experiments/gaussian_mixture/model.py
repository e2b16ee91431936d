"""MLP generator and discriminator for low-dimensional data."""

import torch.nn as nn


def build_generator(noise_dim: int, hidden_dim: int = 64, out_dim: int = 2) -> nn.Module:
    return nn.Sequential(
        nn.Linear(noise_dim, hidden_dim),
        nn.ReLU(),
        nn.Linear(hidden_dim, hidden_dim),
        nn.ReLU(),
        nn.Linear(hidden_dim, out_dim),
    )


def build_discriminator(in_dim: int = 2, hidden_dim: int = 64, dropout: float = 0.1) -> nn.Module:
    """Outputs one unbounded score per sample (logit or critic value)."""
    return nn.Sequential(
        nn.Linear(in_dim, hidden_dim),
        nn.LeakyReLU(0.2),
        nn.Dropout(dropout),
        nn.Linear(hidden_dim, hidden_dim),
        nn.LeakyReLU(0.2),
        nn.Linear(hidden_dim, 1),
    )
