"""Sample-quality metrics for trained generators."""

from __future__ import annotations

import numpy as np
import torch
from scipy import linalg


def _as_matrix(samples) -> np.ndarray:
    if isinstance(samples, torch.Tensor):
        samples = samples.detach().cpu().numpy()
    samples = np.asarray(samples, dtype=np.float64)
    if samples.ndim < 2:
        raise ValueError(f"samples must be (num_samples, *features), got shape {samples.shape}")
    if samples.shape[0] < 2:
        raise ValueError("at least two samples are needed to estimate a covariance")
    return samples.reshape(samples.shape[0], -1)


def frechet_distance(generated, real) -> float:
    """Frechet distance between Gaussians fitted to two sample sets.

    ``||mu_g - mu_r||^2 + Tr(C_g + C_r - 2 (C_g C_r)^{1/2})``, samples along
    dim 0. Computed on raw features; pass embeddings to get an FID.
    """
    g = _as_matrix(generated)
    r = _as_matrix(real)
    if g.shape[1] != r.shape[1]:
        raise ValueError(f"feature sizes differ: {g.shape[1]} vs {r.shape[1]}")

    mu_g, mu_r = g.mean(axis=0), r.mean(axis=0)
    cov_g = np.atleast_2d(np.cov(g, rowvar=False))
    cov_r = np.atleast_2d(np.cov(r, rowvar=False))

    covmean = linalg.sqrtm(cov_g @ cov_r)
    if not np.isfinite(covmean).all():
        offset = np.eye(cov_g.shape[0]) * 1e-6
        covmean = linalg.sqrtm((cov_g + offset) @ (cov_r + offset))
    # Numerical error can leave a tiny imaginary component.
    if np.iscomplexobj(covmean):
        covmean = covmean.real

    diff = mu_g - mu_r
    return float(diff @ diff + np.trace(cov_g) + np.trace(cov_r) - 2.0 * np.trace(covmean))
