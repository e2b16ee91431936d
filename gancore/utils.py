"""Seeding and environment metadata for reproducible GAN runs."""

import os
import platform
import random

import numpy as np
import torch


def set_seeds(seed: int) -> torch.Generator:
    """Seed python, numpy and torch; return a torch.Generator seeded the same way.

    The returned generator can be handed to noise sources and to
    StagingBuffer.shuffle() so a run's sampling does not depend on other
    consumers of the global torch RNG.
    """
    os.environ['PYTHONHASHSEED'] = str(seed)
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)
    torch.cuda.manual_seed_all(seed)
    generator = torch.Generator()
    generator.manual_seed(seed)
    return generator


def get_environment_info() -> dict:
    """Library and hardware versions stored alongside checkpoints."""
    info = {
        'torch_version': torch.__version__,
        'numpy_version': np.__version__,
        'python_version': platform.python_version(),
        'platform': platform.platform(),
        'cuda_available': torch.cuda.is_available(),
        'default_dtype': str(torch.get_default_dtype()),
    }
    if torch.cuda.is_available():
        info['cuda_version'] = torch.version.cuda
        info['gpu_name'] = torch.cuda.get_device_name(0)
    return info


# Differences in these mean a resumed run may not reproduce the original.
_REPRODUCIBILITY_KEYS = {
    'torch_version': 'PyTorch version',
    'cuda_version': 'CUDA version',
    'gpu_name': 'GPU model',
    'default_dtype': 'default dtype',
}


def check_environment_compatibility(saved_env: dict,
                                    current_env: dict | None = None) -> list[str]:
    """Human-readable differences between a saved and the current environment."""
    if current_env is None:
        current_env = get_environment_info()

    warnings = []
    for key, label in _REPRODUCIBILITY_KEYS.items():
        saved_val = saved_env.get(key)
        current_val = current_env.get(key)
        if saved_val is None or current_val is None:
            continue
        if str(saved_val) != str(current_val):
            warnings.append(f"{label}: saved={saved_val}, current={current_val}")
    return warnings
