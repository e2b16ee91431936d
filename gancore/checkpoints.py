"""Checkpoint files for GAN training runs.

A checkpoint bundles GAN.state_dict() with the RNG states, the caller's
training state (epoch counters, optimizer state, ...) and environment
metadata. validate_checkpoint() re-checks a live run against a saved file
for bit-identity, which is how resumed runs are verified.
"""

from __future__ import annotations

import os
import random

import numpy as np
import torch

from console import TrainConsole
from .utils import check_environment_compatibility, get_environment_info


def checkpoint_path(directory, step_or_epoch) -> str:
    return os.path.join(directory, 'checkpoints', f'checkpoint_{step_or_epoch}.pt')


def _get_rng_states() -> dict:
    states = {
        'torch': torch.random.get_rng_state(),
        'python': random.getstate(),
        'numpy': np.random.get_state(),
    }
    if torch.cuda.is_available():
        states['torch_cuda'] = torch.cuda.get_rng_state_all()
    return states


def _set_rng_states(states: dict) -> None:
    torch.random.set_rng_state(states['torch'])
    random.setstate(states['python'])
    np.random.set_state(states['numpy'])
    if 'torch_cuda' in states and torch.cuda.is_available():
        torch.cuda.set_rng_state_all(states['torch_cuda'])


def save_checkpoint(directory, gan, step_or_epoch, training_state=None) -> str:
    """Write ``gan`` plus RNG/environment metadata; return the file path."""
    path = checkpoint_path(directory, step_or_epoch)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    torch.save({
        'step': step_or_epoch,
        'gan': gan.state_dict(),
        'rng_states': _get_rng_states(),
        'training_state': training_state,
        'environment': get_environment_info(),
    }, path)
    return path


def load_checkpoint(directory, gan, step_or_epoch, restore_rng: bool = True):
    """Restore ``gan`` (and optionally the RNGs) from a saved checkpoint.

    Returns the saved training_state. Environment differences that may
    affect reproducibility are reported as console warnings.
    """
    path = checkpoint_path(directory, step_or_epoch)
    if not os.path.exists(path):
        raise FileNotFoundError(f"No checkpoint at {path}")

    # RNG states hold numpy/python objects, so this is not a weights-only load.
    checkpoint = torch.load(path, map_location='cpu', weights_only=False)
    gan.load_state_dict(checkpoint['gan'])
    if restore_rng and 'rng_states' in checkpoint:
        _set_rng_states(checkpoint['rng_states'])

    console = TrainConsole()
    for warning in check_environment_compatibility(checkpoint.get('environment', {})):
        console.print_warning(f"Checkpoint environment differs: {warning}")
    return checkpoint.get('training_state')


def _compare_state(live, saved) -> bool:
    """Recursive bit-identity check over tensors, arrays, dicts, sequences and scalars."""
    if type(live) is not type(saved):
        return False
    if isinstance(live, torch.Tensor):
        if live.shape != saved.shape or live.dtype != saved.dtype:
            return False
        return torch.equal(live.cpu(), saved.cpu())
    if isinstance(live, np.ndarray):
        return np.array_equal(live, saved)
    if isinstance(live, dict):
        if live.keys() != saved.keys():
            return False
        return all(_compare_state(live[k], saved[k]) for k in live)
    if isinstance(live, (list, tuple)):
        if len(live) != len(saved):
            return False
        return all(_compare_state(a, b) for a, b in zip(live, saved))
    return live == saved


def validate_checkpoint(directory, gan, step_or_epoch, training_state=None) -> bool | None:
    """Compare the live run against a saved checkpoint and report the result.

    Returns True/False for identical/non-identical, None if no file exists.
    """
    console = TrainConsole()
    path = checkpoint_path(directory, step_or_epoch)
    if not os.path.exists(path):
        console.print_warning(f"No checkpoint found at step/epoch {step_or_epoch}")
        return None

    checkpoint = torch.load(path, map_location='cpu', weights_only=False)

    gan_ok = _compare_state(gan.state_dict(), checkpoint['gan'])

    has_rng = 'rng_states' in checkpoint
    rng_ok = _compare_state(_get_rng_states(), checkpoint['rng_states']) if has_rng else True

    has_state = checkpoint.get('training_state') is not None
    state_ok = True
    if has_state and training_state is not None:
        state_ok = _compare_state(training_state, checkpoint['training_state'])

    all_ok = gan_ok and rng_ok and state_ok

    def _mark(ok):
        return '[metric.improved]OK[/metric.improved]' if ok else '[metric.degraded]MISMATCH[/metric.degraded]'

    rng_display = f"  rng {_mark(rng_ok)}" if has_rng else ""
    state_display = f"  state {_mark(state_ok)}" if has_state else ""
    summary = f"  (gan {_mark(gan_ok)}{rng_display}{state_display})"
    if all_ok:
        console.print_complete(
            f"Checkpoint {step_or_epoch}: [metric.improved]bit-identical[/metric.improved]{summary}"
        )
    else:
        console.print_error(f"Checkpoint {step_or_epoch}: non-identical{summary}")
    return all_ok
