"""Adversarial training core.

A GAN couples a generator and a discriminator through one flat parameter
vector and exposes the pair to an optimizer as a separable objective:
- GAN: staging, alternation schedule and gradient assembly
- GANPolicy / PolicyRules: per-policy criterion, labels and regularization
- NetworkAdapter / ParameterSpan: aliasing of module parameters onto the vector
- TorchOptimizer and callbacks: the epoch/batch loop around torch.optim
- noise sources, initialization rules, metrics and checkpoints
"""

from .errors import GANError, ConfigurationError, DimensionMismatchError
from .config import GANConfig
from .policies import (
    GANPolicy, PolicyRules, Regularization, get_policy_rules,
    cross_entropy_criterion, earth_mover_criterion,
)
from .parameters import ParameterSpan, alias_parameters, layer_weight_counts, weight_count
from .staging import StagingBuffer
from .adapter import NetworkAdapter
from .noise import GaussianNoise, UniformNoise, fill_noise
from .init_rules import (
    InitializationRule, GaussianInitialization, UniformInitialization,
    XavierInitialization,
)
from .gan import GAN
from .optim import TorchOptimizer
from .callbacks import (
    OptimizerCallback, PrintLoss, ProgressBar, EarlyStopAtMinLoss, StoreLoss,
)
from .metrics import frechet_distance
from .checkpoints import save_checkpoint, load_checkpoint, validate_checkpoint
from .registry import ExperimentRegistry
from .utils import set_seeds, get_environment_info

__all__ = [
    'GANError', 'ConfigurationError', 'DimensionMismatchError',
    'GANConfig',
    'GANPolicy', 'PolicyRules', 'Regularization', 'get_policy_rules',
    'cross_entropy_criterion', 'earth_mover_criterion',
    'ParameterSpan', 'alias_parameters', 'layer_weight_counts', 'weight_count',
    'StagingBuffer',
    'NetworkAdapter',
    'GaussianNoise', 'UniformNoise', 'fill_noise',
    'InitializationRule', 'GaussianInitialization', 'UniformInitialization',
    'XavierInitialization',
    'GAN',
    'TorchOptimizer',
    'OptimizerCallback', 'PrintLoss', 'ProgressBar', 'EarlyStopAtMinLoss', 'StoreLoss',
    'frechet_distance',
    'save_checkpoint', 'load_checkpoint', 'validate_checkpoint',
    'ExperimentRegistry',
    'set_seeds', 'get_environment_info',
]
