from .config import GaussianMixtureConfig
from .runner import GaussianMixtureExperiment

__all__ = ['GaussianMixtureConfig', 'GaussianMixtureExperiment']
