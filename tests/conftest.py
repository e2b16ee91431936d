"""Shared fixtures for gancore unit tests."""

import pytest
import torch
import torch.nn as nn

from gancore import GAN, GaussianInitialization, GaussianNoise


# ---- Console singleton: force NULL mode before any test touches it ----

@pytest.fixture(autouse=True, scope="session")
def _silence_console():
    """Initialize TrainConsole in NULL mode to suppress all output during tests.

    Tests that inspect output re-initialize the singleton with their own
    config and restore NULL mode afterwards.
    """
    from console.config import ConsoleConfig, ConsoleMode
    from console.trainconsole import TrainConsole
    TrainConsole(ConsoleConfig(mode=ConsoleMode.NULL))


# ---- Tiny networks ----

NOISE_DIM = 3
SAMPLE_DIM = 2


@pytest.fixture
def tiny_generator():
    """3->4->2 MLP, 26 params."""
    torch.manual_seed(42)
    return nn.Sequential(nn.Linear(NOISE_DIM, 4), nn.Tanh(), nn.Linear(4, SAMPLE_DIM))


@pytest.fixture
def tiny_discriminator():
    """2->4->1 MLP, 17 params."""
    torch.manual_seed(43)
    return nn.Sequential(nn.Linear(SAMPLE_DIM, 4), nn.Tanh(), nn.Linear(4, 1))


@pytest.fixture
def tiny_data():
    """8 two-dimensional samples."""
    torch.manual_seed(44)
    return torch.randn(8, SAMPLE_DIM)


@pytest.fixture
def make_gan(tiny_generator, tiny_discriminator):
    """Factory for GANs over the tiny networks; keyword args go to GAN()."""
    def factory(**kwargs):
        kwargs.setdefault('noise_dim', NOISE_DIM)
        kwargs.setdefault('batch_size', 4)
        kwargs.setdefault('initialize_rule', GaussianInitialization(0.0, 0.5))
        kwargs.setdefault('noise_function', GaussianNoise())
        return GAN(tiny_generator, tiny_discriminator, **kwargs)
    return factory


@pytest.fixture
def staged_gan(make_gan, tiny_data):
    """Standard GAN with tiny_data staged (labels 1/0)."""
    gan = make_gan()
    gan.reset_data(tiny_data, 1.0, 0.0)
    return gan
