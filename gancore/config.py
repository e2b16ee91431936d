"""Configuration dataclass for GAN training.

Experiment configs should inherit from GANConfig to pick up the fields
the orchestrator reads (policy, noise shape, update schedule).
"""

from dataclasses import dataclass

from .errors import ConfigurationError
from .policies import GANPolicy


@dataclass
class GANConfig:
    """Hyperparameters of the adversarial training loop."""
    policy: GANPolicy | str = GANPolicy.STANDARD_GAN
    noise_dim: int | tuple[int, ...] = 100
    batch_size: int = 32
    generator_update_step: int = 1   # update G every N discriminator steps
    pre_train_size: int = 0          # discriminator-only warm-up batches
    multiplier: float = 1.0          # G/D learning-rate ratio compensation
    clipping_parameter: float = 0.01 # WGAN weight clipping bound
    lambda_: float = 10.0            # WGAN-GP penalty coefficient
    seed: int = 42

    def __post_init__(self):
        self.policy = GANPolicy.parse(self.policy)
        if isinstance(self.noise_dim, int):
            if self.noise_dim <= 0:
                raise ConfigurationError(f"noise_dim must be > 0, got {self.noise_dim}")
        else:
            self.noise_dim = tuple(self.noise_dim)
            if not self.noise_dim or any(d <= 0 for d in self.noise_dim):
                raise ConfigurationError(
                    f"noise_dim must be a non-empty shape of positive sizes, got {self.noise_dim}"
                )
        if self.batch_size <= 0:
            raise ConfigurationError(f"batch_size must be > 0, got {self.batch_size}")
        if self.generator_update_step <= 0:
            raise ConfigurationError(
                f"generator_update_step must be > 0, got {self.generator_update_step}"
            )
        if self.pre_train_size < 0:
            raise ConfigurationError(f"pre_train_size must be >= 0, got {self.pre_train_size}")
        if self.seed < 0:
            raise ConfigurationError(f"seed must be >= 0, got {self.seed}")
        if self.policy is GANPolicy.WGAN and self.clipping_parameter <= 0:
            raise ConfigurationError(
                f"WGAN requires clipping_parameter > 0, got {self.clipping_parameter}"
            )
        if self.policy is GANPolicy.WGAN_GP and self.lambda_ <= 0:
            raise ConfigurationError(f"WGAN-GP requires lambda_ > 0, got {self.lambda_}")

    @property
    def noise_shape(self) -> tuple[int, ...]:
        """Per-sample noise shape (without the batch dimension)."""
        if isinstance(self.noise_dim, int):
            return (self.noise_dim,)
        return self.noise_dim
