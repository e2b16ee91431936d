"""Configuration for the 2-D Gaussian mixture experiment."""

from dataclasses import dataclass

from gancore import GANConfig


@dataclass
class GaussianMixtureConfig(GANConfig):
    """Ring of Gaussian modes; small MLP generator and discriminator."""
    experiment_name: str = 'gaussian_mixture'
    noise_dim: int = 4
    batch_size: int = 64
    num_samples: int = 2048
    num_modes: int = 8
    radius: float = 2.0
    mode_std: float = 0.05
    hidden_dim: int = 64
    lr: float = 1e-3
    beta1: float = 0.5
    epochs: int = 20
    eval_samples: int = 1024
    output_dir: str = 'output'
    save_checkpoint: bool = False

    def __post_init__(self):
        super().__post_init__()
        if self.num_samples % self.batch_size != 0:
            raise ValueError(
                f"num_samples ({self.num_samples}) must be a multiple of "
                f"batch_size ({self.batch_size})"
            )
        if self.num_modes <= 0:
            raise ValueError(f"num_modes must be > 0, got {self.num_modes}")
        if self.mode_std <= 0:
            raise ValueError(f"mode_std must be > 0, got {self.mode_std}")
        if self.hidden_dim <= 0:
            raise ValueError(f"hidden_dim must be > 0, got {self.hidden_dim}")
        if self.lr <= 0:
            raise ValueError(f"lr must be > 0, got {self.lr}")
        if self.epochs <= 0:
            raise ValueError(f"epochs must be > 0, got {self.epochs}")
        if self.eval_samples < 2:
            raise ValueError(f"eval_samples must be >= 2, got {self.eval_samples}")
