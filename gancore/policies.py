"""Adversarial objective families and their dispatch table.

The alternation and buffer staging are identical across policies and live
in GAN. A policy only decides:
- the criterion applied to discriminator outputs,
- the default real/fake label values,
- which regularization step follows the discriminator gradient.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable

import torch
import torch.nn.functional as F

from .errors import ConfigurationError


class GANPolicy(Enum):
    """Adversarial objective family."""
    STANDARD_GAN = "standard"
    DCGAN = "dcgan"
    WGAN = "wgan"
    WGAN_GP = "wgan_gp"

    @classmethod
    def parse(cls, value: GANPolicy | str) -> GANPolicy:
        """Accept an enum member or its string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower().replace('-', '_'))
        except ValueError:
            available = ', '.join(p.value for p in cls)
            raise ConfigurationError(
                f"Unknown GAN policy: '{value}'. Available: {available}"
            ) from None


class Regularization(Enum):
    """Extra step run after the discriminator gradient is computed."""
    NONE = auto()
    CLIP = auto()       # clamp discriminator weights (WGAN)
    PENALTY = auto()    # gradient penalty on interpolates (WGAN-GP)


def cross_entropy_criterion(output: torch.Tensor, target: torch.Tensor) -> torch.Tensor:
    """Sigmoid cross-entropy on discriminator logits."""
    return F.binary_cross_entropy_with_logits(
        output, target.reshape(output.shape).to(output.dtype)
    )


def earth_mover_criterion(output: torch.Tensor, target: torch.Tensor) -> torch.Tensor:
    """Wasserstein critic objective: -E[label * D(x)]."""
    return -(target.reshape(output.shape).to(output.dtype) * output).mean()


@dataclass(frozen=True)
class PolicyRules:
    """What varies between policies."""
    criterion: Callable[[torch.Tensor, torch.Tensor], torch.Tensor]
    default_real_label: float
    default_fake_label: float
    regularization: Regularization = Regularization.NONE


_POLICY_TABLE: dict[GANPolicy, PolicyRules] = {
    GANPolicy.STANDARD_GAN: PolicyRules(cross_entropy_criterion, 1.0, 0.0),
    GANPolicy.DCGAN: PolicyRules(cross_entropy_criterion, 1.0, 0.0),
    GANPolicy.WGAN: PolicyRules(earth_mover_criterion, 1.0, -1.0, Regularization.CLIP),
    GANPolicy.WGAN_GP: PolicyRules(earth_mover_criterion, 1.0, -1.0, Regularization.PENALTY),
}


def get_policy_rules(policy: GANPolicy | str) -> PolicyRules:
    """Look up the rules for a policy (enum member or string name)."""
    return _POLICY_TABLE[GANPolicy.parse(policy)]
