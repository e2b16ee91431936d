"""Generative adversarial network training orchestrator.

GAN owns one flat parameter vector holding the generator's weights
followed by the discriminator's, and exposes it to an external optimizer
as a single separable objective:

    loss = gan.evaluate_with_gradient(parameters, i, gradient, batch_size)

Each call trains the discriminator on real rows ``[i, i + batch_size)``
and on a fresh batch of generated samples, and, when the update schedule
allows, fills the generator's share of ``gradient`` with the signal that
pushes it toward fooling the discriminator. The generator update is gated
by ``generator_update_step`` and suppressed entirely for the first
``pre_train_size`` calls.

Real and generated samples live in one StagingBuffer; the discriminator
reads both through views, and the fake region is rewritten in place each
step.
"""

from __future__ import annotations

import copy
from typing import Callable

import torch
import torch.autograd as autograd
import torch.nn as nn

from .adapter import NetworkAdapter
from .config import GANConfig
from .errors import ConfigurationError
from .init_rules import GaussianInitialization, InitializationRule
from .noise import GaussianNoise, fill_noise
from .parameters import ParameterSpan, flatten_into
from .policies import GANPolicy, Regularization, get_policy_rules
from .staging import StagingBuffer
from . import display


class GAN:
    """Generator/discriminator pair trained through one shared parameter vector.

    Args:
        generator: Module mapping ``(batch, *noise_shape)`` noise to samples.
        discriminator: Module mapping samples to one score per sample.
        initialize_rule: Fills each network's share of the parameter vector.
        noise_function: Zero-arg callable returning one noise value.
        noise_dim: Per-sample noise size (int) or shape (tuple).
        batch_size: Samples per discriminator step (real and fake alike).
        generator_update_step: Update the generator every N calls.
        pre_train_size: Number of initial calls with the generator frozen.
        multiplier: Scale applied to the generator gradient.
        clipping_parameter: WGAN weight clipping bound.
        lambda_: WGAN-GP penalty coefficient.
        policy: Adversarial objective family.
    """

    def __init__(self, generator: nn.Module, discriminator: nn.Module,
                 initialize_rule: InitializationRule | None = None,
                 noise_function: Callable[[], float] | None = None,
                 noise_dim: int | tuple[int, ...] = 100,
                 batch_size: int = 32,
                 generator_update_step: int = 1,
                 pre_train_size: int = 0,
                 multiplier: float = 1.0,
                 clipping_parameter: float = 0.01,
                 lambda_: float = 10.0,
                 policy: GANPolicy | str = GANPolicy.STANDARD_GAN):
        self.config = GANConfig(
            policy=policy, noise_dim=noise_dim, batch_size=batch_size,
            generator_update_step=generator_update_step,
            pre_train_size=pre_train_size, multiplier=multiplier,
            clipping_parameter=clipping_parameter, lambda_=lambda_,
        )
        self.policy = self.config.policy
        self.rules = get_policy_rules(self.policy)

        self.generator = NetworkAdapter(generator, "generator")
        self.discriminator = NetworkAdapter(discriminator, "discriminator")
        self.initialize_rule = initialize_rule or GaussianInitialization(0.0, 0.02)
        self.noise_function = noise_function or GaussianNoise()

        self.noise_shape = self.config.noise_shape
        self.batch_size = self.config.batch_size
        self.generator_update_step = self.config.generator_update_step
        self.pre_train_size = self.config.pre_train_size
        self.multiplier = self.config.multiplier
        self.clipping_parameter = self.config.clipping_parameter
        self.lambda_ = self.config.lambda_

        self.parameters = torch.empty(0)
        self.gen_weights = 0
        self.disc_weights = 0
        self.reset_done = False
        self.deterministic = False
        self.current_batch = 0
        self.num_functions = 0
        self.real_label = self.rules.default_real_label
        self.fake_label = self.rules.default_fake_label

        self.staging: StagingBuffer | None = None
        self.noise: torch.Tensor | None = None
        self._scratch: torch.Tensor | None = None

    @classmethod
    def from_config(cls, generator: nn.Module, discriminator: nn.Module,
                    config: GANConfig, initialize_rule: InitializationRule | None = None,
                    noise_function: Callable[[], float] | None = None) -> GAN:
        return cls(
            generator, discriminator,
            initialize_rule=initialize_rule,
            noise_function=noise_function,
            noise_dim=config.noise_dim,
            batch_size=config.batch_size,
            generator_update_step=config.generator_update_step,
            pre_train_size=config.pre_train_size,
            multiplier=config.multiplier,
            clipping_parameter=config.clipping_parameter,
            lambda_=config.lambda_,
            policy=config.policy,
        )

    # --- Parameter allocation ---

    def reset(self) -> None:
        """Allocate the shared parameter vector, alias both networks and initialize."""
        gen_weights = self.generator.weight_count()
        disc_weights = self.discriminator.weight_count()
        if gen_weights == 0:
            raise ConfigurationError("generator has no learnable weights")
        if disc_weights == 0:
            raise ConfigurationError("discriminator has no learnable weights")

        reference = next(self.generator.network.parameters())
        self.parameters = torch.zeros(gen_weights + disc_weights,
                                      dtype=reference.dtype, device=reference.device)
        self._bind(gen_weights, disc_weights)

        self.initialize_rule.initialize(self.generator.network, self.parameters, 0)
        self.initialize_rule.initialize(self.discriminator.network, self.parameters, gen_weights)

        self.reset_done = True
        display.display_reset(gen_weights, disc_weights)

    def _bind(self, gen_weights: int, disc_weights: int) -> None:
        self.gen_weights = gen_weights
        self.disc_weights = disc_weights
        self.generator.bind(ParameterSpan(self.parameters, 0, gen_weights))
        self.discriminator.bind(ParameterSpan(self.parameters, gen_weights, disc_weights))
        self._scratch = torch.zeros(disc_weights, dtype=self.parameters.dtype,
                                    device=self.parameters.device)

    def _ensure_reset(self) -> None:
        if self.parameters.numel() == 0:
            self.reset()

    # --- Data staging ---

    def reset_data(self, train_data: torch.Tensor, real_label: float,
                   fake_label: float) -> None:
        """Stage ``train_data`` (samples along dim 0) for training."""
        self.current_batch = 0
        self.real_label = float(real_label)
        self.fake_label = float(fake_label)

        if not self.reset_done:
            self.reset()

        train_data = train_data.to(device=self.parameters.device,
                                   dtype=self.parameters.dtype)
        self.staging = StagingBuffer.from_train_data(
            train_data, self.batch_size, self.real_label, self.fake_label,
        )
        self.num_functions = self.staging.num_real
        self.noise = torch.empty((self.batch_size, *self.noise_shape),
                                 dtype=self.parameters.dtype, device=self.parameters.device)

        self.deterministic = True
        self.reset_deterministic()

        # The discriminator sees real and fake rows through one view.
        self.discriminator.predictors = self.staging.predictors[:]
        self.discriminator.responses = self.staging.responses[:]
        self.generator.predictors = self.noise
        self.generator.responses = torch.empty((self.batch_size, *self.staging.sample_shape),
                                               dtype=self.parameters.dtype,
                                               device=self.parameters.device)

    def _require_data(self) -> StagingBuffer:
        if self.staging is None:
            raise ConfigurationError(
                "no training data staged; call reset_data() or train() first"
            )
        return self.staging

    def shuffle(self) -> None:
        """Permute the real samples; called by the optimizer at epoch boundaries."""
        self._require_data().shuffle()

    # --- Mode ---

    def reset_deterministic(self) -> None:
        self.generator.set_deterministic(self.deterministic)
        self.discriminator.set_deterministic(self.deterministic)

    def _sync_mode(self, deterministic: bool) -> None:
        if self.deterministic != deterministic:
            self.deterministic = deterministic
            self.reset_deterministic()

    # --- Objective ---

    def _generate_fake(self, track_grad: bool) -> torch.Tensor:
        fill_noise(self.noise, self.noise_function)
        output = self.generator.forward(self.noise, track_grad=track_grad)
        with torch.no_grad():
            self.generator.responses.copy_(output.reshape(self.generator.responses.shape))
        self.staging.write_fake(output.detach())
        return output

    def _check_batch_size(self, batch_size: int | None) -> None:
        if batch_size is not None and batch_size != self.batch_size:
            raise ConfigurationError(
                f"batch_size {batch_size} does not match the configured "
                f"batch_size {self.batch_size}"
            )

    def _generator_update_due(self) -> bool:
        return self.current_batch % self.generator_update_step == 0 and self.pre_train_size == 0

    def evaluate(self, parameters: torch.Tensor | None = None, i: int = 0,
                 batch_size: int | None = None) -> float:
        """Discriminator loss on real batch ``i`` plus a fresh fake batch.

        ``parameters`` and ``batch_size`` are accepted for the optimizer
        interface; the networks always read the shared vector. A
        ``batch_size`` other than the configured one raises
        ConfigurationError.
        """
        self._check_batch_size(batch_size)
        self._ensure_reset()
        staging = self._require_data()
        self._sync_mode(True)
        criterion = self.rules.criterion

        res = self.discriminator.evaluate(staging.real(i), staging.real_responses(i), criterion)

        self._generate_fake(track_grad=False)
        staging.label_fake(self.fake_label)
        res += self.discriminator.evaluate(staging.fake(), staging.fake_responses(), criterion)

        if self.rules.regularization is Regularization.PENALTY:
            res += self._gradient_penalty(i, None)
        return res

    def evaluate_with_gradient(self, parameters: torch.Tensor | None, i: int,
                               gradient: torch.Tensor, batch_size: int | None = None) -> float:
        """Loss at batch ``i``; fills ``gradient`` (resized to the parameter count).

        Layout of ``gradient`` mirrors the parameter vector: the generator
        share first, then the discriminator share. The generator share is
        left at zero when the update schedule skips this call.
        """
        self._check_batch_size(batch_size)
        self._ensure_reset()
        staging = self._require_data()

        total = self.parameters.numel()
        if gradient.numel() != total:
            gradient.resize_(total)
        gradient.zero_()

        self._sync_mode(False)

        if self.rules.regularization is Regularization.CLIP:
            self._clip_discriminator()

        gradient_generator = ParameterSpan(gradient, 0, self.gen_weights).view()
        gradient_discriminator = ParameterSpan(gradient, self.gen_weights, self.disc_weights).view()
        criterion = self.rules.criterion

        res = self.discriminator.gradient(
            staging.real(i), staging.real_responses(i), criterion, gradient_discriminator,
        )

        update_generator = self._generator_update_due()
        self._generate_fake(track_grad=update_generator)
        staging.label_fake(self.fake_label)

        self._scratch.zero_()
        res += self.discriminator.gradient(
            staging.fake(), staging.fake_responses(), criterion, self._scratch,
        )
        gradient_discriminator += self._scratch

        if self.rules.regularization is Regularization.PENALTY:
            res += self._gradient_penalty(i, gradient_discriminator)

        if update_generator:
            # Relabel the fakes as real so the discriminator's input gradient
            # points the generator toward samples it would accept.
            staging.label_fake(self.real_label)
            error = self.discriminator.input_gradient(
                staging.fake(), staging.fake_responses(), criterion,
            )
            self.generator.backward(error, gradient_generator)
            gradient_generator *= self.multiplier

        self.current_batch += 1
        if self.pre_train_size > 0:
            self.pre_train_size -= 1

        return res

    def gradient(self, parameters: torch.Tensor | None, i: int, gradient: torch.Tensor,
                 batch_size: int | None = None) -> None:
        self.evaluate_with_gradient(parameters, i, gradient, batch_size)

    # --- Policy regularization ---

    def _clip_discriminator(self) -> None:
        with torch.no_grad():
            self.discriminator.parameters.view().clamp_(
                -self.clipping_parameter, self.clipping_parameter,
            )

    def _gradient_penalty(self, i: int, out: torch.Tensor | None) -> float:
        """lambda * E[(||grad_x D(x_hat)||_2 - 1)^2] on real/fake interpolates.

        When ``out`` is given, the penalty's parameter gradient is added to it.
        """
        staging = self._require_data()
        real = staging.real(i)
        fake = staging.fake()
        b = real.size(0)
        alpha = torch.rand((b,) + (1,) * (real.dim() - 1),
                           dtype=real.dtype, device=real.device)
        x_hat = (alpha * real + (1 - alpha) * fake).detach().requires_grad_(True)
        network = self.discriminator.network

        with torch.enable_grad():
            d_hat = network(x_hat)
            (grad_x,) = autograd.grad(d_hat.sum(), x_hat, create_graph=out is not None)
            penalty = self.lambda_ * ((grad_x.reshape(b, -1).norm(2, dim=1) - 1) ** 2).mean()
            if out is not None:
                params = list(network.parameters())
                grads = autograd.grad(penalty, params, allow_unused=True)
                self._scratch.zero_()
                flatten_into(grads, self._scratch, params)
                out += self._scratch
        return float(penalty.detach())

    # --- Training entry point ---

    def train(self, train_data: torch.Tensor, optimizer, real_label: float | None = None,
              fake_label: float | None = None, *callbacks) -> float:
        """Stage ``train_data`` and hand the objective to ``optimizer``.

        ``optimizer.optimize(self, self.parameters, *callbacks)`` drives the
        loop. Labels default to the policy's (1/0, or 1/-1 for Wasserstein
        policies). Returns the optimizer's final objective value.
        """
        if real_label is None:
            real_label = self.rules.default_real_label
        if fake_label is None:
            fake_label = self.rules.default_fake_label
        self.reset_data(train_data, real_label, fake_label)

        loss = optimizer.optimize(self, self.parameters, *callbacks)

        if self.rules.regularization is Regularization.CLIP:
            self._clip_discriminator()
        return loss

    # --- Inference ---

    def forward(self, inputs: torch.Tensor) -> None:
        """Noise -> generator -> discriminator; result kept in ``discriminator.output``."""
        self._ensure_reset()
        generated = self.generator.forward(inputs)
        self.discriminator.forward(generated)

    def predict(self, inputs: torch.Tensor) -> torch.Tensor:
        """Discriminator scores for generator samples drawn from ``inputs`` noise."""
        self._ensure_reset()
        self._sync_mode(True)
        self.forward(inputs)
        return self.discriminator.output.detach().clone()

    def generate(self, num_samples: int) -> torch.Tensor:
        """Draw ``num_samples`` generator samples in inference mode."""
        self._ensure_reset()
        self._sync_mode(True)
        noise = torch.empty((num_samples, *self.noise_shape),
                            dtype=self.parameters.dtype, device=self.parameters.device)
        fill_noise(noise, self.noise_function)
        return self.generator.forward(noise).detach().clone()

    # --- State persistence ---

    @staticmethod
    def _buffer_state(network: nn.Module) -> dict:
        param_names = {name for name, _ in network.named_parameters()}
        return {k: v.detach().clone() for k, v in network.state_dict().items()
                if k not in param_names}

    def state_dict(self) -> dict:
        return {
            'parameters': self.parameters.detach().clone(),
            'generator': self._buffer_state(self.generator.network),
            'discriminator': self._buffer_state(self.discriminator.network),
            'reset': self.reset_done,
            'gen_weights': self.gen_weights,
            'disc_weights': self.disc_weights,
        }

    def load_state_dict(self, state: dict) -> None:
        """Restore from state_dict(): re-alias both networks, then their buffers."""
        gen_weights = int(state['gen_weights'])
        disc_weights = int(state['disc_weights'])
        if gen_weights != self.generator.weight_count():
            raise ConfigurationError(
                f"saved generator has {gen_weights} weights, "
                f"network has {self.generator.weight_count()}"
            )
        if disc_weights != self.discriminator.weight_count():
            raise ConfigurationError(
                f"saved discriminator has {disc_weights} weights, "
                f"network has {self.discriminator.weight_count()}"
            )
        saved = state['parameters']
        if saved.numel() != gen_weights + disc_weights:
            raise ConfigurationError(
                f"saved parameter vector has {saved.numel()} elements, "
                f"expected {gen_weights + disc_weights}"
            )

        reference = next(self.generator.network.parameters())
        self.parameters = saved.detach().to(dtype=reference.dtype,
                                            device=reference.device).clone()
        self._bind(gen_weights, disc_weights)

        for adapter in (self.generator, self.discriminator):
            result = adapter.network.load_state_dict(state[adapter.name], strict=False)
            if result.unexpected_keys:
                raise ConfigurationError(
                    f"unexpected {adapter.name} state keys: {result.unexpected_keys}"
                )

        self.reset_done = bool(state['reset'])
        self.deterministic = True
        self.reset_deterministic()

    def save(self, path) -> None:
        torch.save(self.state_dict(), path)

    def load(self, path) -> None:
        self.load_state_dict(torch.load(path, map_location='cpu', weights_only=True))

    def __deepcopy__(self, memo):
        cls = type(self)
        clone = cls.__new__(cls)
        memo[id(self)] = clone
        # Strategies are shared, not copied.
        memo[id(self.noise_function)] = self.noise_function
        memo[id(self.initialize_rule)] = self.initialize_rule
        for key, value in self.__dict__.items():
            setattr(clone, key, copy.deepcopy(value, memo))
        # nn.Parameter deep copies clone their data; re-alias onto the copied vector.
        if clone.parameters.numel() > 0:
            clone._bind(clone.gen_weights, clone.disc_weights)
        return clone

    def __repr__(self) -> str:
        return (f"GAN(policy={self.policy.value!r}, gen_weights={self.gen_weights}, "
                f"disc_weights={self.disc_weights}, batch_size={self.batch_size})")
