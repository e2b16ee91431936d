"""Train a GAN on a ring of Gaussians and score it with the Frechet distance."""

import torch

from console import TrainConsole
from gancore import (
    GAN, ExperimentRegistry, GaussianNoise, PrintLoss, ProgressBar, StoreLoss,
    TorchOptimizer, XavierInitialization, frechet_distance, save_checkpoint, set_seeds,
)
from gancore.cli import overrides_from_args

from .config import GaussianMixtureConfig
from .dataset import sample_ring_mixture
from .model import build_discriminator, build_generator


@ExperimentRegistry.register("gaussian_mixture")
class GaussianMixtureExperiment:
    """2-D ring of Gaussian modes; reports Frechet distance of generated samples."""

    config_class = GaussianMixtureConfig

    @staticmethod
    def add_args(parser):
        group = parser.add_argument_group('Gaussian mixture options')
        group.add_argument('--epochs', type=int, default=None, help='Training epochs')
        group.add_argument('--lr', type=float, default=None, help='Adam learning rate')
        group.add_argument('--num-samples', type=int, default=None, dest='num_samples',
                           help='Real samples in the training set')
        group.add_argument('--num-modes', type=int, default=None, dest='num_modes',
                           help='Gaussian modes on the ring')
        group.add_argument('--hidden-dim', type=int, default=None, dest='hidden_dim',
                           help='Hidden width of both MLPs')

    @classmethod
    def build_config(cls, args) -> GaussianMixtureConfig:
        return cls.config_class(**overrides_from_args(args, cls.config_class))

    @staticmethod
    def build_gan(config: GaussianMixtureConfig, generator: torch.Generator | None = None) -> GAN:
        return GAN.from_config(
            build_generator(config.noise_dim, config.hidden_dim),
            build_discriminator(hidden_dim=config.hidden_dim),
            config,
            initialize_rule=XavierInitialization(),
            noise_function=GaussianNoise(generator=generator),
        )

    @classmethod
    def run(cls, config: GaussianMixtureConfig) -> dict:
        console = TrainConsole()
        rng = set_seeds(config.seed)

        data = sample_ring_mixture(config.num_samples, config.num_modes, config.radius,
                                   config.mode_std, generator=rng)
        gan = cls.build_gan(config, generator=rng)
        optimizer = TorchOptimizer(torch.optim.Adam, max_epochs=config.epochs,
                                   lr=config.lr, betas=(config.beta1, 0.999))
        losses = StoreLoss()
        loss = gan.train(data, optimizer, None, None, PrintLoss(), ProgressBar(), losses)

        generated = gan.generate(config.eval_samples)
        reference = sample_ring_mixture(config.eval_samples, config.num_modes, config.radius,
                                        config.mode_std, generator=rng)
        fd = frechet_distance(generated, reference)
        console.print_complete(
            f"Frechet distance: [metric.value]{fd:.4f}[/metric.value]"
        )

        results = {
            'final_loss': loss,
            'epoch_losses': losses.epoch_losses,
            'frechet_distance': fd,
        }
        if config.save_checkpoint:
            path = save_checkpoint(config.output_dir, gan, optimizer.epochs_run,
                                   training_state={'epoch_losses': losses.epoch_losses})
            console.print_notification(f"Checkpoint saved: [path]{path}[/path]")
            results['checkpoint'] = path
        return results
