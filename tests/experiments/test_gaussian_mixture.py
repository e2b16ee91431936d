"""Tests for experiments/gaussian_mixture and run_experiment.py."""

import math
import os

import pytest
import torch

from console import ConsoleConfig, ConsoleMode, TrainConsole
from experiments.gaussian_mixture import GaussianMixtureConfig, GaussianMixtureExperiment
from experiments.gaussian_mixture.dataset import mode_centers, sample_ring_mixture
from experiments.gaussian_mixture.model import build_discriminator, build_generator


@pytest.fixture(autouse=True)
def _restore_null_console():
    yield
    TrainConsole(ConsoleConfig(mode=ConsoleMode.NULL))


class TestDataset:

    def test_centers_on_ring(self):
        centers = mode_centers(4, 2.0)
        assert torch.allclose(centers.norm(dim=1), torch.full((4,), 2.0))

    def test_samples_near_modes(self):
        samples = sample_ring_mixture(256, 8, 2.0, 0.01, generator=torch.Generator().manual_seed(0))
        assert samples.shape == (256, 2)
        assert torch.allclose(samples.norm(dim=1), torch.full((256,), 2.0), atol=0.1)


class TestModels:

    def test_shapes(self):
        g = build_generator(4, 16)
        d = build_discriminator(hidden_dim=16)
        assert d(g(torch.randn(5, 4))).shape == (5, 1)


class TestConfig:

    def test_defaults_valid(self):
        config = GaussianMixtureConfig()
        assert config.noise_shape == (4,)

    def test_num_samples_multiple_of_batch(self):
        with pytest.raises(ValueError):
            GaussianMixtureConfig(num_samples=100, batch_size=64)

    def test_inherits_gan_validation(self):
        with pytest.raises(ValueError):
            GaussianMixtureConfig(policy="wgan", clipping_parameter=-1.0)


class TestRun:

    def _config(self, tmp_path, **kwargs):
        return GaussianMixtureConfig(num_samples=128, batch_size=32, epochs=2, hidden_dim=8,
                                     eval_samples=64, output_dir=str(tmp_path), **kwargs)

    def test_run_reports_metrics(self, tmp_path):
        results = GaussianMixtureExperiment.run(self._config(tmp_path))
        assert math.isfinite(results['final_loss'])
        assert len(results['epoch_losses']) == 2
        assert results['frechet_distance'] >= -1e-6

    def test_run_saves_checkpoint(self, tmp_path):
        results = GaussianMixtureExperiment.run(self._config(tmp_path, save_checkpoint=True))
        assert os.path.exists(results['checkpoint'])

    def test_seeded_runs_repeat(self, tmp_path):
        a = GaussianMixtureExperiment.run(self._config(tmp_path, policy='wgan_gp'))
        b = GaussianMixtureExperiment.run(self._config(tmp_path, policy='wgan_gp'))
        assert a['epoch_losses'] == b['epoch_losses']


class TestEntryPoint:

    def test_main_runs_experiment(self, tmp_path):
        from run_experiment import main
        results = main(['gaussian_mixture', '--epochs', '1', '--batch-size', '32',
                        '--num-samples', '64', '--hidden-dim', '8', '--policy', 'dcgan',
                        '--output-dir', str(tmp_path), '--no-console-output'])
        assert len(results['epoch_losses']) == 1

    def test_unknown_experiment(self):
        from run_experiment import main
        with pytest.raises(SystemExit) as exc:
            main(['nope'])
        assert exc.value.code == 1

    def test_invalid_config_exits(self, tmp_path):
        from run_experiment import main
        with pytest.raises(SystemExit) as exc:
            main(['gaussian_mixture', '--num-samples', '100', '--no-console-output'])
        assert exc.value.code == 1

    def test_log_file(self, tmp_path):
        from run_experiment import main
        log = tmp_path / "run.log"
        main(['gaussian_mixture', '--epochs', '1', '--batch-size', '32', '--num-samples', '64',
              '--hidden-dim', '8', '--log-file', str(log)])
        assert "Frechet distance" in log.read_text(encoding="utf-8")
