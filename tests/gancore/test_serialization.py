"""Tests for GAN state persistence: state_dict, save/load, deepcopy."""

import copy

import pytest
import torch
import torch.nn as nn

from gancore import GAN, ConfigurationError

NOISE_DIM = 3


def _bn_pair():
    torch.manual_seed(0)
    generator = nn.Sequential(nn.Linear(NOISE_DIM, 4), nn.BatchNorm1d(4), nn.Linear(4, 2))
    discriminator = nn.Sequential(nn.Linear(2, 4), nn.ReLU(), nn.Linear(4, 1))
    return generator, discriminator


@pytest.fixture
def trained_gan():
    """GAN with BatchNorm running stats moved away from their defaults."""
    generator, discriminator = _bn_pair()
    gan = GAN(generator, discriminator, noise_dim=NOISE_DIM, batch_size=4)
    gan.reset_data(torch.randn(8, 2), 1.0, 0.0)
    gradient = torch.empty(0)
    for i in (0, 4, 0):
        gan.evaluate_with_gradient(gan.parameters, i, gradient, 4)
    return gan


class TestStateDict:

    def test_contents(self, trained_gan):
        state = trained_gan.state_dict()
        assert set(state) == {'parameters', 'generator', 'discriminator', 'reset',
                              'gen_weights', 'disc_weights'}
        assert state['reset'] is True
        assert state['parameters'].numel() == state['gen_weights'] + state['disc_weights']

    def test_only_buffers_per_network(self, trained_gan):
        """Parameters travel in the flat vector; per-network entries are buffers."""
        keys = set(trained_gan.state_dict()['generator'])
        assert keys == {'1.running_mean', '1.running_var', '1.num_batches_tracked'}
        assert trained_gan.state_dict()['discriminator'] == {}

    def test_state_is_detached_copy(self, trained_gan):
        state = trained_gan.state_dict()
        state['parameters'].zero_()
        assert trained_gan.parameters.abs().sum() > 0


class TestLoadStateDict:

    def _fresh(self):
        generator, discriminator = _bn_pair()
        return GAN(generator, discriminator, noise_dim=NOISE_DIM, batch_size=4)

    def test_round_trip_predictions(self, trained_gan):
        """A restored GAN predicts bit-identically."""
        restored = self._fresh()
        restored.load_state_dict(trained_gan.state_dict())
        z = torch.randn(5, NOISE_DIM)
        assert torch.equal(restored.predict(z), trained_gan.predict(z))

    def test_reestablishes_aliasing(self, trained_gan):
        restored = self._fresh()
        restored.load_state_dict(trained_gan.state_dict())
        with torch.no_grad():
            restored.parameters[0] = 42.0
        assert next(restored.generator.network.parameters()).reshape(-1)[0] == 42.0

    def test_restores_buffers_and_mode(self, trained_gan):
        restored = self._fresh()
        restored.load_state_dict(trained_gan.state_dict())
        bn = restored.generator.network[1]
        assert torch.equal(bn.running_mean, trained_gan.generator.network[1].running_mean)
        assert restored.deterministic is True
        assert bn.training is False

    def test_weight_count_mismatch(self, trained_gan):
        other = GAN(nn.Linear(NOISE_DIM, 2), nn.Linear(2, 1), noise_dim=NOISE_DIM, batch_size=4)
        with pytest.raises(ConfigurationError):
            other.load_state_dict(trained_gan.state_dict())

    def test_truncated_vector(self, trained_gan):
        state = trained_gan.state_dict()
        state['parameters'] = state['parameters'][:-1]
        with pytest.raises(ConfigurationError):
            self._fresh().load_state_dict(state)

    def test_unexpected_buffer_keys(self, trained_gan):
        state = trained_gan.state_dict()
        state['discriminator'] = {'bogus': torch.zeros(1)}
        with pytest.raises(ConfigurationError):
            self._fresh().load_state_dict(state)

    def test_save_and_load_file(self, trained_gan, tmp_path):
        path = tmp_path / "gan.pt"
        trained_gan.save(path)
        restored = self._fresh()
        restored.load(path)
        assert torch.equal(restored.parameters, trained_gan.parameters)


class TestDeepCopy:

    def test_copy_is_independent(self, trained_gan):
        clone = copy.deepcopy(trained_gan)
        with torch.no_grad():
            clone.parameters.zero_()
        assert trained_gan.parameters.abs().sum() > 0

    def test_copy_keeps_aliasing(self, trained_gan):
        """Module parameters of the copy view the copy's flat vector."""
        clone = copy.deepcopy(trained_gan)
        with torch.no_grad():
            clone.parameters.fill_(0.25)
        for p in clone.discriminator.network.parameters():
            assert torch.all(p == 0.25)

    def test_copy_keeps_training_state(self, trained_gan):
        clone = copy.deepcopy(trained_gan)
        assert clone.current_batch == trained_gan.current_batch == 3
        assert torch.equal(clone.staging.predictors, trained_gan.staging.predictors)
        gradient = torch.empty(0)
        clone.evaluate_with_gradient(clone.parameters, 0, gradient, 4)
        assert gradient.numel() == clone.parameters.numel()

    def test_copy_predicts_identically(self, trained_gan):
        clone = copy.deepcopy(trained_gan)
        z = torch.randn(3, NOISE_DIM)
        assert torch.equal(clone.predict(z), trained_gan.predict(z))
