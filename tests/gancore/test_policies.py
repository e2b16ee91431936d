"""Tests for gancore/policies.py: parsing, criteria and the rules table."""

import pytest
import torch
import torch.nn.functional as F

from gancore import (
    ConfigurationError, GANPolicy, Regularization, cross_entropy_criterion,
    earth_mover_criterion, get_policy_rules,
)


class TestParse:

    @pytest.mark.parametrize("value,expected", [
        ("standard", GANPolicy.STANDARD_GAN),
        ("DCGAN", GANPolicy.DCGAN),
        ("wgan", GANPolicy.WGAN),
        ("wgan-gp", GANPolicy.WGAN_GP),
        (GANPolicy.WGAN_GP, GANPolicy.WGAN_GP),
    ])
    def test_accepts_names_and_members(self, value, expected):
        assert GANPolicy.parse(value) is expected

    def test_unknown_lists_available(self):
        with pytest.raises(ConfigurationError, match="Available"):
            GANPolicy.parse("lsgan")


class TestRules:

    @pytest.mark.parametrize("policy", [GANPolicy.STANDARD_GAN, GANPolicy.DCGAN])
    def test_cross_entropy_family(self, policy):
        rules = get_policy_rules(policy)
        assert rules.criterion is cross_entropy_criterion
        assert (rules.default_real_label, rules.default_fake_label) == (1.0, 0.0)
        assert rules.regularization is Regularization.NONE

    def test_wgan(self):
        rules = get_policy_rules("wgan")
        assert rules.criterion is earth_mover_criterion
        assert rules.default_fake_label == -1.0
        assert rules.regularization is Regularization.CLIP

    def test_wgan_gp(self):
        assert get_policy_rules(GANPolicy.WGAN_GP).regularization is Regularization.PENALTY


class TestCriteria:

    def test_cross_entropy_matches_torch(self):
        out = torch.tensor([[0.3], [-1.2]])
        target = torch.tensor([[1.0], [0.0]])
        expected = F.binary_cross_entropy_with_logits(out, target)
        assert torch.allclose(cross_entropy_criterion(out, target), expected)

    def test_cross_entropy_reshapes_target(self):
        out = torch.zeros(3, 1)
        loss = cross_entropy_criterion(out, torch.ones(3))
        assert loss.item() == pytest.approx(0.6931, abs=1e-4)

    def test_earth_mover_sign(self):
        """Real-labelled scores lower the loss; fake-labelled scores raise it."""
        out = torch.tensor([[2.0], [4.0]])
        assert earth_mover_criterion(out, torch.ones(2, 1)).item() == pytest.approx(-3.0)
        assert earth_mover_criterion(out, -torch.ones(2, 1)).item() == pytest.approx(3.0)
