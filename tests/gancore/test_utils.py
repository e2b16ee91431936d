"""Tests for gancore/utils.py: seeding and environment metadata."""

import random

import numpy as np
import torch

from gancore.utils import check_environment_compatibility, get_environment_info, set_seeds


class TestSetSeeds:

    def test_reproducible_across_backends(self):
        set_seeds(123)
        first = (torch.rand(2), random.random(), np.random.rand())
        set_seeds(123)
        second = (torch.rand(2), random.random(), np.random.rand())
        assert torch.equal(first[0], second[0])
        assert first[1:] == second[1:]

    def test_returns_seeded_generator(self):
        a = torch.rand(3, generator=set_seeds(5))
        b = torch.rand(3, generator=set_seeds(5))
        assert torch.equal(a, b)


class TestEnvironment:

    def test_info_keys(self):
        info = get_environment_info()
        assert info['torch_version'] == torch.__version__
        assert 'python_version' in info
        assert 'default_dtype' in info

    def test_compatible_with_itself(self):
        info = get_environment_info()
        assert check_environment_compatibility(info, info) == []

    def test_version_difference_reported(self):
        current = get_environment_info()
        saved = dict(current, torch_version='0.0.1')
        warnings = check_environment_compatibility(saved, current)
        assert len(warnings) == 1
        assert 'PyTorch version' in warnings[0]

    def test_missing_keys_ignored(self):
        assert check_environment_compatibility({}, get_environment_info()) == []
