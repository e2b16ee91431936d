"""Tests for gancore/parameters.py: spans, weight counts, aliasing."""

import pytest
import torch
import torch.nn as nn

from gancore.parameters import (
    ParameterSpan, alias_parameters, flatten_into, layer_weight_counts, weight_count,
)


class TestParameterSpan:

    def test_view_aliases_backing(self):
        """Writes through the view land in the backing tensor."""
        backing = torch.zeros(10)
        span = ParameterSpan(backing, 3, 4)
        span.view().fill_(1.0)
        assert backing.tolist() == [0, 0, 0, 1, 1, 1, 1, 0, 0, 0]

    def test_read_is_a_copy(self):
        backing = torch.arange(6, dtype=torch.float32)
        copy = ParameterSpan(backing, 1, 2).read()
        copy.fill_(-1.0)
        assert backing[1] == 1.0

    def test_write_accepts_any_shape(self):
        backing = torch.zeros(6)
        ParameterSpan(backing, 2, 4).write(torch.ones(2, 2))
        assert backing.tolist() == [0, 0, 1, 1, 1, 1]

    def test_len(self):
        assert len(ParameterSpan(torch.zeros(5), 1, 3)) == 3

    @pytest.mark.parametrize("offset,length", [(-1, 2), (4, 3), (0, 6)])
    def test_out_of_bounds(self, offset, length):
        with pytest.raises(ValueError):
            ParameterSpan(torch.zeros(5), offset, length)

    def test_requires_1d_backing(self):
        with pytest.raises(ValueError):
            ParameterSpan(torch.zeros(2, 2), 0, 1)


class TestWeightCounts:

    def test_per_module_counts(self):
        """Containers own nothing; each Linear owns weight + bias."""
        net = nn.Sequential(nn.Linear(3, 4), nn.ReLU(), nn.Linear(4, 2))
        assert layer_weight_counts(net) == [0, 16, 0, 10]
        assert weight_count(net) == 26

    def test_parameterless_network(self):
        assert weight_count(nn.Identity()) == 0

    def test_tied_parameter_counted_once(self):
        """A weight shared by two layers takes one slot, like parameters()."""
        first, second = nn.Linear(2, 2), nn.Linear(2, 2)
        second.weight = first.weight
        net = nn.Sequential(first, nn.Tanh(), second)
        assert layer_weight_counts(net) == [0, 6, 0, 2]
        assert weight_count(net) == sum(p.numel() for p in net.parameters()) == 8

        backing = torch.zeros(8)
        alias_parameters(net, ParameterSpan(backing, 0, 8))
        backing[:4] = 5.0
        assert torch.all(second.weight == 5.0)


class TestAliasParameters:

    def test_span_becomes_weights(self):
        """After aliasing, module parameters read the span's values."""
        net = nn.Linear(2, 2)
        backing = torch.arange(6, dtype=torch.float32)
        alias_parameters(net, ParameterSpan(backing, 0, 6))
        assert net.weight.tolist() == [[0, 1], [2, 3]]
        assert net.bias.tolist() == [4, 5]

    def test_module_writes_visible_in_span(self):
        net = nn.Linear(2, 1)
        backing = torch.zeros(5)
        alias_parameters(net, ParameterSpan(backing, 2, 3))
        with torch.no_grad():
            net.bias.fill_(9.0)
        assert backing.tolist() == [0, 0, 0, 0, 9]

    def test_parameters_still_trainable(self):
        """Aliased parameters keep requires_grad and take part in autograd."""
        net = nn.Linear(2, 1)
        backing = torch.ones(3)
        alias_parameters(net, ParameterSpan(backing, 0, 3))
        net(torch.ones(1, 2)).sum().backward()
        assert net.weight.grad is not None

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            alias_parameters(nn.Linear(2, 2), ParameterSpan(torch.zeros(10), 0, 5))


class TestFlattenInto:

    def test_none_written_as_zero(self):
        params = [torch.zeros(2), torch.zeros(1, 2)]
        out = torch.full((4,), 5.0)
        flatten_into([torch.ones(2), None], out, params)
        assert out.tolist() == [1, 1, 0, 0]
