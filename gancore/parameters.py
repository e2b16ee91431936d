"""Flat parameter storage shared by the generator and discriminator.

Both networks keep their weights inside one 1-D tensor owned by the GAN.
A ParameterSpan names a contiguous region of that tensor; alias_parameters
rebinds a module's parameters onto shaped views of the region, so a write
through either side is visible to the other and to the optimizer that
updates the flat tensor.
"""

from __future__ import annotations

import torch
import torch.nn as nn


class ParameterSpan:
    """Non-owning ``[offset, offset + length)`` window onto a 1-D tensor.

    The span never copies: ``view()`` is a narrow of the backing tensor.
    Bounds are checked once at construction.
    """

    def __init__(self, backing: torch.Tensor, offset: int, length: int):
        if backing.dim() != 1:
            raise ValueError(
                f"ParameterSpan needs a 1-D backing tensor, got shape {tuple(backing.shape)}"
            )
        if offset < 0 or length < 0 or offset + length > backing.numel():
            raise ValueError(
                f"span [{offset}, {offset + length}) outside backing tensor "
                f"of length {backing.numel()}"
            )
        self.backing = backing
        self.offset = offset
        self.length = length

    def view(self) -> torch.Tensor:
        """Aliased view of the region."""
        return self.backing.narrow(0, self.offset, self.length)

    def read(self) -> torch.Tensor:
        """Detached copy of the region."""
        return self.view().clone()

    def write(self, values: torch.Tensor) -> None:
        """Copy ``values`` (any shape with ``length`` elements) into the region."""
        self.view().copy_(values.reshape(-1))

    def __len__(self) -> int:
        return self.length

    def __repr__(self) -> str:
        return f"ParameterSpan(offset={self.offset}, length={self.length})"


def layer_weight_counts(network: nn.Module) -> list[int]:
    """Learnable element count owned directly by each module, in modules() order.

    A parameter shared between modules counts only toward the first module
    that owns it, matching the deduplicated ``network.parameters()``.
    """
    seen = set()
    counts = []
    for module in network.modules():
        count = 0
        for p in module.parameters(recurse=False):
            if id(p) not in seen:
                seen.add(id(p))
                count += p.numel()
        counts.append(count)
    return counts


def weight_count(network: nn.Module) -> int:
    return sum(layer_weight_counts(network))


def alias_parameters(network: nn.Module, span: ParameterSpan) -> None:
    """Rebind every parameter of ``network`` onto consecutive views of ``span``.

    Parameter order follows ``network.parameters()``. The current parameter
    values are discarded; the span's contents become the weights.
    """
    expected = weight_count(network)
    if expected != span.length:
        raise ValueError(
            f"span length {span.length} does not match network weight count {expected}"
        )
    flat = span.view()
    offset = 0
    with torch.no_grad():
        for param in network.parameters():
            n = param.numel()
            param.data = flat.narrow(0, offset, n).view_as(param)
            offset += n


def flatten_into(tensors, out: torch.Tensor, params) -> None:
    """Write a sequence of per-parameter tensors into the flat ``out`` view.

    ``None`` entries (parameters that did not take part in the graph) are
    written as zeros.
    """
    offset = 0
    for grad, param in zip(tensors, params):
        n = param.numel()
        region = out.narrow(0, offset, n)
        if grad is None:
            region.zero_()
        else:
            region.copy_(grad.reshape(-1))
        offset += n
