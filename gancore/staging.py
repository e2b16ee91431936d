"""Shared predictor/response storage for discriminator training.

Rows ``[0, N)`` of the predictor buffer hold the real training samples;
rows ``[N, N + batch_size)`` are overwritten every step with the
generator's latest output. The discriminator reads both regions through
views, so no second copy of either exists.
"""

from __future__ import annotations

import torch

from .errors import DimensionMismatchError


class StagingBuffer:
    """Real samples followed by a fake-sample region, plus matching labels."""

    def __init__(self, predictors: torch.Tensor, responses: torch.Tensor,
                 num_real: int, batch_size: int):
        self.predictors = predictors
        self.responses = responses
        self.num_real = num_real
        self.batch_size = batch_size

    @classmethod
    def from_train_data(cls, train_data: torch.Tensor, batch_size: int,
                        real_label: float, fake_label: float) -> StagingBuffer:
        """Allocate the combined buffers and copy ``train_data`` into the real region.

        Raises:
            DimensionMismatchError: if ``train_data`` is not at least 2-D, or
                its sample count is smaller than or not a multiple of
                ``batch_size``.
        """
        if train_data.dim() < 2:
            raise DimensionMismatchError(
                f"train_data must be (num_samples, *sample_shape), got shape "
                f"{tuple(train_data.shape)}"
            )
        num_real = train_data.size(0)
        if batch_size > num_real:
            raise DimensionMismatchError(
                f"batch_size {batch_size} exceeds the number of samples {num_real}"
            )
        if num_real % batch_size != 0:
            raise DimensionMismatchError(
                f"number of samples {num_real} is not a multiple of batch_size {batch_size}"
            )

        sample_shape = tuple(train_data.shape[1:])
        dtype = train_data.dtype if train_data.is_floating_point() else torch.get_default_dtype()
        predictors = torch.empty((num_real + batch_size, *sample_shape),
                                 dtype=dtype, device=train_data.device)
        predictors[:num_real].copy_(train_data)
        predictors[num_real:].zero_()

        responses = torch.cat([
            torch.full((num_real, 1), float(real_label), dtype=dtype, device=train_data.device),
            torch.full((batch_size, 1), float(fake_label), dtype=dtype, device=train_data.device),
        ])
        return cls(predictors, responses, num_real, batch_size)

    @property
    def sample_shape(self) -> tuple[int, ...]:
        return tuple(self.predictors.shape[1:])

    # --- Views ---

    def real(self, i: int, batch_size: int | None = None) -> torch.Tensor:
        b = batch_size or self.batch_size
        if i < 0 or i + b > self.num_real:
            raise IndexError(
                f"real batch [{i}, {i + b}) outside the {self.num_real} real samples"
            )
        return self.predictors.narrow(0, i, b)

    def real_responses(self, i: int, batch_size: int | None = None) -> torch.Tensor:
        b = batch_size or self.batch_size
        return self.responses.narrow(0, i, b)

    def fake(self) -> torch.Tensor:
        return self.predictors.narrow(0, self.num_real, self.batch_size)

    def fake_responses(self) -> torch.Tensor:
        return self.responses.narrow(0, self.num_real, self.batch_size)

    # --- Mutation ---

    def write_fake(self, samples: torch.Tensor) -> None:
        """Overwrite the fake region with the generator's output."""
        with torch.no_grad():
            self.fake().copy_(samples.reshape(self.fake().shape))

    def label_fake(self, value: float) -> None:
        self.fake_responses().fill_(value)

    def shuffle(self, generator: torch.Generator | None = None) -> None:
        """Permute the real rows uniformly at random; the fake region is untouched."""
        ordering = torch.randperm(self.num_real, generator=generator,
                                  device='cpu').to(self.predictors.device)
        real = self.predictors.narrow(0, 0, self.num_real)
        real.copy_(real[ordering])
