"""Batch evolution of many seed rows in parallel using torch tensors."""

import logging
from typing import List, Sequence, Union

import numpy as np
import torch
import torch.nn.functional as F

from .rule import compile_rule

logger = logging.getLogger(__name__)


class BatchAutomaton:
    """Evolves several independent seed rows at once, each under its own rule.

    All rows live in a single ``(batch_size, width)`` tensor. Neighborhood
    codes for every cell of every row come from one 1-D convolution with
    kernel ``[4, 2, 1]`` and zero padding, so edges never wrap. Each
    batch entry then looks its codes up in its own 8-entry rule table.
    """

    def __init__(
        self,
        seeds: Union[np.ndarray, torch.Tensor, Sequence[Sequence[bool]]],
        rules: Sequence[int],
        device: str = "cpu",
    ) -> None:
        """Initialize a batch.

        Args:
            seeds: Seed rows of equal width, shape (batch_size, width)
            rules: One rule index per seed row
            device: Device to place tensors on ('cpu' or 'cuda')

        Raises:
            InvalidRuleIndex: If any rule is out of range
            ValueError: If the number of rules differs from the number of seeds
        """
        self.device = torch.device(device)
        seeds = torch.as_tensor(np.asarray(seeds, dtype=bool), device=self.device)
        if seeds.dim() != 2:
            raise ValueError(f"Seeds must be 2-dimensional, got shape {tuple(seeds.shape)}")
        if len(rules) != seeds.shape[0]:
            raise ValueError(f"Got {len(rules)} rules for {seeds.shape[0]} seed rows")

        self.rules = [compile_rule(rule).rule for rule in rules]
        self.batch_size, self.width = seeds.shape
        self._seeds = seeds.clone()
        self._cells = seeds.clone()
        self._generation = 0

        # (batch_size, 8) lookup tables indexed by neighborhood code
        tables = np.zeros((len(self.rules), 8), dtype=bool)
        for index, rule in enumerate(self.rules):
            tables[index] = compile_rule(rule).outputs
        self._tables = torch.as_tensor(tables, device=self.device)

        self._kernel = torch.tensor([[[4.0, 2.0, 1.0]]], device=self.device)

    @property
    def cells(self) -> torch.Tensor:
        """Current row of every batch entry."""
        return self._cells

    @property
    def generation(self) -> int:
        """Number of steps taken since the seeds."""
        return self._generation

    @property
    def shape(self):
        """Get batch dimensions as (batch_size, width)."""
        return (self.batch_size, self.width)

    def neighborhood_codes(self) -> torch.Tensor:
        """Neighborhood code 0..7 of every cell, shape (batch_size, width)."""
        cells_float = self._cells.float().unsqueeze(1)
        codes = F.conv1d(cells_float, self._kernel, padding=1)
        return codes.squeeze(1).round().long()

    def step_batch(self) -> torch.Tensor:
        """Advance every batch entry by one row.

        Returns:
            The new rows, shape (batch_size, width)
        """
        if self.batch_size and self.width:
            self._cells = torch.gather(self._tables, 1, self.neighborhood_codes())
        self._generation += 1
        return self._cells

    def reset(self) -> None:
        """Return every batch entry to its seed row."""
        self._cells = self._seeds.clone()
        self._generation = 0

    def generate(self, row_count: int) -> torch.Tensor:
        """Evolve every seed from scratch into ``row_count`` rows.

        Returns:
            Boolean tensor of shape (batch_size, row_count, width)
        """
        if row_count < 0:
            raise ValueError(f"Row count must be non-negative, got {row_count}")
        self.reset()
        rows = []
        for index in range(row_count):
            if index > 0:
                self.step_batch()
            rows.append(self._cells.clone())
        logger.debug("Batch generated %d images of %dx%d", self.batch_size, row_count, self.width)
        if not rows:
            return torch.zeros(self.batch_size, 0, self.width, dtype=torch.bool, device=self.device)
        return torch.stack(rows, dim=1)

    def generate_numpy(self, row_count: int) -> List[np.ndarray]:
        """Like ``generate`` but returns one numpy image per batch entry."""
        images = self.generate(row_count).cpu().numpy()
        return [images[i] for i in range(self.batch_size)]
