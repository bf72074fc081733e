"""
Treatment grid: the full factorial product of input-levels and algorithm-levels.
"""

from dataclasses import dataclass
from typing import Any, Iterator, Sequence


@dataclass(frozen=True)
class GridPosition:
    """
    One treatment of the grid together with its progress counters.

    All indices are 1-based, as shown in progress logs.
    """
    input_index: int
    input_level: Any
    alg_index: int
    alg_level: Any
    num_inputs: int
    num_algs: int

    @property
    def treatment_index(self) -> int:
        """Global index of the treatment among all ``num_treatments``."""
        return (self.input_index - 1) * self.num_algs + self.alg_index

    @property
    def num_treatments(self) -> int:
        return self.num_inputs * self.num_algs

    @property
    def label(self) -> str:
        """Progress label such as ``[3/4 || 1/2]``."""
        return (
            f"[{self.treatment_index}/{self.num_treatments} || "
            f"{self.alg_index}/{self.num_algs}]"
        )


@dataclass(frozen=True)
class InputBlock:
    """All treatments sharing one input-level, in algorithm declaration order."""
    input_index: int
    input_level: Any
    alg_levels: Sequence[Any]
    num_inputs: int

    @property
    def label(self) -> str:
        return f"[{self.input_index}/{self.num_inputs}]"

    def __iter__(self) -> Iterator[GridPosition]:
        num_algs = len(self.alg_levels)
        for a, alg_level in enumerate(self.alg_levels, start=1):
            yield GridPosition(
                input_index=self.input_index,
                input_level=self.input_level,
                alg_index=a,
                alg_level=alg_level,
                num_inputs=self.num_inputs,
                num_algs=num_algs,
            )

    def __len__(self) -> int:
        return len(self.alg_levels)


class TreatmentGrid:
    """
    Cartesian product of input-levels and algorithm-levels.

    Traversal is input-major: every algorithm-level is visited for the first
    input-level before moving to the second one. Consumers that build an
    input per input-level iterate ``blocks()`` so each input is built once
    and reused by all variants.

    Example:
        grid = TreatmentGrid(input_levels, alg_levels)
        for block in grid.blocks():
            input = build(block.input_level)
            for position in block:
                run(position.alg_level, input)
    """

    def __init__(self, input_levels: Sequence[Any], alg_levels: Sequence[Any]):
        self.input_levels = list(input_levels)
        self.alg_levels = list(alg_levels)

    @property
    def num_inputs(self) -> int:
        return len(self.input_levels)

    @property
    def num_algs(self) -> int:
        return len(self.alg_levels)

    def __len__(self) -> int:
        return self.num_inputs * self.num_algs

    def blocks(self) -> Iterator[InputBlock]:
        """Yield one block per input-level; nothing when either side is empty."""
        if not self.alg_levels:
            return
        for i, input_level in enumerate(self.input_levels, start=1):
            yield InputBlock(
                input_index=i,
                input_level=input_level,
                alg_levels=self.alg_levels,
                num_inputs=self.num_inputs,
            )

    def __iter__(self) -> Iterator[GridPosition]:
        for block in self.blocks():
            yield from block
