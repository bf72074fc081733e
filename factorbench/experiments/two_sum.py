"""
Two-sum experiment: find two indices whose values add up to a target,
comparing lookup structures for the complement.
"""

import bisect
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..benchmark.validation import Expected
from ..factors.base import FactorLevels
from .base import Experiment

TARGET = 3


class StoreType(Enum):
    """Structure used to look up the complement of each value."""
    LINEAR = "Linear"    # scan the array itself
    SORTED = "Sorted"    # binary search over sorted (value, index) pairs
    DICT = "Dict"        # hash lookup


@dataclass
class TwoSumInput:
    array: List[int]
    indices: Optional[Tuple[int, int]]


def _linear_store(array: List[int]):
    def index_of(complement: int) -> Optional[int]:
        try:
            return array.index(complement)
        except ValueError:
            return None
    return index_of


def _sorted_store(array: List[int]):
    pairs = sorted((value, i) for i, value in enumerate(array))
    values = [value for value, _ in pairs]

    def index_of(complement: int) -> Optional[int]:
        pos = bisect.bisect_left(values, complement)
        if pos < len(values) and values[pos] == complement:
            return pairs[pos][1]
        return None
    return index_of


def _dict_store(array: List[int]):
    store: Dict[int, int] = {value: i for i, value in enumerate(array)}
    return store.get


_STORES = {
    StoreType.LINEAR: _linear_store,
    StoreType.SORTED: _sorted_store,
    StoreType.DICT: _dict_store,
}


def two_sum(array: List[int], target: int, store_type: StoreType) -> Optional[Tuple[int, int]]:
    index_of = _STORES[store_type](array)
    for i, a in enumerate(array):
        j = index_of(target - a)
        if j is not None:
            return (i, j)
    return None


class TwoSumExperiment(Experiment):
    """Two-sum over random arrays with a single planted solution."""

    name = "two_sum"
    display_name = "Two Sum"
    description = "Complement lookup via linear scan, sorted pairs or dict"

    def __init__(self, seed: int = 42):
        self.seed = seed

    def input(self, input_levels: FactorLevels) -> TwoSumInput:
        n = int(input_levels["len"])
        rng = random.Random(self.seed)
        # all values >= TARGET, so only the planted pair sums to it
        array = [rng.randrange(TARGET, max(n, TARGET + 1)) for _ in range(n)]

        if n < 4:
            return TwoSumInput(array=array, indices=None)

        i, j = n // 2, 3 * n // 4
        array[i] = 1
        array[j] = TARGET - 1
        return TwoSumInput(array=array, indices=(i, j))

    def execute(self, alg_levels: FactorLevels, input: TwoSumInput) -> Optional[Tuple[int, int]]:
        return two_sum(input.array, TARGET, alg_levels["store"])

    def expected_output(self, input_levels: FactorLevels, input: TwoSumInput) -> Optional[Expected]:
        return Expected(input.indices)

    def validate_output(self, input_levels, input: TwoSumInput, output) -> None:
        if output is not None:
            i, j = output
            assert input.array[i] + input.array[j] == TARGET, f"values at {output} do not sum to {TARGET}"

    def default_levels(self):
        input_levels = [
            FactorLevels.from_mapping({"len": n})
            for n in (1 << 5, 1 << 8, 1 << 11)
        ]
        alg_levels = [
            FactorLevels(
                names=("store-type",),
                levels=(store.value,),
                payload={"store": store},
            )
            for store in StoreType
        ]
        return input_levels, alg_levels
