"""
Find-element experiment.

Searches a string array for a target value. Input factors control the array
length and where the target sits; algorithm factors control how many
threads scan the array and in which direction each chunk is scanned.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from ..benchmark.validation import Expected
from .base import Experiment

logger = logging.getLogger(__name__)

SEARCH_VALUE = "factorbench"


class Position(Enum):
    """Position of the target value in the input array."""
    MID = "Mid"        # Target is in the middle of the array
    MISSING = "None"   # Target does not exist in the array


class Direction(Enum):
    """Direction in which each chunk is searched."""
    FORWARDS = "Forwards"
    BACKWARDS = "Backwards"


@dataclass(frozen=True)
class Settings:
    """Input factors: array length and target position."""
    len: int
    position: Position

    def factor_names(self) -> List[str]:
        return ["len", "position"]

    def factor_levels(self) -> List[str]:
        return [str(self.len), self.position.value]

    def factor_names_short(self) -> List[str]:
        return ["l", "p"]

    def factor_levels_short(self) -> List[str]:
        short = "M" if self.position == Position.MID else "X"
        return [str(self.len), short]


@dataclass(frozen=True)
class Params:
    """Algorithm factors: number of threads and search direction."""
    num_threads: int
    direction: Direction

    def factor_names(self) -> List[str]:
        return ["num_threads", "direction"]

    def factor_levels(self) -> List[str]:
        return [str(self.num_threads), self.direction.value]

    def factor_names_short(self) -> List[str]:
        return ["n", "d"]

    def factor_levels_short(self) -> List[str]:
        return [str(self.num_threads), self.direction.value[0]]


@dataclass
class SearchInput:
    """Array to search, with the target position cached for validation."""
    array: List[str]
    position: Optional[int]


def _search_chunk(chunk: Sequence[str], begin: int, direction: Direction) -> Optional[int]:
    if direction == Direction.FORWARDS:
        for i, value in enumerate(chunk):
            if value == SEARCH_VALUE:
                return begin + i
    else:
        for i in range(len(chunk) - 1, -1, -1):
            if chunk[i] == SEARCH_VALUE:
                return begin + i
    return None


class FindElementExperiment(Experiment):
    """Linear search for a value, split over worker threads."""

    name = "find_element"
    display_name = "Find Element"
    description = "Linear search over string arrays, varying threads and direction"

    def input(self, input_levels: Settings) -> SearchInput:
        array = [str(i) for i in range(input_levels.len)]

        index = input_levels.len // 2 if input_levels.position == Position.MID else input_levels.len
        position = None
        if index < len(array):
            array[index] = SEARCH_VALUE
            position = index

        return SearchInput(array=array, position=position)

    def execute(self, alg_levels: Params, input: SearchInput) -> Optional[int]:
        array = input.array
        if not array:
            return None

        num_threads = max(1, alg_levels.num_threads)
        chunk_size = max(1, -(-len(array) // num_threads))
        starts = range(0, len(array), chunk_size)

        if num_threads == 1:
            return _search_chunk(array, 0, alg_levels.direction)

        with ThreadPoolExecutor(max_workers=num_threads) as executor:
            found = executor.map(
                lambda begin: _search_chunk(array[begin:begin + chunk_size], begin, alg_levels.direction),
                starts,
            )
            return next((x for x in found if x is not None), None)

    def expected_output(self, input_levels: Settings, input: SearchInput) -> Optional[Expected]:
        # cached when the input was built
        return Expected(input.position)

    def validate_output(self, input_levels: Settings, input: SearchInput, output: Optional[int]) -> None:
        if output is not None:
            assert input.array[output] == SEARCH_VALUE, f"array[{output}] is not the search value"
        else:
            assert SEARCH_VALUE not in input.array, "search value exists but was not found"

    def default_levels(self):
        input_levels = [
            Settings(len=length, position=position)
            for length in (1 << 10, 1 << 16)
            for position in (Position.MID, Position.MISSING)
        ]
        alg_levels = [
            Params(num_threads=num_threads, direction=direction)
            for num_threads in (1, 4)
            for direction in (Direction.FORWARDS, Direction.BACKWARDS)
        ]
        return input_levels, alg_levels
