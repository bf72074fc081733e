"""
Factor set contract shared by input factors and algorithm factors.

Any object exposing ``factor_names()`` and ``factor_levels()`` is a factor
set; ``factor_names_short()`` and ``factor_levels_short()`` are optional and
fall back to the full forms. Input factors describe how to build a problem
input, algorithm factors describe one variant of the algorithm under test.
Both are plain structural contracts, so enums, dataclasses or named tuples
can take part without inheriting from anything.

Example:
    @dataclass
    class Settings:
        len: int
        position: Position

        def factor_names(self):
            return ["len", "position"]

        def factor_levels(self):
            return [str(self.len), self.position.name]

        def factor_names_short(self):
            return ["l", "p"]

        def factor_levels_short(self):
            return [str(self.len), self.position.name[0]]
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Protocol, Tuple, runtime_checkable


@runtime_checkable
class FactorSet(Protocol):
    """Structural contract for a set of named factor levels."""

    def factor_names(self) -> List[str]:
        """Full factor names, used in logs and as table column headers."""
        ...

    def factor_levels(self) -> List[str]:
        """Full string levels, in the same order as ``factor_names``."""
        ...


# Alias names used in signatures to tell the two roles apart
InputFactors = FactorSet
AlgFactors = FactorSet


@dataclass(frozen=True)
class FactorLevels:
    """
    Concrete factor set holding explicit names and levels.

    Attributes:
        names: Full factor names
        levels: Full factor levels
        names_short: Abbreviated names (defaults to ``names``)
        levels_short: Abbreviated levels (defaults to ``levels``)
    """
    names: Tuple[str, ...]
    levels: Tuple[str, ...]
    names_short: Optional[Tuple[str, ...]] = None
    levels_short: Optional[Tuple[str, ...]] = None
    payload: Dict[str, object] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def from_mapping(
        cls,
        levels: Mapping[str, object],
        short: Optional[Mapping[str, object]] = None,
    ) -> "FactorLevels":
        """
        Build factor levels from an ordered mapping.

        Args:
            levels: Mapping of full factor name to level value
            short: Optional mapping of short factor name to short level value,
                in the same order as ``levels``

        Returns:
            FactorLevels whose payload keeps the original (non-string) values
        """
        names = tuple(levels.keys())
        values = tuple(str(v) for v in levels.values())
        names_short = tuple(short.keys()) if short else None
        levels_short = tuple(str(v) for v in short.values()) if short else None
        return cls(
            names=names,
            levels=values,
            names_short=names_short,
            levels_short=levels_short,
            payload=dict(levels),
        )

    def factor_names(self) -> List[str]:
        return list(self.names)

    def factor_levels(self) -> List[str]:
        return list(self.levels)

    def factor_names_short(self) -> List[str]:
        return list(self.names_short) if self.names_short is not None else self.factor_names()

    def factor_levels_short(self) -> List[str]:
        return list(self.levels_short) if self.levels_short is not None else self.factor_levels()

    def __getitem__(self, name: str) -> object:
        return self.payload[name]

    def __repr__(self) -> str:
        pairs = ", ".join(f"{n}={v}" for n, v in zip(self.names, self.levels))
        return f"FactorLevels({pairs})"
