"""
Canonical keys for factor sets and treatments.

A factor set ``len=1024, position=Mid`` becomes ``len:1024_position:Mid``;
a treatment joins its input and algorithm halves with ``/``:

    len:1024_position:Mid/num_threads:1_direction:Forwards   (full)
    l:1024_p:M/n:1_d:F                                       (short)

Short keys identify treatments towards the timing harness and must fit
``Config.MAX_KEY_LENGTH``. They are never truncated.
"""

from typing import List, Optional, Sequence, Tuple

from ..config import Config
from ..errors import FactorMismatch, KeyTooLong
from .base import FactorSet

LEVEL_SEPARATOR = ":"
FACTOR_SEPARATOR = "_"
TREATMENT_SEPARATOR = "/"


def factor_names(factors: FactorSet, abbreviated: bool = False) -> List[str]:
    """Get factor names, falling back to the full names for the short form."""
    if abbreviated and hasattr(factors, "factor_names_short"):
        return list(factors.factor_names_short())
    return list(factors.factor_names())


def factor_levels(factors: FactorSet, abbreviated: bool = False) -> List[str]:
    """Get factor levels as strings, falling back to the full levels for the short form."""
    if abbreviated and hasattr(factors, "factor_levels_short"):
        return [str(level) for level in factors.factor_levels_short()]
    return [str(level) for level in factors.factor_levels()]


def factor_pairs(factors: FactorSet, abbreviated: bool = False) -> List[Tuple[str, str]]:
    """
    Get ordered (name, level) pairs of a factor set.

    Args:
        factors: Factor set
        abbreviated: Use short names and levels

    Returns:
        List of (name, level) tuples

    Raises:
        FactorMismatch: If names and levels differ in length, or the short form
            has a different number of factors than the full form
    """
    names = factor_names(factors, abbreviated)
    levels = factor_levels(factors, abbreviated)
    if len(names) != len(levels):
        raise FactorMismatch(names, levels)

    if abbreviated:
        full_count = len(factors.factor_names())
        if full_count != len(names):
            raise FactorMismatch(factors.factor_names(), names)

    return list(zip(names, levels))


def build_key(
    factor_pairs: Sequence[Tuple[str, str]],
    abbreviated: bool = False,
    max_length: Optional[int] = None,
) -> str:
    """
    Join (name, level) pairs into a key.

    Args:
        factor_pairs: Ordered (name, level) pairs
        abbreviated: The pairs are the short form; the key is length-checked
        max_length: Length limit for short keys (default: Config.MAX_KEY_LENGTH)

    Returns:
        Key such as ``name1:level1_name2:level2``; empty for no pairs

    Raises:
        KeyTooLong: If an abbreviated key exceeds the limit
    """
    key = FACTOR_SEPARATOR.join(
        f"{name}{LEVEL_SEPARATOR}{level}" for name, level in factor_pairs
    )
    if abbreviated:
        check_length(key, max_length)
    return key


def check_length(key: str, max_length: Optional[int] = None) -> str:
    """Raise KeyTooLong if ``key`` is longer than the limit."""
    limit = Config.MAX_KEY_LENGTH if max_length is None else max_length
    if len(key) > limit:
        raise KeyTooLong(key, limit)
    return key


def key_long(factors: FactorSet) -> str:
    """Full key of a factor set."""
    return build_key(factor_pairs(factors))


def key_short(factors: FactorSet, max_length: Optional[int] = None) -> str:
    """Short key of a factor set, checked against the length limit."""
    return build_key(factor_pairs(factors, abbreviated=True), abbreviated=True, max_length=max_length)


def treatment_key(input_factors: FactorSet, alg_factors: FactorSet) -> str:
    """Full key of the treatment formed by an input-level and an algorithm-level."""
    return f"{key_long(input_factors)}{TREATMENT_SEPARATOR}{key_long(alg_factors)}"


def treatment_key_short(
    input_factors: FactorSet,
    alg_factors: FactorSet,
    max_length: Optional[int] = None,
) -> str:
    """
    Short key of a treatment.

    The whole key, both halves and the separator, must fit the limit.

    Raises:
        KeyTooLong: If the joined short key exceeds the limit
    """
    key = (
        f"{key_short(input_factors, max_length)}"
        f"{TREATMENT_SEPARATOR}"
        f"{key_short(alg_factors, max_length)}"
    )
    return check_length(key, max_length)

