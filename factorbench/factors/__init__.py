"""
Factor sets and their canonical keys.
"""

from .base import AlgFactors, FactorLevels, FactorSet, InputFactors
from .keys import (
    build_key,
    factor_levels,
    factor_names,
    factor_pairs,
    key_long,
    key_short,
    treatment_key,
    treatment_key_short,
)

__all__ = [
    "AlgFactors",
    "FactorLevels",
    "FactorSet",
    "InputFactors",
    "build_key",
    "factor_levels",
    "factor_names",
    "factor_pairs",
    "key_long",
    "key_short",
    "treatment_key",
    "treatment_key_short",
]
