"""
eternal_notations - запись чисел произвольной величины в виде текста.

    >>> from eternal_notations import FractionNotation
    >>> FractionNotation(precision=1e-3).format(3.14159265)
    '333/106'
"""

from eternal_notations.core.math.eternity import Decimal, DecimalSource, to_decimal
from eternal_notations.notations import (
    ConfigurationError,
    DefaultNotation,
    FractionNotation,
    HypersplitNotation,
    Notation,
    NotationGlobals,
    PolygonalNotation,
    PrestigeLayerNotation,
    PrimeNotation,
)

__version__ = "0.1.0"

__all__ = [
    # Numbers
    "Decimal",
    "DecimalSource",
    "to_decimal",
    # Contract
    "ConfigurationError",
    "Notation",
    "NotationGlobals",
    # Notations
    "DefaultNotation",
    "FractionNotation",
    "HypersplitNotation",
    "PolygonalNotation",
    "PrestigeLayerNotation",
    "PrimeNotation",
]
