"""
Notations для eternal_notations

Каждая нотация - подкласс Notation с pydantic моделью параметров.
"""

# Base
from eternal_notations.notations.base import (
    ConfigurationError,
    Notation,
    NotationGlobals,
    coerce_decimal,
    exact_infinity,
)

# Inner notation
from eternal_notations.notations.default import DefaultConfig, DefaultNotation

# Fraction
from eternal_notations.notations.fraction import FractionConfig, FractionNotation

# Hypersplit
from eternal_notations.notations.hypersplit import HypersplitConfig, HypersplitNotation

# Prestige Layer
from eternal_notations.notations.prestige_layer import (
    PrestigeLadder,
    PrestigeLayerConfig,
    PrestigeLayerNotation,
    RampingCheckpoint,
)

# Polygonal
from eternal_notations.notations.polygonal import PolygonalConfig, PolygonalNotation

# Prime
from eternal_notations.notations.prime import PrimeConfig, PrimeNotation

__all__ = [
    # Base
    "ConfigurationError",
    "Notation",
    "NotationGlobals",
    "coerce_decimal",
    "exact_infinity",
    # Configs
    "DefaultConfig",
    "FractionConfig",
    "HypersplitConfig",
    "PolygonalConfig",
    "PrestigeLayerConfig",
    "PrimeConfig",
    # Notations
    "DefaultNotation",
    "FractionNotation",
    "HypersplitNotation",
    "PolygonalNotation",
    "PrestigeLayerNotation",
    "PrimeNotation",
    # Prestige Layer helpers
    "PrestigeLadder",
    "RampingCheckpoint",
]
