"""
Core math modules для eternal_notations

Числовой тип произвольной величины и алгоритмы разложения чисел.
"""

# Eternity (числовой тип)
from eternal_notations.core.math.eternity import (
    CONVERGENT_TETRATION_BASE,
    INF,
    NAN,
    NEG_INF,
    NEG_ONE,
    ONE,
    TEN,
    TWO,
    ZERO,
    Decimal,
    DecimalSource,
    to_decimal,
)

# Continued Fractions
from eternal_notations.core.math.continued_fractions import (
    MAX_FRACTION_TERMS,
    FractionResult,
    fraction_approximation,
)

# Hyperoperators
from eternal_notations.core.math.hyperoperators import (
    MAX_ROLLOVERS,
    PENTATION_STEP_CAP,
    HypersplitResult,
    hypercombine,
    hyperscientifify,
    hypersplit,
    linear_sroot,
    permutation_order,
    round_to_multiple,
    scientifify,
)

# Polygonal numbers
from eternal_notations.core.math.polygonal import polygon, polygon_root

# Primes
from eternal_notations.core.math.primes import (
    prime_factorize,
    prime_factorize_fraction,
    primes_array,
)

__all__ = [
    # Eternity types
    "Decimal",
    "DecimalSource",
    # Eternity constants
    "CONVERGENT_TETRATION_BASE",
    "INF",
    "NAN",
    "NEG_INF",
    "NEG_ONE",
    "ONE",
    "TEN",
    "TWO",
    "ZERO",
    # Eternity functions
    "to_decimal",
    # Continued Fractions
    "MAX_FRACTION_TERMS",
    "FractionResult",
    "fraction_approximation",
    # Hyperoperators constants
    "MAX_ROLLOVERS",
    "PENTATION_STEP_CAP",
    # Hyperoperators types
    "HypersplitResult",
    # Hyperoperators functions
    "hypercombine",
    "hyperscientifify",
    "hypersplit",
    "linear_sroot",
    "permutation_order",
    "round_to_multiple",
    "scientifify",
    # Polygonal
    "polygon",
    "polygon_root",
    # Primes
    "prime_factorize",
    "prime_factorize_fraction",
    "primes_array",
]
