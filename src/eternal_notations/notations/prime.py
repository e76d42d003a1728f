"""
PrimeNotation — Prime Factorizations and Power Towers

Диапазоны (value > 0):
    0, 1                → base_inner_notation
    < minimum           → "(" + format(1 / value) + ")^-1"
    < num_limit         → разложение приближающей дроби: "2^3 * 3^-2 * 5"
    < башни высоты max_tower_height → "(a)^(b)^(c)"
    иначе               → "(x)^^(h)"

Отрицательные: "-1 * " + разложение |value|.
"""

import logging
from dataclasses import dataclass
from typing import Final, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from eternal_notations.core.math.eternity import CONVERGENT_TETRATION_BASE, ONE, Decimal
from eternal_notations.core.math.hyperoperators import linear_sroot
from eternal_notations.core.math.primes import prime_factorize_fraction, primes_array
from eternal_notations.notations.base import ConfigurationError, Notation, coerce_decimal
from eternal_notations.notations.default import DefaultNotation

logger = logging.getLogger(__name__)

# Максимум уточнений корня при imprecision в power tower
ROOT_CORRECTION_CAP: Final[int] = 64


# =============================================================================
# CONFIG
# =============================================================================


class PrimeConfig(BaseModel):
    """Параметры PrimeNotation."""

    max_prime: int = Field(default=10000, ge=2, description="Наибольшее простое для разложения")
    max_tower_height: int = Field(default=5, ge=1, description="Наибольшая высота power tower")
    fraction_precision: Decimal = Field(default=Decimal(-1e6), description="Точность приближающей дроби (-1e6: 1 / 1e6 от value)")
    num_limit: Optional[Decimal] = Field(default=None, description="Граница разложения (None: max_prime^2)")
    power_base: Optional[Decimal] = Field(default=None, description="Основание башни (None: max_prime)")
    minimum: Optional[Decimal] = Field(default=None, description="Ниже - через обратное (None: 1/max_prime)")
    multiplication_string: str = Field(default=" * ", description="Разделитель множителей")
    power_string: Tuple[str, str] = Field(default=("^", ""), description="Обёртка показателя")
    power_before: bool = Field(default=False, description="Показатель перед основанием")
    exp_chars: Tuple[Tuple[str, str, str], Tuple[str, str, str]] = Field(
        default=(("(", ")^(", ")"), ("(", ")^^(", ")")),
        description="Обёртки power tower и тетрации",
    )
    base_inner_notation: Notation = Field(default_factory=DefaultNotation, description="Нотация оснований")
    power_inner_notation: Optional[Notation] = Field(
        default_factory=DefaultNotation, description="Нотация показателей (None: эта же нотация)"
    )
    recip_string: Optional[Tuple[str, str]] = Field(default=None, description="Обёртка обратного значения")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("fraction_precision", mode="before")
    @classmethod
    def coerce_precision(cls, v):
        return coerce_decimal(v)

    @field_validator("num_limit", "power_base", "minimum", mode="before")
    @classmethod
    def coerce_optional(cls, v):
        return None if v is None else coerce_decimal(v)

    @model_validator(mode="after")
    def check_power_base(self) -> "PrimeConfig":
        if self.power_base is not None and not self.power_base.to_float() > CONVERGENT_TETRATION_BASE:
            raise ValueError(f"power_base must exceed {CONVERGENT_TETRATION_BASE}")
        return self


@dataclass(frozen=True)
class _PrimeLimits:
    primes: List[int]
    num_limit: Decimal
    power_base: Decimal
    minimum: Decimal
    tower_limit: Decimal


# =============================================================================
# NOTATION
# =============================================================================


class PrimeNotation(Notation):
    """
    Разложение на простые множители.

    Examples:
        >>> PrimeNotation().format(60)
        '2^2 * 3 * 5'
        >>> PrimeNotation().format(0.75)
        '2^-2 * 3'
    """

    config_model = PrimeConfig
    default_name = "Prime Notation"

    def _derive(self, config: PrimeConfig) -> _PrimeLimits:
        max_prime = Decimal(config.max_prime)
        num_limit = config.num_limit if config.num_limit is not None else max_prime.sqr()
        power_base = config.power_base if config.power_base is not None else max_prime
        minimum = config.minimum if config.minimum is not None else max_prime.recip()
        if num_limit <= 1:
            raise ConfigurationError("num_limit must be greater than 1")
        tower_limit = power_base.iteratedexp(config.max_tower_height - 2, num_limit.tetrate(2))
        return _PrimeLimits(primes_array(config.max_prime), num_limit, power_base, minimum, tower_limit)

    @property
    def power_notation(self) -> Notation:
        return self._config.power_inner_notation or self

    def format_negative_decimal(self, value: Decimal) -> str:
        config = self._config
        if value == ONE:
            return config.base_inner_notation.format(-1)
        return config.base_inner_notation.format(-1) + config.multiplication_string + self.format_decimal(value)

    def _factorization(self, value: Decimal) -> str:
        config = self._config
        limits = self._derived
        factors = prime_factorize_fraction(
            value,
            limits.primes,
            config.fraction_precision,
            None,
            limits.num_limit,
            True,
            limits.num_limit,
            True,
        )
        if not factors:
            return config.base_inner_notation.format(1)
        parts = []
        for base, exponent in factors:
            part = config.base_inner_notation.format(base)
            if exponent != 1:
                power = config.power_string[0] + self.power_notation.format(exponent) + config.power_string[1]
                part = power + part if config.power_before else part + power
            parts.append(part)
        return config.multiplication_string.join(parts)

    def _tower(self, value: Decimal) -> str:
        limits = self._derived
        opening, separator, closing = self._config.exp_chars[0]
        layers = []
        current = value
        while current >= limits.num_limit.pow(limits.num_limit):
            layers.append(limits.power_base)
            current = current.log(limits.power_base)

        root = current.log(limits.num_limit).add(1).floor()
        rooted = current.root(root)
        for _ in range(ROOT_CORRECTION_CAP):
            if rooted < limits.num_limit:
                break
            root = root.add(1)
            rooted = current.root(root)
        layers += [rooted, root]
        return opening + separator.join(self.format(layer) for layer in layers) + closing

    def format_decimal(self, value: Decimal) -> str:
        config = self._config
        limits = self._derived
        if value.sign == 0 or value == ONE:
            return config.base_inner_notation.format(value)
        if value < limits.minimum:
            prefix, suffix = config.recip_string or (
                "(",
                ")" + config.power_string[0] + self.power_notation.format(-1) + config.power_string[1],
            )
            return prefix + self.format(value.recip()) + suffix
        if value < limits.num_limit:
            return self._factorization(value)
        if value < limits.tower_limit:
            return self._tower(value)

        opening, separator, closing = config.exp_chars[1]
        height = value.slog(limits.num_limit).add(1).floor()
        if height < limits.num_limit:
            base = linear_sroot(value, height.to_float())
            return opening + self.format(base) + separator + self.format(height) + closing
        logger.debug("prime: super-root height %s beyond num_limit", height)
        return opening + self.format(limits.power_base) + separator + self.format(value.slog(limits.power_base)) + closing
