"""
FractionNotation — Continued-Fraction Approximation

Записывает значение дробью p/q (или смешанным числом w p/q), найденной
через цепную дробь (см. core.math.continued_fractions).

Токены: 0 = числитель, 1 = знаменатель, 2 = целая часть. Порядок задаётся
delimiter_permutation (0..5), каждый токен обёрнут парой delimiters[i].

Видимость:
- числитель: numerator != 0 или не смешанная форма
- знаменатель: (show_unit_denominator или q != 1) и числитель виден
- целая часть: whole != 0
"""

from typing import Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from eternal_notations.core.math.continued_fractions import fraction_approximation
from eternal_notations.core.math.eternity import INF, Decimal
from eternal_notations.core.math.hyperoperators import permutation_order
from eternal_notations.notations.base import Notation, coerce_decimal
from eternal_notations.notations.default import DefaultNotation


# =============================================================================
# CONFIG
# =============================================================================


class FractionConfig(BaseModel):
    """Параметры FractionNotation."""

    precision: Decimal = Field(..., description=">0 абсолютная, <0 относительная, 0 максимальная точность")
    mixed_number: bool = Field(default=False, description="Выделять целую часть")
    max_iterations: Optional[int] = Field(default=None, ge=1, description="Лимит членов цепной дроби")
    max_denominator: Decimal = Field(default=INF, description="Порог знаменателя")
    strict_max_denominator: bool = Field(default=False, description="Откат к дроби под порогом")
    max_numerator: Decimal = Field(default=INF, description="Порог числителя")
    strict_max_numerator: bool = Field(default=False, description="Откат к дроби под порогом")
    delimiters: Tuple[Tuple[str, str], Tuple[str, str], Tuple[str, str]] = Field(
        default=(("", ""), ("/", ""), ("", " ")),
        description="Обёртки числителя, знаменателя и целой части",
    )
    delimiter_permutation: int = Field(default=1, ge=0, le=5, description="Порядок токенов")
    numerator_inner_notation: Notation = Field(
        default_factory=DefaultNotation, description="Нотация числителя"
    )
    whole_inner_notation: Optional[Notation] = Field(
        default=None, description="Нотация целой части (None: как у числителя)"
    )
    denominator_inner_notation: Optional[Notation] = Field(
        default=None, description="Нотация знаменателя (None: как у числителя)"
    )
    show_unit_denominator: bool = Field(default=False, description="Показывать знаменатель 1")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("precision", "max_denominator", "max_numerator", mode="before")
    @classmethod
    def coerce_numbers(cls, v):
        return coerce_decimal(v)


# =============================================================================
# NOTATION
# =============================================================================


class FractionNotation(Notation):
    """
    Дробь или смешанное число, приближающее значение.

    Examples:
        >>> FractionNotation(precision=1e-3).format(3.14159265)
        '333/106'
        >>> FractionNotation(precision=1e-3, mixed_number=True).format(3.14159265)
        '3 15/106'
    """

    config_model = FractionConfig
    default_name = "Fraction Notation"

    @property
    def whole_notation(self) -> Notation:
        return self._config.whole_inner_notation or self._config.numerator_inner_notation

    @property
    def denominator_notation(self) -> Notation:
        return self._config.denominator_inner_notation or self._config.numerator_inner_notation

    def format_decimal(self, value: Decimal) -> str:
        config = self._config
        result = fraction_approximation(
            value,
            config.precision,
            config.max_iterations,
            config.max_denominator,
            config.strict_max_denominator,
            config.max_numerator,
            config.strict_max_numerator,
            config.mixed_number,
        )
        whole, numerator, denominator = result.whole, result.numerator, result.denominator

        if whole.sign == 0 and numerator.sign == 0:
            return self.whole_notation.format(0)
        if (
            config.mixed_number
            and not config.show_unit_denominator
            and numerator.sign == 0
            and denominator == 1
        ):
            return self.whole_notation.format(whole)

        show_numerator = numerator.sign != 0 or not config.mixed_number
        tokens = (
            (show_numerator, config.numerator_inner_notation, numerator),
            (
                show_numerator and (config.show_unit_denominator or denominator != 1),
                self.denominator_notation,
                denominator,
            ),
            (whole.sign != 0, self.whole_notation, whole),
        )

        text = ""
        for index in permutation_order(3, config.delimiter_permutation):
            shown, notation, amount = tokens[index]
            if shown:
                prefix, suffix = config.delimiters[index]
                text += prefix + notation.format(amount) + suffix
        return text
