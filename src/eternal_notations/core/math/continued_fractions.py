"""
Continued Fractions — Rational Approximation

Приближение Decimal дробью p/q через цепную дробь.

Алгоритм:
    a_k = floor(x_k), x_{k+1} = 1 / (x_k - a_k)
    p_k = a_k * p_{k-1} + p_{k-2},  p_{-1} = 1, p_{-2} = 0
    q_k = a_k * q_{k-1} + q_{k-2},  q_{-1} = 0, q_{-2} = 1

Остановка (проверяется после каждой подходящей дроби, первое условие
выигрывает):
1. |v - p/q| <= tolerance
   - precision > 0: tolerance = precision (абсолютная)
   - precision < 0: tolerance = |v| / |precision| (относительная)
   - precision == 0: до исчерпания остатка
   tolerance ограничена сверху единицей
2. Достигнут лимит итераций
3. q > max_denominator (strict → откат к предыдущей дроби)
4. p > max_numerator (strict → откат, кроме целого результата)

Все циклы ограничены MAX_FRACTION_TERMS независимо от настроек.
"""

import logging
from dataclasses import dataclass
from typing import Final, Optional

from eternal_notations.core.math.eternity import (
    INF,
    ONE,
    ZERO,
    Decimal,
    DecimalSource,
    to_decimal,
)

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

# Жёсткий предел количества членов цепной дроби
MAX_FRACTION_TERMS: Final[int] = 1000


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class FractionResult:
    """
    Результат приближения: whole + numerator / denominator.

    Для несмешанной формы whole == 0. Для отрицательных значений знак несёт
    whole (смешанная форма с ненулевой целой частью) или numerator.
    """

    whole: Decimal
    numerator: Decimal
    denominator: Decimal

    @property
    def value(self) -> Decimal:
        """Значение дроби как Decimal."""
        return self.whole.add(self.numerator.div(self.denominator))


# =============================================================================
# APPROXIMATION
# =============================================================================


def _tolerance(value: Decimal, precision: Decimal) -> Decimal:
    if precision > 0:
        tolerance = precision
    elif precision < 0:
        tolerance = value.abs().div(precision.abs())
    else:
        tolerance = ZERO
    return tolerance.min(ONE)


def fraction_approximation(
    value: DecimalSource,
    precision: DecimalSource,
    max_iterations: Optional[int] = None,
    max_denominator: DecimalSource = INF,
    strict_max_denominator: bool = False,
    max_numerator: DecimalSource = INF,
    strict_max_numerator: bool = False,
    mixed: bool = False,
) -> FractionResult:
    """
    Первая подходящая дробь цепной дроби value, достаточно близкая к value.

    Args:
        value: Приближаемое значение
        precision: >0 абсолютная точность, <0 относительная, 0 максимальная
        max_iterations: Лимит членов цепной дроби (None = без лимита)
        max_denominator: Порог знаменателя
        strict_max_denominator: Откатиться к последней дроби под порогом
        max_numerator: Порог числителя
        strict_max_numerator: То же для числителя (целые результаты исключены)
        mixed: Выделить целую часть (смешанное число)

    Returns:
        FractionResult(whole, numerator, denominator)

    Examples:
        >>> r = fraction_approximation(3.14159265, 1e-3)
        >>> (r.numerator.to_float(), r.denominator.to_float())
        (333.0, 106.0)
    """
    value = to_decimal(value)
    precision = to_decimal(precision)
    max_denominator = to_decimal(max_denominator)
    max_numerator = to_decimal(max_numerator)

    if value._sign < 0:
        result = fraction_approximation(
            value.neg(),
            precision,
            max_iterations,
            max_denominator,
            strict_max_denominator,
            max_numerator,
            strict_max_numerator,
            mixed,
        )
        if mixed and result.whole != 0:
            return FractionResult(result.whole.neg(), result.numerator, result.denominator)
        return FractionResult(result.whole, result.numerator.neg(), result.denominator)

    if value._sign == 0:
        return FractionResult(ZERO, ZERO, ONE)

    if value < 1 and value.layer > 1 and precision < 0:
        # Деление на такой глубине теряет остаток: отвечаем 1 / round(1 / v)
        return FractionResult(ZERO, ONE, value.recip().round())

    tolerance = _tolerance(value, precision)
    term_limit = MAX_FRACTION_TERMS if max_iterations is None else min(max_iterations, MAX_FRACTION_TERMS)

    p_prev, p_prev2 = ONE, ZERO
    q_prev, q_prev2 = ZERO, ONE
    numerator, denominator = ZERO, ONE
    previous = (ZERO, ONE)
    approximation = ZERO
    terms = 0
    current = value

    while (
        value.sub(approximation).abs() > tolerance
        and denominator <= max_denominator
        and numerator <= max_numerator
        and terms < term_limit
    ):
        term = current.floor()
        terms += 1
        previous = (numerator, denominator)
        numerator = term.mul(p_prev).add(p_prev2)
        denominator = term.mul(q_prev).add(q_prev2)
        p_prev, p_prev2 = numerator, p_prev
        q_prev, q_prev2 = denominator, q_prev
        approximation = numerator.div(denominator)

        current = current.mod(1)
        if current == 0:
            break
        current = current.recip()

    if terms >= MAX_FRACTION_TERMS:
        logger.debug("fraction_approximation: term cap reached for %s", value)

    if (denominator > max_denominator and strict_max_denominator) or (
        numerator > max_numerator and strict_max_numerator and terms > 1
    ):
        numerator, denominator = previous

    whole = ZERO
    if mixed:
        whole = numerator.div(denominator).floor()
        numerator = numerator.sub(whole.mul(denominator))
        if numerator < 0:
            # Погрешность floor на больших дробях
            numerator = ZERO
    return FractionResult(whole, numerator, denominator)
