"""
Hyperoperators — Splitting Values Across Operator Levels

Разложение Decimal по уровням гипероператоров относительно основания b:

    value = b^^^p (b^^t-башня над (m * b^e))

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. hypercombine(hypersplit(v)) ≈ v (с точностью округления мантиссы)
2. Мантисса < maximums[0] (или original_maximums[0], пока exponent == 0)
3. Показываемый exponent < b^maximums[1] (или b^original_maximums[1], пока
   tetration == 0); то же для tetration с maximums[2] и pentation
4. Все циклы ограничены: PENTATION_STEP_CAP, TETRATION_STEP_CAP, MAX_ROLLOVERS

Основание должно превышать e^(1/e): иначе бесконечная башня сходится и
slog не определён на всей оси.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Final, List, Optional, Sequence, Tuple, Union

from eternal_notations.core.math.eternity import (
    CONVERGENT_TETRATION_BASE,
    ONE,
    TEN,
    ZERO,
    Decimal,
    DecimalSource,
    to_decimal,
)

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

# Максимум super-log шагов при подъёме на уровень пентации
PENTATION_STEP_CAP: Final[int] = 10

# Максимум логарифмов при подъёме на уровень тетрации после "прыжка"
TETRATION_STEP_CAP: Final[int] = 100

# Максимум переносов после округления мантиссы
MAX_ROLLOVERS: Final[int] = 8

Rounding = Union[DecimalSource, Callable[[Decimal], DecimalSource]]


# =============================================================================
# ROUNDING & ORDERING
# =============================================================================


def round_to_multiple(value: DecimalSource, rounding: Rounding) -> Decimal:
    """
    Округляет value до ближайшего кратного rounding.

    rounding может быть единицей округления или функцией value → единица.
    Единица 0 отключает округление.

    Examples:
        >>> round_to_multiple(3.14159, 0.01).to_float()
        3.14
    """
    value = to_decimal(value)
    unit = to_decimal(rounding(value) if callable(rounding) else rounding)
    if unit._sign == 0 or unit.is_nan():
        return value
    return value.div(unit).round().mul(unit)


def permutation_order(size: int, permutation: int) -> List[int]:
    """
    Порядок токенов 0..size-1 для номера перестановки.

    Токен k вставляется на позицию (permutation // k!) % (k + 1).

    Examples:
        >>> permutation_order(3, 1)
        [2, 0, 1]
    """
    order = [0]
    for k in range(1, size):
        order.insert((permutation // math.factorial(k)) % (k + 1), k)
    return order


def _log_base(value: Decimal, base: Decimal) -> Decimal:
    if base == TEN:
        return value.log10()
    return value.log(base)


# =============================================================================
# SCIENTIFIC SPLITS
# =============================================================================


def scientifify(
    value: DecimalSource, base: DecimalSource = 10, rounding: Rounding = 0
) -> Tuple[Decimal, Decimal]:
    """
    value = mantissa * base^exponent, mantissa ∈ [1, base).

    Округление мантиссы до base переносится в exponent.

    Returns:
        (mantissa, exponent)
    """
    value = to_decimal(value)
    base = to_decimal(base)
    if value._sign == 0:
        return ZERO, ZERO

    exponent = _log_base(value, base).floor()
    mantissa = value.div(base.pow(exponent))
    if mantissa >= base:
        mantissa = mantissa.div(base)
        exponent = exponent.add(1)
    elif mantissa < 1:
        mantissa = mantissa.mul(base)
        exponent = exponent.sub(1)
    if not (ONE <= mantissa < base):
        # Мантисса потеряна на глубоких слоях
        mantissa = ONE

    mantissa = round_to_multiple(mantissa, rounding)
    if mantissa >= base:
        mantissa = mantissa.div(base)
        exponent = exponent.add(1)
    return mantissa, exponent


def hyperscientifify(
    value: DecimalSource, base: DecimalSource = 10, rounding: Rounding = 0
) -> Tuple[Decimal, Decimal]:
    """
    value = base^^height с вершиной mantissa, mantissa ∈ [1, base).

    Returns:
        (mantissa, height)
    """
    value = to_decimal(value)
    base = to_decimal(base)
    if value <= 1:
        return value, ZERO

    height = value.slog(base).floor()
    mantissa = value.iteratedlog(base, height.to_float())
    if mantissa >= base:
        mantissa = _log_base(mantissa, base)
        height = height.add(1)
    if not (ONE <= mantissa < base):
        mantissa = ONE

    mantissa = round_to_multiple(mantissa, rounding)
    if mantissa >= base:
        mantissa = ONE
        height = height.add(1)
    return mantissa, height


# =============================================================================
# HYPERSPLIT
# =============================================================================


@dataclass(frozen=True)
class HypersplitResult:
    """
    Разложение по уровням: показываемые значения (natural * multiplier).
    """

    mantissa: Decimal
    exponent: Decimal
    tetration: Decimal
    pentation: Decimal

    def as_tuple(self) -> Tuple[Decimal, Decimal, Decimal, Decimal]:
        return (self.mantissa, self.exponent, self.tetration, self.pentation)


def _triple(values: Optional[Union[DecimalSource, Sequence[DecimalSource]]], default) -> Tuple[Decimal, ...]:
    if values is None:
        values = default
    if isinstance(values, (list, tuple)):
        items = [to_decimal(v) for v in values][:3]
        if not items:
            raise ValueError("expected at least one value")
        while len(items) < 3:
            items.append(items[-1])
        return tuple(items)
    return (to_decimal(values),) * 3


class _Splitter:
    """Пороги разложения, вычисленные один раз на вызов hypersplit."""

    def __init__(self, base, maximums, original_maximums, rounding, multipliers):
        self.base = base
        self.maximums = maximums
        self.original = original_maximums
        self.rounding = rounding
        self.multipliers = multipliers

    def _count_cap(self, digits: Decimal, multiplier: Decimal) -> Decimal:
        # Наибольший натуральный счётчик n с n * multiplier < base^digits
        return self.base.pow(digits).div(multiplier).ceil().sub(1).max(ZERO)

    def mantissa_cap(self, exponent_zero: bool) -> Decimal:
        return self.original[0] if exponent_zero else self.maximums[0]

    def exponent_cap(self, tetration_zero: bool) -> Decimal:
        digits = self.original[1] if tetration_zero else self.maximums[1]
        return self._count_cap(digits, self.multipliers[0])

    def tetration_cap(self, pentation_zero: bool) -> Decimal:
        digits = self.original[2] if pentation_zero else self.maximums[2]
        return self._count_cap(digits, self.multipliers[1])

    def exponent_limit(self, tetration_zero: bool) -> Decimal:
        """Наименьшее значение, требующее подъёма на уровень тетрации."""
        cap = self.exponent_cap(tetration_zero)
        if cap._sign == 0:
            return self.original[0]
        return self.maximums[0].mul(self.base.pow(cap)).max(self.original[0])

    def tetration_limit(self, pentation_zero: bool) -> Decimal:
        """Наименьшее значение, требующее подъёма на уровень пентации."""
        cap = self.tetration_cap(pentation_zero).to_float()
        if cap == 0:
            return self.exponent_limit(True)
        return self.base.iteratedexp(cap, self.exponent_limit(False))

    def split_mantissa(self, value: Decimal) -> Tuple[Decimal, Decimal]:
        if value < self.original[0]:
            return value, ZERO
        top = self.maximums[0]
        exponent = _log_base(value.div(top), self.base).floor().add(1).max(ONE)
        mantissa = value.div(self.base.pow(exponent))
        if mantissa >= top:
            mantissa = mantissa.div(self.base)
            exponent = exponent.add(1)
        return mantissa, exponent

    def climb_tetration(self, value: Decimal) -> Tuple[Decimal, int]:
        if value < self.exponent_limit(True):
            return value, 0
        target = self.exponent_limit(False)
        jump = math.floor(value.slog(self.base).to_float() - target.slog(self.base).to_float()) - 1
        tetration = 0
        if jump > 0:
            value = value.iteratedlog(self.base, jump)
            tetration = jump
        for _ in range(TETRATION_STEP_CAP):
            if value < self.exponent_limit(tetration == 0):
                break
            value = _log_base(value, self.base)
            tetration += 1
        else:
            logger.debug("hypersplit: tetration step cap reached at %s", value)
        return value, tetration

    def descend(self, value: Decimal) -> Tuple[Decimal, Decimal, int]:
        """Мантисса, exponent и число логарифмов для значения ниже пентации."""
        value, tetration = self.climb_tetration(value)
        mantissa, exponent = self.split_mantissa(value)
        for _ in range(MAX_ROLLOVERS):
            mantissa = round_to_multiple(mantissa, self.rounding)
            if mantissa >= self.mantissa_cap(exponent._sign == 0):
                mantissa = mantissa.div(self.base)
                exponent = exponent.add(1)
            if exponent <= self.exponent_cap(tetration == 0):
                return mantissa, exponent, tetration
            value = _log_base(mantissa, self.base).add(exponent)
            tetration += 1
            mantissa, exponent = self.split_mantissa(value)
        logger.debug("hypersplit: rollover cap reached at tetration %d", tetration)
        return mantissa, exponent, tetration


def hypersplit(
    value: DecimalSource,
    base: DecimalSource = 10,
    maximums: Optional[Union[DecimalSource, Sequence[DecimalSource]]] = None,
    original_maximums: Optional[Union[DecimalSource, Sequence[DecimalSource]]] = None,
    minnum: DecimalSource = 1,
    mantissa_rounding: Rounding = 0,
    exp_multipliers: Union[DecimalSource, Sequence[DecimalSource]] = (1, 1, 1),
) -> HypersplitResult:
    """
    Раскладывает value на (mantissa, exponent, tetration, pentation).

    Args:
        value: Неотрицательное значение
        base: Основание, > e^(1/e)
        maximums: Пороги уровней (mantissa, exponent, tetration); default base.
            Для mantissa это граница значения, для exponent и tetration -
            число цифр показываемого счётчика в системе base
        original_maximums: Ослабленные пороги, пока следующий уровень == 0
        minnum: Значения ниже не раскладываются
        mantissa_rounding: Единица округления мантиссы или функция
        exp_multipliers: Множители показываемых exponent, tetration, pentation

    Returns:
        HypersplitResult

    Raises:
        ValueError: base <= e^(1/e) или неположительные maximums

    Examples:
        >>> hypersplit(1e15, maximums=10).as_tuple()
        (Decimal('1'), Decimal('15'), Decimal('0'), Decimal('0'))
    """
    value = to_decimal(value)
    base = to_decimal(base)
    if not base.to_float() > CONVERGENT_TETRATION_BASE:
        raise ValueError(f"base must exceed {CONVERGENT_TETRATION_BASE}, got {base}")
    maxes = _triple(maximums, base)
    originals = _triple(original_maximums, maxes) if original_maximums is not None else maxes
    multipliers = _triple(exp_multipliers, (1, 1, 1))
    if any(m <= 0 for m in maxes + originals):
        raise ValueError("maximums must be positive")
    if any(m <= 0 for m in multipliers):
        raise ValueError("exp_multipliers must be positive")

    if value._sign == 0:
        return HypersplitResult(ZERO, ZERO, ZERO, ZERO)
    if value < to_decimal(minnum) or value < originals[0]:
        return HypersplitResult(value, ZERO, ZERO, ZERO)

    splitter = _Splitter(base, maxes, originals, mantissa_rounding, multipliers)

    pentation = 0
    for _ in range(PENTATION_STEP_CAP):
        if value < splitter.tetration_limit(pentation == 0):
            break
        value = value.slog(base)
        pentation += 1
    else:
        logger.debug("hypersplit: pentation step cap reached")

    mantissa, exponent, tetration = splitter.descend(value)
    for _ in range(MAX_ROLLOVERS):
        if tetration <= splitter.tetration_cap(pentation == 0).to_float():
            break
        rebuilt = base.iteratedexp(tetration, mantissa.mul(base.pow(exponent)))
        mantissa, exponent, tetration = splitter.descend(rebuilt.slog(base))
        pentation += 1

    return HypersplitResult(
        mantissa,
        exponent.mul(multipliers[0]),
        Decimal(tetration).mul(multipliers[1]),
        Decimal(pentation).mul(multipliers[2]),
    )


def hypercombine(
    result: HypersplitResult,
    base: DecimalSource = 10,
    exp_multipliers: Union[DecimalSource, Sequence[DecimalSource]] = (1, 1, 1),
) -> Decimal:
    """
    Обратная операция к hypersplit.

    mantissa * base^exponent, затем tetration экспонент, затем pentation
    тетраций (natural = показываемое / multiplier).
    """
    base = to_decimal(base)
    multipliers = _triple(exp_multipliers, (1, 1, 1))
    exponent = result.exponent.div(multipliers[0])
    tetration = result.tetration.div(multipliers[1]).round().to_float()
    pentation = int(result.pentation.div(multipliers[2]).round().to_float())

    value = result.mantissa.mul(base.pow(exponent))
    value = base.iteratedexp(tetration, value)
    for _ in range(pentation):
        value = base.tetrate(value.to_float())
    return value


# =============================================================================
# SUPER-ROOT
# =============================================================================

# Шагов бисекции в linear_sroot
SROOT_BISECTION_STEPS: Final[int] = 200


def linear_sroot(value: DecimalSource, degree: float) -> Decimal:
    """
    Super-root: x такое, что x^^degree == value (бисекция по x).

    Ищется x ∈ [1, value]; для value <= 1 или degree <= 1 возвращается
    value.
    """
    value = to_decimal(value)
    if value <= 1 or degree <= 1:
        return value
    low = ONE
    high = value.max(Decimal(CONVERGENT_TETRATION_BASE + 1))
    for _ in range(SROOT_BISECTION_STEPS):
        if high.eq_tolerance(low, 1e-12):
            break
        # Геометрическая середина, пока интервал широк
        middle = low.mul(high).sqrt() if high.div(low) > 16 else low.add(high).div(2)
        if middle.tetrate(degree) < value:
            low = middle
        else:
            high = middle
    return low.add(high).div(2)
