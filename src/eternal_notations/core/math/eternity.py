"""
Eternity — Layered Arbitrary-Magnitude Decimal

Числовой тип для значений далеко за пределами float: от 1e308 до башен
степеней (tetration scale) и обратно к 10^-(10^...).

Представление: тройка (sign, layer, mag).
- layer == 0: значение = sign * mag (обычный float)
- layer >= 1: значение = sign * 10^(sign(mag) * D(layer - 1, |mag|)),
  то есть mag "поднят" через layer экспонент; отрицательный mag на слое >= 1
  означает обратную сторону (очень маленькие числа)

Нормализация держит mag в пределах:
- layer 0: mag < EXP_LIMIT (9e15)
- layer >= 1: |mag| >= LAYER_DOWN (log10(9e15))

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Decimal immutable: все операции возвращают новый экземпляр
2. NaN распространяется через любую арифметику
3. Переполнение float никогда не выбрасывает исключение (→ следующий layer
   или Infinity)
4. Тетрация / slog / iteratedlog ограничены по количеству шагов
   (TETRATION_STEP_CAP), работают за ограниченное время для любых входов

Дробные высоты тетрации используют линейное приближение:
    b^^x = b^x для x ∈ [0, 1], далее b^(b^^(x - 1))
"""

import logging
import math
from typing import Final, Union

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

# Выше этого mag на layer 0 значение переходит на layer 1
EXP_LIMIT: Final[float] = 9e15

# Ниже этого |mag| на layer >= 1 значение спускается на слой ниже
LAYER_DOWN: Final[float] = math.log10(9e15)

# Ниже этого mag на layer 0 значение уходит на layer 1 с отрицательным mag
FIRST_NEG_LAYER: Final[float] = 1 / 9e15

# Разница порядков, после которой меньшее слагаемое не влияет на сумму
MAX_SIGNIFICANT_DIGITS: Final[int] = 17

# Максимум layer, который str() пишет явными "e" подряд
MAX_ES_IN_A_ROW: Final[int] = 5

# Верхняя граница шагов для tetrate / iteratedlog / slog
TETRATION_STEP_CAP: Final[int] = 10000

# Максимум итераций внутреннего цикла slog
SLOG_STEP_CAP: Final[int] = 100

# e^(1/e): основания не выше этого дают сходящуюся тетрацию
CONVERGENT_TETRATION_BASE: Final[float] = 1.44466786100976613366

LOG10_LN10: Final[float] = math.log10(math.log(10))

DecimalSource = Union["Decimal", int, float, str]


# =============================================================================
# FLOAT HELPERS
# =============================================================================


def _log10(x: float) -> float:
    """log10 без исключений: log10(0) = -inf, отрицательные → NaN."""
    if x != x or x < 0:
        return math.nan
    if x == 0:
        return -math.inf
    if x == math.inf:
        return math.inf
    return math.log10(x)


def _pow10(x: float) -> float:
    """10^x без OverflowError (переполнение → inf)."""
    try:
        return 10.0**x
    except OverflowError:
        return math.inf


def _sign_of(x: float) -> int:
    return -1 if x < 0 else 1


def _normalize(sign: float, layer: float, mag: float) -> tuple:
    """Приводит тройку к каноническому виду (см. докстринг модуля)."""
    if sign != sign or layer != layer or mag != mag:
        return (0, 0, math.nan)
    if sign == 0 or (mag == 0 and layer == 0) or (
        mag == -math.inf and layer > 0 and layer != math.inf
    ):
        return (0, 0, 0.0)
    sign = int(sign)
    if layer == 0 and mag < 0:
        mag = -mag
        sign = -sign
    if mag in (math.inf, -math.inf) or layer == math.inf:
        return (sign, math.inf, math.inf)
    layer = int(layer)
    mag = float(mag)
    if layer == 0 and mag < FIRST_NEG_LAYER:
        return (sign, 1, math.log10(mag))

    absmag = abs(mag)
    signmag = _sign_of(mag)
    if absmag >= EXP_LIMIT:
        return (sign, layer + 1, signmag * math.log10(absmag))

    while absmag < LAYER_DOWN and layer > 0:
        layer -= 1
        if layer == 0:
            mag = 10.0**mag
        else:
            mag = signmag * 10.0**absmag
            absmag = abs(mag)
            signmag = _sign_of(mag)

    if layer == 0:
        if mag < 0:
            mag = -mag
            sign = -sign
        elif mag == 0:
            return (0, 0, 0.0)
    return (sign, layer, mag)


def _int_components(value: int) -> tuple:
    if value == 0:
        return (0, 0, 0.0)
    sign = -1 if value < 0 else 1
    value = abs(value)
    if value < 2**1023:
        return _normalize(sign, 0, float(value))
    digits = str(value)
    leading = float(digits[:MAX_SIGNIFICANT_DIGITS])
    return _normalize(sign, 1, (len(digits) - MAX_SIGNIFICANT_DIGITS) + math.log10(leading))


def _float_to_str(value: float) -> str:
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


# =============================================================================
# DECIMAL
# =============================================================================


class Decimal:
    """
    Immutable число произвольной величины.

    Конструктор принимает int, float, str или другой Decimal. Строки
    поддерживают формы "123.4", "1.5e300", "1e1e100", "ee5", "3F4" (3
    поднятое через 4 экспоненты), "F10" (10^^10), "NaN", "Infinity".

    Examples:
        >>> Decimal("1e400") > Decimal(1e308)
        True
        >>> str(Decimal(10).tetrate(3))
        '1e10000000000'
    """

    __slots__ = ("_sign", "_layer", "_mag")

    def __init__(self, value: DecimalSource = 0) -> None:
        if isinstance(value, Decimal):
            components = (value._sign, value._layer, value._mag)
        elif isinstance(value, bool):
            components = _int_components(int(value))
        elif isinstance(value, int):
            components = _int_components(value)
        elif isinstance(value, float):
            if value != value:
                components = (0, 0, math.nan)
            else:
                components = _normalize(_sign_of(value) if value else 0, 0, abs(value))
        elif isinstance(value, str):
            parsed = _parse_string(value)
            components = (parsed._sign, parsed._layer, parsed._mag)
        else:
            raise TypeError(f"Cannot convert {type(value).__name__} to Decimal")
        self._sign, self._layer, self._mag = components

    @classmethod
    def from_components(cls, sign: float, layer: float, mag: float) -> "Decimal":
        """Строит Decimal из (sign, layer, mag) с нормализацией."""
        result = cls.__new__(cls)
        result._sign, result._layer, result._mag = _normalize(sign, layer, mag)
        return result

    # -------------------------------------------------------------------------
    # Components & predicates
    # -------------------------------------------------------------------------

    @property
    def sign(self) -> int:
        return self._sign

    @property
    def layer(self):
        return self._layer

    @property
    def mag(self) -> float:
        return self._mag

    def is_nan(self) -> bool:
        return self._mag != self._mag

    def is_finite(self) -> bool:
        return not self.is_nan() and self._layer != math.inf

    def is_infinite(self) -> bool:
        return self._layer == math.inf

    def to_float(self) -> float:
        """Конверсия во float (inf при переполнении, 0.0 при underflow)."""
        if self.is_nan():
            return math.nan
        if self._layer == math.inf:
            return self._sign * math.inf
        if self._layer == 0:
            return self._sign * self._mag
        if self._layer == 1:
            return self._sign * _pow10(self._mag)
        if self._mag > 0:
            return self._sign * math.inf
        return 0.0

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def cmpabs(self, other: DecimalSource) -> int:
        """Сравнение |self| и |other|: -1, 0 или 1."""
        other = to_decimal(other)
        layer_a = self._layer if self._mag > 0 else -self._layer
        layer_b = other._layer if other._mag > 0 else -other._layer
        if layer_a > layer_b:
            return 1
        if layer_a < layer_b:
            return -1
        if self._mag > other._mag:
            return 1
        if self._mag < other._mag:
            return -1
        return 0

    def cmp(self, other: DecimalSource) -> int:
        other = to_decimal(other)
        if self._sign > other._sign:
            return 1
        if self._sign < other._sign:
            return -1
        return self._sign * self.cmpabs(other)

    def _ordered(self, other: object):
        try:
            other = to_decimal(other)  # type: ignore[arg-type]
        except TypeError:
            return None
        if self.is_nan() or other.is_nan():
            return None
        return self.cmp(other)

    def __eq__(self, other: object) -> bool:
        result = self._ordered(other)
        return result == 0

    def __ne__(self, other: object) -> bool:
        result = self._ordered(other)
        return result is not None and result != 0

    def __lt__(self, other: DecimalSource) -> bool:
        result = self._ordered(other)
        return result is not None and result < 0

    def __le__(self, other: DecimalSource) -> bool:
        result = self._ordered(other)
        return result is not None and result <= 0

    def __gt__(self, other: DecimalSource) -> bool:
        result = self._ordered(other)
        return result is not None and result > 0

    def __ge__(self, other: DecimalSource) -> bool:
        result = self._ordered(other)
        return result is not None and result >= 0

    def __hash__(self) -> int:
        return hash((self._sign, self._layer, self._mag))

    def __bool__(self) -> bool:
        return self._sign != 0

    def eq_tolerance(self, other: DecimalSource, tolerance: float = 1e-7) -> bool:
        """
        Приближённое равенство с относительной погрешностью по mag.

        Сравнивает и соседние слои: mag меньшего слоя переводится через log10.
        """
        other = to_decimal(other)
        if self.is_nan() or other.is_nan():
            return False
        if self._sign != other._sign:
            return False
        if self.is_infinite() or other.is_infinite():
            return self.is_infinite() and other.is_infinite()
        if abs(self._layer - other._layer) > 1:
            return False
        mag_a = self._mag
        mag_b = other._mag
        if self._layer > other._layer:
            mag_b = _sign_of(mag_b) * _log10(abs(mag_b))
        if self._layer < other._layer:
            mag_a = _sign_of(mag_a) * _log10(abs(mag_a))
        return abs(mag_a - mag_b) <= tolerance * max(abs(mag_a), abs(mag_b))

    # -------------------------------------------------------------------------
    # Sign operations
    # -------------------------------------------------------------------------

    def neg(self) -> "Decimal":
        if self.is_nan():
            return NAN
        return Decimal.from_components(-self._sign, self._layer, self._mag)

    def abs(self) -> "Decimal":
        if self.is_nan():
            return NAN
        return Decimal.from_components(1 if self._sign else 0, self._layer, self._mag)

    def recip(self) -> "Decimal":
        if self.is_nan() or self._sign == 0:
            return NAN
        if self.is_infinite():
            return ZERO
        if self._layer == 0:
            return Decimal.from_components(self._sign, 0, 1 / self._mag)
        return Decimal.from_components(self._sign, self._layer, -self._mag)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def add(self, other: DecimalSource) -> "Decimal":
        b = to_decimal(other)
        a = self
        if a.is_nan() or b.is_nan():
            return NAN
        if a.is_infinite() or b.is_infinite():
            if a.is_infinite() and b.is_infinite() and a._sign != b._sign:
                return NAN
            return a if a.is_infinite() else b
        if a._sign == 0:
            return b
        if b._sign == 0:
            return a
        if a._sign == -b._sign and a._layer == b._layer and a._mag == b._mag:
            return ZERO
        if a._layer >= 2 or b._layer >= 2:
            return a if a.cmpabs(b) >= 0 else b

        if a.cmpabs(b) < 0:
            a, b = b, a
        if a._layer == 0 and b._layer == 0:
            total = a._sign * a._mag + b._sign * b._mag
            if math.isfinite(total):
                return Decimal(total)
            return Decimal.from_components(a._sign, 1, math.log10(a._mag) + math.log10(1 + b._mag / a._mag))

        layer_a = a._layer * _sign_of(a._mag)
        layer_b = b._layer * _sign_of(b._mag)
        if layer_a - layer_b >= 2:
            return a
        if layer_a == 0 and layer_b == -1:
            if abs(b._mag - math.log10(a._mag)) > MAX_SIGNIFICANT_DIGITS:
                return a
            magdiff = _pow10(math.log10(a._mag) - b._mag)
            mantissa = b._sign + a._sign * magdiff
            return Decimal.from_components(
                _sign_of(mantissa), 1, b._mag + _log10(abs(mantissa))
            )
        if layer_a == 1 and layer_b == 0:
            if abs(a._mag - math.log10(b._mag)) > MAX_SIGNIFICANT_DIGITS:
                return a
            magdiff = _pow10(a._mag - math.log10(b._mag))
            mantissa = b._sign + a._sign * magdiff
            return Decimal.from_components(
                _sign_of(mantissa), 1, math.log10(b._mag) + _log10(abs(mantissa))
            )
        if abs(a._mag - b._mag) > MAX_SIGNIFICANT_DIGITS:
            return a
        magdiff = _pow10(a._mag - b._mag)
        mantissa = b._sign + a._sign * magdiff
        return Decimal.from_components(_sign_of(mantissa), 1, b._mag + _log10(abs(mantissa)))

    def sub(self, other: DecimalSource) -> "Decimal":
        return self.add(to_decimal(other).neg())

    def mul(self, other: DecimalSource) -> "Decimal":
        b = to_decimal(other)
        a = self
        if a.is_nan() or b.is_nan():
            return NAN
        if a.is_infinite() or b.is_infinite():
            if a._sign == 0 or b._sign == 0:
                return NAN
            return Decimal.from_components(a._sign * b._sign, math.inf, math.inf)
        if a._sign == 0 or b._sign == 0:
            return ZERO
        if a._layer == b._layer and a._mag == -b._mag:
            return Decimal.from_components(a._sign * b._sign, 0, 1)

        if a._layer < b._layer or (a._layer == b._layer and abs(a._mag) < abs(b._mag)):
            a, b = b, a
        sign = a._sign * b._sign
        if a._layer == 0 and b._layer == 0:
            product = a._mag * b._mag
            if math.isfinite(product) and product > 0:
                return Decimal.from_components(sign, 0, product)
            return Decimal.from_components(sign, 1, math.log10(a._mag) + math.log10(b._mag))
        if a._layer >= 3 or a._layer - b._layer >= 2:
            return Decimal.from_components(sign, a._layer, a._mag)
        if a._layer == 1 and b._layer == 0:
            return Decimal.from_components(sign, 1, a._mag + math.log10(b._mag))
        if a._layer == 1 and b._layer == 1:
            return Decimal.from_components(sign, 1, a._mag + b._mag)
        # a._layer == 2, b._layer in (1, 2)
        newmag = Decimal.from_components(_sign_of(a._mag), a._layer - 1, abs(a._mag)).add(
            Decimal.from_components(_sign_of(b._mag), b._layer - 1, abs(b._mag))
        )
        return Decimal.from_components(sign, newmag._layer + 1, newmag._sign * newmag._mag)

    def div(self, other: DecimalSource) -> "Decimal":
        b = to_decimal(other)
        if self._layer == 0 and b._layer == 0 and b._sign != 0 and not self.is_nan():
            quotient = self._mag / b._mag
            if math.isfinite(quotient) and quotient > 0:
                return Decimal.from_components(self._sign * b._sign, 0, quotient)
        return self.mul(b.recip())

    def sqr(self) -> "Decimal":
        return self.mul(self)

    # -------------------------------------------------------------------------
    # Powers & logarithms
    # -------------------------------------------------------------------------

    def abs_log10(self) -> "Decimal":
        if self.is_nan():
            return NAN
        if self._sign == 0:
            return NEG_INF
        if self.is_infinite():
            return INF
        if self._layer > 0:
            return Decimal.from_components(_sign_of(self._mag), self._layer - 1, abs(self._mag))
        return Decimal.from_components(1, 0, math.log10(self._mag))

    def log10(self) -> "Decimal":
        if self._sign < 0:
            return NAN
        return self.abs_log10()

    def log(self, base: DecimalSource) -> "Decimal":
        base = to_decimal(base)
        if self.is_nan() or base.is_nan() or self._sign < 0 or base._sign <= 0:
            return NAN
        if base._layer == 0 and base._mag == 1:
            return NAN
        if self._sign == 0:
            return NEG_INF if base > 1 else INF
        if self._layer == 0 and base._layer == 0:
            return Decimal(math.log(self._mag) / math.log(base._mag))
        return self.log10().div(base.log10())

    def ln(self) -> "Decimal":
        if self._sign < 0 or self.is_nan():
            return NAN
        if self._sign == 0:
            return NEG_INF
        if self.is_infinite():
            return INF
        if self._layer == 0:
            return Decimal(math.log(self._mag))
        if self._layer == 1:
            return Decimal.from_components(_sign_of(self._mag), 0, abs(self._mag) * math.log(10))
        if self._layer == 2:
            return Decimal.from_components(_sign_of(self._mag), 1, abs(self._mag) + LOG10_LN10)
        return Decimal.from_components(_sign_of(self._mag), self._layer - 1, abs(self._mag))

    def pow10(self) -> "Decimal":
        """10^self."""
        if self.is_nan():
            return NAN
        if self.is_infinite():
            return INF if self._sign > 0 else ZERO
        if self._layer == 0:
            exponent = self._sign * self._mag
            newmag = _pow10(exponent)
            if math.isfinite(newmag) and newmag > 0:
                return Decimal.from_components(1, 0, newmag)
            return Decimal.from_components(1, 1, exponent)
        if self._mag >= 0:
            return Decimal.from_components(1, self._layer + 1, self._sign * self._mag)
        # 10^(крошечное) ~ 1
        return ONE

    def pow(self, other: DecimalSource) -> "Decimal":
        b = to_decimal(other)
        a = self
        if a.is_nan() or b.is_nan():
            return NAN
        if a._sign == 0:
            if b._sign == 0:
                return ONE
            return ZERO if b._sign > 0 else INF
        if a._sign == 1 and a._layer == 0 and a._mag == 1:
            return a
        if b._sign == 0:
            return ONE
        if b._sign == 1 and b._layer == 0 and b._mag == 1:
            return a

        b_float = b.to_float()
        b_is_integer = math.isfinite(b_float) and b_float == math.floor(b_float)
        if a._layer == 0 and b._layer == 0 and (a._sign > 0 or b_is_integer):
            try:
                result = (a._sign * a._mag) ** (b._sign * b._mag)
            except (OverflowError, ZeroDivisionError):
                result = None
            if isinstance(result, float) and math.isfinite(result) and result != 0:
                return Decimal(result)

        result = a.abs_log10().mul(b).pow10()
        if a._sign == -1:
            if abs(b_float % 2) == 1:
                return result.neg()
            if abs(b_float % 2) == 0:
                return result
            return NAN
        return result

    def root(self, degree: DecimalSource) -> "Decimal":
        return self.pow(to_decimal(degree).recip())

    def sqrt(self) -> "Decimal":
        if self._sign < 0 or self.is_nan():
            return NAN
        if self._layer == 0:
            return Decimal(math.sqrt(self._mag))
        if self._layer == 1:
            return Decimal.from_components(1, 1, self._mag / 2)
        return self.pow(0.5)

    def exp(self) -> "Decimal":
        if self.is_nan():
            return NAN
        if self.is_infinite():
            return INF if self._sign > 0 else ZERO
        if self._mag < 0:
            return ONE
        if self._layer == 0 and self._mag <= 709.7:
            return Decimal(math.exp(self._sign * self._mag))
        if self._layer == 0:
            return Decimal.from_components(1, 1, self._sign * math.log10(math.e) * self._mag)
        if self._layer == 1:
            return Decimal.from_components(
                1, 2, self._sign * (math.log10(0.4342944819032518) + self._mag)
            )
        return Decimal.from_components(1, self._layer + 1, self._sign * self._mag)

    # -------------------------------------------------------------------------
    # Rounding
    # -------------------------------------------------------------------------

    def floor(self) -> "Decimal":
        if not self.is_finite():
            return self
        if self._mag < 0:
            return NEG_ONE if self._sign == -1 else ZERO
        if self._sign == -1:
            return self.neg().ceil().neg()
        if self._layer == 0:
            return Decimal(float(math.floor(self._mag)))
        return self

    def ceil(self) -> "Decimal":
        if not self.is_finite():
            return self
        if self._mag < 0:
            return ONE if self._sign == 1 else ZERO
        if self._sign == -1:
            return self.neg().floor().neg()
        if self._layer == 0:
            return Decimal(float(math.ceil(self._mag)))
        return self

    def round(self) -> "Decimal":
        """Округление половин от нуля."""
        if not self.is_finite():
            return self
        if self._mag < 0:
            return ZERO
        if self._layer == 0:
            return Decimal.from_components(self._sign, 0, math.floor(self._mag + 0.5))
        return self

    def trunc(self) -> "Decimal":
        if not self.is_finite():
            return self
        if self._mag < 0:
            return ZERO
        if self._layer == 0:
            return Decimal.from_components(self._sign, 0, math.trunc(self._mag))
        return self

    def mod(self, other: DecimalSource) -> "Decimal":
        """Остаток со знаком делимого (как math.fmod)."""
        divisor = to_decimal(other).abs()
        if divisor._sign == 0:
            return ZERO
        a = self.to_float()
        b = divisor.to_float()
        if math.isfinite(a) and math.isfinite(b) and a != 0 and b != 0:
            return Decimal(math.fmod(a, b))
        if self.sub(divisor) == self:
            return ZERO
        if divisor.sub(self) == divisor:
            return self
        if self._sign == -1:
            return self.abs().mod(divisor).neg()
        return self.sub(self.div(divisor).floor().mul(divisor))

    def max(self, other: DecimalSource) -> "Decimal":
        other = to_decimal(other)
        return other if self < other else self

    def min(self, other: DecimalSource) -> "Decimal":
        other = to_decimal(other)
        return other if self > other else self

    # -------------------------------------------------------------------------
    # Hyperoperators (linear approximation)
    # -------------------------------------------------------------------------

    def tetrate(self, height: float = 2, payload: DecimalSource = 1) -> "Decimal":
        """
        self^^height с начальным значением payload.

        Для целых height: payload поднимается в степень self height раз.
        Дробная часть высоты добавляется к payload через layeradd (линейное
        приближение). Отрицательная высота эквивалентна iteratedlog.

        Args:
            height: Высота башни (float, допускается inf)
            payload: Значение на вершине башни (default: 1)

        Returns:
            Decimal; Infinity при переполнении
        """
        payload = to_decimal(payload)
        if height == 1:
            return self.pow(payload)
        if height == 0:
            return payload
        if self == ONE:
            return ONE
        if self == NEG_ONE:
            return self.pow(payload)
        if height != height:
            return NAN
        if height == math.inf:
            return self._infinite_tower()
        if self._sign == 0:
            parity = abs((height + 1) % 2)
            if parity > 1:
                parity = 2 - parity
            return Decimal(parity)
        if height < 0:
            return payload.iteratedlog(self, -height)

        whole = math.trunc(height)
        fraction = height - whole
        if fraction != 0:
            if payload == ONE:
                payload = self.pow(fraction)
            else:
                payload = payload.layeradd(fraction, self)

        for step in range(whole):
            payload = self.pow(payload)
            if not payload.is_finite():
                return payload
            if payload._layer - self._layer > 3:
                return Decimal.from_components(
                    payload._sign, payload._layer + (whole - step - 1), payload._mag
                )
            if step >= TETRATION_STEP_CAP:
                logger.debug("tetrate: step cap reached at height %s", height)
                return payload
        return payload

    def iteratedexp(self, height: float = 2, payload: DecimalSource = 1) -> "Decimal":
        """Синоним tetrate с явным payload: self^(self^(...^payload))."""
        return self.tetrate(height, payload)

    def _infinite_tower(self) -> "Decimal":
        value = self.to_float()
        if value > CONVERGENT_TETRATION_BASE:
            return INF
        if value <= 1:
            return NAN
        current = ONE
        for _ in range(TETRATION_STEP_CAP):
            following = self.pow(current)
            if following.eq_tolerance(current, 1e-15):
                return following
            current = following
        return current

    def iteratedlog(self, base: DecimalSource = 10, times: float = 1) -> "Decimal":
        """
        log_base, применённый times раз (дробная часть через layeradd).
        """
        base = to_decimal(base)
        if times < 0:
            return base.tetrate(-times, self)
        if not self.is_finite():
            return self
        whole = math.trunc(times)
        fraction = times - whole
        result = self
        if result._sign > 0 and result._mag > 0 and result._layer - base._layer > 3:
            layerloss = min(whole, result._layer - base._layer - 3)
            whole -= layerloss
            result = Decimal.from_components(result._sign, result._layer - layerloss, result._mag)
        for step in range(whole):
            result = result.log(base)
            if not result.is_finite():
                return result
            if step >= TETRATION_STEP_CAP:
                logger.debug("iteratedlog: step cap reached after %d logs", step)
                return result
        if 0 < fraction < 1:
            result = result.layeradd(-fraction, base)
        return result

    def slog(self, base: DecimalSource = 10) -> "Decimal":
        """
        Super-logarithm: высота h такая, что base^^h == self.

        Для x ∈ (0, 1] slog(x) = x - 1, slog(0) = -1; отрицательные значения
        идут через base^x.
        """
        base = to_decimal(base)
        if self.is_nan() or base.is_nan() or base <= 0 or base == ONE:
            return NAN
        if base < 1:
            if self == ONE:
                return ZERO
            if self._sign == 0:
                return NEG_ONE
            return NAN
        if self.is_infinite():
            return INF if self._sign > 0 else NEG_ONE
        if self._mag < 0 or self._sign == 0:
            return NEG_ONE

        result = 0
        copy = self
        if copy._sign > 0 and copy._layer - base._layer > 3:
            layerloss = copy._layer - base._layer - 3
            result += layerloss
            copy = Decimal.from_components(copy._sign, copy._layer - layerloss, copy._mag)
        for _ in range(SLOG_STEP_CAP):
            if copy._sign < 0:
                copy = base.pow(copy)
                result -= 1
            elif copy <= 1:
                return Decimal(float(result) + copy.to_float() - 1)
            else:
                result += 1
                copy = copy.log(base)
        return Decimal(float(result))

    def layeradd(self, diff: float, base: DecimalSource = 10) -> "Decimal":
        """Сдвигает значение на diff по шкале slog_base."""
        base = to_decimal(base)
        destination = self.slog(base).to_float() + diff
        if destination != destination or math.isinf(destination):
            return NAN if destination != destination else (INF if destination > 0 else NEG_ONE)
        if destination >= 0:
            return base.tetrate(destination)
        if destination >= -1:
            return base.tetrate(destination + 1).log(base)
        return base.tetrate(destination + 2).log(base).log(base)

    # -------------------------------------------------------------------------
    # Python protocol
    # -------------------------------------------------------------------------

    def __add__(self, other: DecimalSource) -> "Decimal":
        return self.add(other)

    def __radd__(self, other: DecimalSource) -> "Decimal":
        return to_decimal(other).add(self)

    def __sub__(self, other: DecimalSource) -> "Decimal":
        return self.sub(other)

    def __rsub__(self, other: DecimalSource) -> "Decimal":
        return to_decimal(other).sub(self)

    def __mul__(self, other: DecimalSource) -> "Decimal":
        return self.mul(other)

    def __rmul__(self, other: DecimalSource) -> "Decimal":
        return to_decimal(other).mul(self)

    def __truediv__(self, other: DecimalSource) -> "Decimal":
        return self.div(other)

    def __rtruediv__(self, other: DecimalSource) -> "Decimal":
        return to_decimal(other).div(self)

    def __pow__(self, other: DecimalSource) -> "Decimal":
        return self.pow(other)

    def __rpow__(self, other: DecimalSource) -> "Decimal":
        return to_decimal(other).pow(self)

    def __neg__(self) -> "Decimal":
        return self.neg()

    def __abs__(self) -> "Decimal":
        return self.abs()

    def __float__(self) -> float:
        return self.to_float()

    def __str__(self) -> str:
        if self.is_nan():
            return "NaN"
        if self.is_infinite():
            return "Infinity" if self._sign > 0 else "-Infinity"
        prefix = "-" if self._sign < 0 else ""
        if self._layer == 0:
            if 1e-7 < self._mag < 1e21 or self._mag == 0:
                return prefix + _float_to_str(self._mag)
            exponent = math.floor(math.log10(self._mag))
            return f"{prefix}{_float_to_str(self._mag / 10.0**exponent)}e{exponent}"
        if self._layer == 1:
            exponent = math.floor(self._mag)
            mantissa = 10.0 ** (self._mag - exponent)
            return f"{prefix}{_float_to_str(mantissa)}e{exponent}"
        if self._layer <= MAX_ES_IN_A_ROW:
            return prefix + "e" * self._layer + _float_to_str(self._mag)
        return f"{prefix}(e^{self._layer}){_float_to_str(self._mag)}"

    def __repr__(self) -> str:
        return f"Decimal('{self}')"


# =============================================================================
# PARSING & COERCION
# =============================================================================


def _parse_string(text: str) -> Decimal:
    """Разбор строкового представления (см. докстринг Decimal)."""
    text = text.strip()
    lowered = text.lower()
    if lowered in ("nan", ""):
        return NAN
    if lowered in ("infinity", "inf", "+infinity"):
        return INF
    if lowered in ("-infinity", "-inf"):
        return NEG_INF
    if text.startswith("-"):
        return _parse_string(text[1:]).neg()
    if text.startswith("+"):
        return _parse_string(text[1:])

    if "F" in text:
        payload_text, _, height_text = text.partition("F")
        payload = _parse_string(payload_text) if payload_text else ONE
        return TEN.iteratedexp(float(height_text), payload)

    if lowered.startswith("e"):
        count = len(lowered) - len(lowered.lstrip("e"))
        result = _parse_string(text[count:])
        for _ in range(count):
            result = result.pow10()
        return result

    if "e" in lowered:
        index = lowered.index("e")
        mantissa = float(text[:index])
        exponent = _parse_string(text[index + 1 :])
        return exponent.pow10().mul(mantissa)

    if "." not in text and text.isdigit():
        return Decimal(int(text))
    return Decimal(float(text))


def to_decimal(value: DecimalSource) -> Decimal:
    """Приводит value к Decimal (Decimal возвращается как есть)."""
    if isinstance(value, Decimal):
        return value
    return Decimal(value)


# =============================================================================
# SENTINELS
# =============================================================================

ZERO: Final[Decimal] = Decimal.from_components(0, 0, 0)
ONE: Final[Decimal] = Decimal.from_components(1, 0, 1)
NEG_ONE: Final[Decimal] = Decimal.from_components(-1, 0, 1)
TWO: Final[Decimal] = Decimal.from_components(1, 0, 2)
TEN: Final[Decimal] = Decimal.from_components(1, 0, 10)
NAN: Final[Decimal] = Decimal.from_components(math.nan, math.nan, math.nan)
INF: Final[Decimal] = Decimal.from_components(1, math.inf, math.inf)
NEG_INF: Final[Decimal] = Decimal.from_components(-1, math.inf, math.inf)

Decimal.ZERO = ZERO  # type: ignore[attr-defined]
Decimal.ONE = ONE  # type: ignore[attr-defined]
Decimal.NEG_ONE = NEG_ONE  # type: ignore[attr-defined]
Decimal.TWO = TWO  # type: ignore[attr-defined]
Decimal.TEN = TEN  # type: ignore[attr-defined]
Decimal.NAN = NAN  # type: ignore[attr-defined]
Decimal.INF = INF  # type: ignore[attr-defined]
Decimal.NEG_INF = NEG_INF  # type: ignore[attr-defined]
