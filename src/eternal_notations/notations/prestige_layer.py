"""
PrestigeLayerNotation — Recursive Layer / Hyperlayer Encoding

Бесконечная лестница валют: слой L+1 стоит requirement единиц слоя L,
количество на слое L - корень степени root_at_layer(L) от базового значения.

    divisor_at_layer(L) = значение, с которого начинается слой L
    layer_and_currency(v) = (amount ∈ [1, requirement), L)

Ramping (layer, root_mult, divisor_exp) с указанного слоя умножает
эффективный корень и возводит требование в степень, накопительно.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Корень >= 1 на каждом чекпоинте, делитель > 1
2. Корень == 1 запрещён в recursive режиме
3. get_layer монотонно не убывает по value
4. Рекурсивный вывод ограничен max_nesting и явным счётчиком глубины
5. Все поиски и циклы ограничены (*_CAP константы)
"""

import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Final, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from eternal_notations.core.math.eternity import (
    NEG_ONE,
    ONE,
    TEN,
    ZERO,
    Decimal,
    DecimalSource,
    to_decimal,
)
from eternal_notations.notations.base import ConfigurationError, Notation, coerce_decimal
from eternal_notations.notations.default import DefaultNotation

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

# Максимум множителей в divisor_at_layer до аппроксимации остатка
DIVISOR_STEP_CAP: Final[int] = 1000

# Максимум шагов бисекции / удвоения при поиске слоя
LAYER_SEARCH_CAP: Final[int] = 200

# Относительная точность непрерывного поиска слоя
LAYER_SEARCH_TOLERANCE: Final[float] = 1e-15

# Максимум коррекций при округлении слоя
LAYER_ROUNDING_CAP: Final[int] = 100

# Максимум итераций в get_hyperlayer / iterated_layer / поиске safe point
HYPERLAYER_STEP_CAP: Final[int] = 1000

# Максимум вложенных вызовов форматирования
MAX_FORMAT_DEPTH: Final[int] = 16

Ramping = Tuple[Decimal, Decimal, Decimal]
Pair = Tuple[str, str]


# =============================================================================
# LADDER
# =============================================================================


@dataclass(frozen=True)
class RampingCheckpoint:
    """Состояние лестницы на первом слое ramping-интервала."""

    layer: Decimal
    single_root: Decimal
    single_divisor: Decimal
    cumulative_root: Decimal


def normalize_rampings(rampings) -> Tuple[Ramping, ...]:
    """
    Сортирует по слою, оставляет последний из дублей, добавляет (0, 1, 1).
    """
    by_layer = {}
    for entry in rampings:
        layer, root_mult, divisor_exp = (coerce_decimal(x) for x in entry)
        by_layer[(layer.sign, layer.layer, layer.mag)] = (layer, root_mult, divisor_exp)
    ordered = sorted(by_layer.values(), key=lambda r: r[0].to_float())
    if not ordered or ordered[0][0] != 0:
        ordered.insert(0, (ZERO, ONE, ONE))
    return tuple(ordered)


class PrestigeLadder:
    """
    Пороговые значения слоёв для (root, requirement, rampings).

    Неизменяемый объект: строится заново при каждом изменении параметров.

    Raises:
        ConfigurationError: Корень < 1, корень == 1 при recursive, делитель <= 1
    """

    def __init__(self, root: Decimal, requirement: Decimal, rampings, recursive: bool = False) -> None:
        self.root = root
        self.requirement = requirement
        self.rampings = normalize_rampings(rampings)
        self.checkpoints = self._build_checkpoints(recursive)

    def _check(self, single_root: Decimal, single_divisor: Decimal, recursive: bool) -> None:
        if single_root < 1:
            raise ConfigurationError("root goes below 1 at some layer")
        if single_root == 1 and recursive:
            raise ConfigurationError("recursive mode does not support a root equal to 1")
        if single_divisor <= 1:
            raise ConfigurationError("requirement must stay above 1 at every layer")

    def _build_checkpoints(self, recursive: bool) -> Tuple[RampingCheckpoint, ...]:
        single_root = self.root
        single_divisor = self.requirement
        self._check(single_root, single_divisor, recursive)
        checkpoints = [RampingCheckpoint(ZERO, single_root, single_divisor, ONE)]
        cumulative_root = ONE
        previous_layer = ZERO
        for index in range(len(self.rampings) - 1):
            _, root_mult, divisor_exp = self.rampings[index]
            next_layer = self.rampings[index + 1][0]
            distance = next_layer.sub(previous_layer)
            cumulative_root = cumulative_root.mul(single_root.pow(distance)).mul(
                root_mult.pow(distance.add(1).mul(distance).div(2))
            )
            single_divisor = single_divisor.pow(divisor_exp.pow(distance))
            single_root = single_root.mul(root_mult.pow(distance))
            self._check(single_root, single_divisor, recursive)
            checkpoints.append(RampingCheckpoint(next_layer, single_root, single_divisor, cumulative_root))
            previous_layer = next_layer
        return tuple(checkpoints)

    def _segment(self, layer: Decimal) -> int:
        index = 0
        while index < len(self.checkpoints) - 1 and self.checkpoints[index + 1].layer <= layer:
            index += 1
        return index

    # -------------------------------------------------------------------------
    # Thresholds
    # -------------------------------------------------------------------------

    def root_at_layer(self, layer: DecimalSource) -> Decimal:
        """Степень корня, дающая количество на слое layer."""
        layer = to_decimal(layer)
        if layer == 0:
            return ONE
        index = self._segment(layer)
        checkpoint = self.checkpoints[index]
        root_mult = self.rampings[index][1]
        distance = layer.sub(checkpoint.layer)
        return checkpoint.cumulative_root.mul(checkpoint.single_root.pow(distance)).mul(
            root_mult.pow(distance.add(1).mul(distance).div(2))
        )

    def outermost_divisor(self, layer: DecimalSource) -> Decimal:
        """Во сколько раз порог слоя layer больше порога слоя layer - 1."""
        layer = to_decimal(layer)
        if layer == 0:
            return ONE
        index = self._segment(layer)
        checkpoint = self.checkpoints[index]
        divisor_exp = self.rampings[index][2]
        divisor = checkpoint.single_divisor.pow(divisor_exp.pow(layer.sub(checkpoint.layer)))
        return divisor.pow(self.root_at_layer(layer.sub(1)))

    def divisor_at_layer(self, layer: DecimalSource) -> Decimal:
        """Наименьшее значение, достигающее слоя layer."""
        current = to_decimal(layer)
        divisor = ONE
        previous = ZERO
        steps = 0
        while previous != divisor and current > 0:
            if steps >= DIVISOR_STEP_CAP:
                logger.debug("divisor_at_layer: step cap reached at layer %s", layer)
                divisor = divisor.mul(self.outermost_divisor(current).pow(current.ceil()))
                break
            previous = divisor
            divisor = divisor.mul(self.outermost_divisor(current))
            current = current.sub(1)
            steps += 1
        return divisor

    # -------------------------------------------------------------------------
    # Layers
    # -------------------------------------------------------------------------

    def _bisect(self, value: Decimal, low: float, high: float, to_layer) -> Tuple[float, float]:
        # divisor_at_layer(to_layer(low)) <= value < divisor_at_layer(to_layer(high))
        for _ in range(LAYER_SEARCH_CAP):
            if high - low <= LAYER_SEARCH_TOLERANCE * max(1.0, abs(low)):
                break
            middle = (low + high) / 2
            if not low < middle < high:
                break
            if value >= self.divisor_at_layer(to_layer(middle)):
                low = middle
            else:
                high = middle
        return low, high

    def _estimate_layer(self, value: Decimal) -> Decimal:
        if value <= 1:
            return ZERO
        if value < self.divisor_at_layer(10):
            low, high = self._bisect(value, 0.0, 10.0, Decimal)
            return Decimal((low + high) / 2)

        # Поиск по slog слоя
        low, high = 1.0, 2.0
        for _ in range(LAYER_SEARCH_CAP):
            if value < self.divisor_at_layer(TEN.tetrate(high)):
                break
            low, high = high, high * 2
        low, high = self._bisect(value, low, high, TEN.tetrate)
        low_layer, high_layer = TEN.tetrate(low), TEN.tetrate(high)
        if high_layer.layer == 0:
            # Слой помещается во float: уточняем до целых
            low, high = self._bisect(value, low_layer.to_float(), high_layer.to_float(), Decimal)
            return Decimal((low + high) / 2)
        return TEN.tetrate((low + high) / 2)

    def get_layer(self, value: DecimalSource, rounded: bool = True) -> Decimal:
        """
        Слой, которого достигает value.

        rounded: целый (нижний) слой; иначе слой + логарифмическая
        интерполяция между порогами соседних слоёв.
        """
        value = to_decimal(value)
        if value <= 1:
            return ZERO
        layer = self._estimate_layer(value).round()
        if layer == layer.add(1):
            return layer
        for _ in range(LAYER_ROUNDING_CAP):
            if value < self.divisor_at_layer(layer.add(1)):
                break
            layer = layer.add(1)
        for _ in range(LAYER_ROUNDING_CAP):
            if layer <= 0 or value >= self.divisor_at_layer(layer):
                break
            layer = layer.sub(1)
        if rounded:
            return layer

        lower = self.divisor_at_layer(layer).log10()
        upper = self.divisor_at_layer(layer.add(1)).log10()
        span = upper.sub(lower)
        if span.sign <= 0 or not span.is_finite():
            return layer
        fraction = value.log10().sub(lower).div(span).max(ZERO).min(ONE)
        return layer.add(fraction)

    def layer_and_currency(self, value: DecimalSource) -> Tuple[Decimal, Decimal]:
        """(количество на слое, слой); 0 → (0, 0)."""
        value = to_decimal(value)
        if value.sign == 0:
            return ZERO, ZERO
        layer = self.get_layer(value)
        if layer == layer.add(1):
            return ONE, layer
        currency = value.div(self.divisor_at_layer(layer)).root(self.root_at_layer(layer))
        return currency, layer

    @cached_property
    def safe_point(self) -> Decimal:
        """
        Значение, выше которого get_layer(v) ≈ log10(log10(v)).

        Выше этой точки слои снимаются парами логарифмов.
        """
        point = Decimal("F10")
        for _ in range(HYPERLAYER_STEP_CAP):
            if self.get_layer(point).eq_tolerance(point.iteratedlog(10, 2)):
                return point
            point = self.divisor_at_layer(point)
        logger.debug("safe_point: not reached, using %s", point)
        return point

    def _safe_steps(self, value: Decimal) -> int:
        distance = value.slog(10).sub(self.safe_point.slog(10))
        return int(distance.div(2).add(1).floor().to_float())

    def iterated_layer(self, value: DecimalSource, iterations: int) -> Decimal:
        """get_layer (с округлением), применённый iterations раз."""
        value = to_decimal(value)
        done = 0
        for _ in range(HYPERLAYER_STEP_CAP):
            if done >= iterations or value < self.safe_point:
                break
            steps = max(1, min(self._safe_steps(value), iterations - done))
            value = value.iteratedlog(10, steps * 2)
            done += steps
        while done < iterations:
            value = self.get_layer(value)
            done += 1
            if value.sign == 0:
                break
        return value

    def get_hyperlayer(self, value: DecimalSource) -> Decimal:
        """
        Сколько раз нужно взять слой, чтобы value опустилось ниже 1 (минус 1),
        плюс непрерывный остаток.
        """
        value = to_decimal(value)
        result = NEG_ONE
        for _ in range(HYPERLAYER_STEP_CAP):
            if value < self.safe_point:
                break
            steps = max(1, self._safe_steps(value))
            result = result.add(steps)
            value = value.iteratedlog(10, steps * 2)
        for _ in range(HYPERLAYER_STEP_CAP):
            if value < 1:
                break
            result = result.add(1)
            value = self.get_layer(value, rounded=False)
        return result.add(value.max(ZERO))


# =============================================================================
# CONFIG
# =============================================================================


class PrestigeLayerConfig(BaseModel):
    """Параметры PrestigeLayerNotation."""

    root: Decimal = Field(..., description="Корень между соседними слоями")
    requirement: Decimal = Field(..., description="Стоимость слоя L+1 в единицах слоя L")
    recursive: bool = Field(default=False, description="Номер слоя записывается этой же нотацией")
    rampings: Tuple[Ramping, ...] = Field(default=(), description="(слой, множитель корня, степень требования)")
    layer_chars: Pair = Field(default=("[", "] "), description="Обёртка номера слоя")
    layer_before: bool = Field(default=True, description="Номер слоя перед количеством")
    show_layer_zero: bool = Field(default=True, description="Показывать слой 0")
    amount_inner_notation: Notation = Field(default_factory=DefaultNotation, description="Нотация количества")
    layer_inner_notation: Notation = Field(default_factory=DefaultNotation, description="Нотация номера слоя")
    recip_string: Optional[Pair] = Field(default=None, description="Обёртка обратного значения для value < 1")
    max_nesting: int = Field(default=3, ge=0, description="Глубина вложенности до hyperlayer формата")
    recursive_chars: Tuple[Pair, Pair, Pair] = Field(
        default=(("[", "]"), ("{", "} "), ("{", "}")),
        description="Обёртки вложенного слоя, счётчика hyperlayer и большого hyperlayer",
    )
    hyperlayer_before: bool = Field(default=True, description="Счётчик hyperlayer перед payload")
    hypermantissa_power: int = Field(default=0, ge=0, description="Сколько слоёв оставить в payload")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("root", "requirement", mode="before")
    @classmethod
    def coerce_numbers(cls, v):
        return coerce_decimal(v)

    @field_validator("rampings", mode="before")
    @classmethod
    def coerce_rampings(cls, v):
        rampings = []
        for entry in v:
            if len(entry) != 3:
                raise ValueError("each ramping is (layer, root multiplier, requirement exponent)")
            rampings.append(tuple(coerce_decimal(x) for x in entry))
        return tuple(rampings)


# =============================================================================
# NOTATION
# =============================================================================


class PrestigeLayerNotation(Notation):
    """
    Слой и количество на нём: "[2] 1,234".

    Examples:
        >>> PrestigeLayerNotation(root=3, requirement=1e12).format(1e12)
        '[1] 1'
    """

    config_model = PrestigeLayerConfig
    default_name = "Prestige Layer Notation"

    def _derive(self, config: PrestigeLayerConfig) -> PrestigeLadder:
        return PrestigeLadder(config.root, config.requirement, config.rampings, config.recursive)

    @property
    def ladder(self) -> PrestigeLadder:
        return self._derived

    # Делегаты лестницы

    def get_layer(self, value: DecimalSource, rounded: bool = True) -> Decimal:
        return self._derived.get_layer(value, rounded)

    def layer_and_currency(self, value: DecimalSource) -> Tuple[Decimal, Decimal]:
        return self._derived.layer_and_currency(value)

    def iterated_layer(self, value: DecimalSource, iterations: int) -> Decimal:
        return self._derived.iterated_layer(value, iterations)

    def get_hyperlayer(self, value: DecimalSource) -> Decimal:
        return self._derived.get_hyperlayer(value)

    # -------------------------------------------------------------------------
    # Formatting
    # -------------------------------------------------------------------------

    def format_decimal(self, value: Decimal) -> str:
        return self._format_at(value, 0)

    def _layer_string(self, value: Decimal) -> str:
        config = self._config
        currency, layer = self._derived.layer_and_currency(value)
        if not config.show_layer_zero and layer == 0:
            return config.amount_inner_notation.format(value)
        currency_text = config.amount_inner_notation.format(currency)
        layer_text = config.layer_chars[0] + config.layer_inner_notation.format(layer) + config.layer_chars[1]
        return layer_text + currency_text if config.layer_before else currency_text + layer_text

    def _format_at(self, value: Decimal, depth: int) -> str:
        config = self._config
        ladder = self._derived
        if value.sign == 0:
            return config.amount_inner_notation.format(0)
        if depth > MAX_FORMAT_DEPTH:
            logger.debug("prestige layer: format depth cap reached at %s", value)
            return config.layer_inner_notation.format(value)
        if value < 1:
            prefix, suffix = config.recip_string or (config.amount_inner_notation.format(1) + " / ", "")
            return prefix + self._format_at(value.recip(), depth) + suffix

        hyperlayer = ZERO
        if config.recursive:
            hyperlayer = ladder.get_hyperlayer(value).sub(1).floor().max(ZERO)

        if hyperlayer <= config.max_nesting:
            nesting = int(hyperlayer.to_float())
            text = self._layer_string(ladder.iterated_layer(value, nesting))
            opening, closing = config.recursive_chars[0]
            for _ in range(nesting):
                text = opening + text + closing
            return text

        if hyperlayer < ladder.divisor_at_layer(1):
            logger.debug("prestige layer: flattening %s hyperlayers", hyperlayer)
            count = int(hyperlayer.to_float()) + 1 - config.hypermantissa_power
            payload = self._format_at(ladder.iterated_layer(value, max(count, 0)), depth + 1)
            opening, closing = config.recursive_chars[1]
            count_text = opening + config.layer_inner_notation.format(count) + closing
            return count_text + payload if config.hyperlayer_before else payload + count_text

        opening, closing = config.recursive_chars[2]
        return opening + self._format_at(hyperlayer, depth + 1) + closing
