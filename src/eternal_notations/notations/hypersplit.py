"""
HypersplitNotation — Mantissa / Exponent / Tetration / Pentation

Раскладывает значение через core.math.hyperoperators.hypersplit и выводит
четыре компонента, каждый в своей паре delimiters и своей внутренней
нотации.

show_zeroes[i] (политика показа нулевого компонента):
    > 0  всегда показывать
    < 0  скрывать, если компонент == 0
    == 0 показывать, только если какой-то старший компонент != 0

Порядок токенов: delimiter_permutation 0..23; 1 = (pentation, tetration,
mantissa, exponent).
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator

from eternal_notations.core.math.eternity import CONVERGENT_TETRATION_BASE, Decimal
from eternal_notations.core.math.hyperoperators import hypersplit, permutation_order
from eternal_notations.notations.base import ConfigurationError, Notation, coerce_decimal
from eternal_notations.notations.default import DefaultNotation

Pair = Tuple[str, str]


def _pad(items, size: int, filler):
    items = list(items)[:size]
    if not items:
        raise ValueError("expected at least one value")
    while len(items) < size:
        items.append(filler if filler is not None else items[-1])
    return tuple(items)


def _decimal_triple(value) -> Tuple[Decimal, Decimal, Decimal]:
    if isinstance(value, (list, tuple)):
        return _pad([coerce_decimal(v) for v in value], 3, None)
    return (coerce_decimal(value),) * 3


# =============================================================================
# CONFIG
# =============================================================================


class HypersplitConfig(BaseModel):
    """Параметры HypersplitNotation."""

    delimiters: Tuple[Pair, Pair, Pair, Pair] = Field(
        default=(("", ""), ("*10^", ""), ("((10^)^", ") "), ("((10^^)^", ") ")),
        description="Обёртки mantissa, exponent, tetration, pentation",
    )
    base: Decimal = Field(default=Decimal(10), description="Основание, > e^(1/e)")
    maximums: Optional[Tuple[Decimal, Decimal, Decimal]] = Field(
        default=None, description="Пороги уровней (None: base)"
    )
    original_maximums: Optional[Tuple[Decimal, Decimal, Decimal]] = Field(
        default=None, description="Ослабленные пороги (None: maximums)"
    )
    show_zeroes: Tuple[int, int, int, int] = Field(default=(1, -1, -1, -1), description="Политики показа нулей")
    delimiter_permutation: int = Field(default=1, ge=0, le=23, description="Порядок токенов")
    minnum: Decimal = Field(default=Decimal(1), description="Ниже - без разложения")
    mantissa_rounding: Union[Decimal, Callable[[Decimal], Any]] = Field(
        default=Decimal(0), description="Единица округления мантиссы или функция"
    )
    inner_notations: Tuple[Notation, Notation, Notation, Notation] = Field(
        default_factory=lambda: (DefaultNotation(),) * 4, description="Нотации компонентов"
    )
    exp_multipliers: Tuple[Decimal, Decimal, Decimal] = Field(
        default=(Decimal(1), Decimal(1), Decimal(1)), description="Множители exponent, tetration, pentation"
    )

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("delimiters", mode="before")
    @classmethod
    def pad_delimiters(cls, v):
        return _pad(v, 4, ("", ""))

    @field_validator("base", "minnum", mode="before")
    @classmethod
    def coerce_numbers(cls, v):
        return coerce_decimal(v)

    @field_validator("base")
    @classmethod
    def validate_base(cls, v: Decimal) -> Decimal:
        if not v.to_float() > CONVERGENT_TETRATION_BASE:
            raise ValueError(f"base must exceed {CONVERGENT_TETRATION_BASE}, got {v}")
        return v

    @field_validator("maximums", "original_maximums", mode="before")
    @classmethod
    def coerce_maximums(cls, v):
        if v is None:
            return None
        values = _decimal_triple(v)
        if any(m <= 0 for m in values):
            raise ValueError("maximums must be positive")
        return values

    @field_validator("exp_multipliers", mode="before")
    @classmethod
    def coerce_multipliers(cls, v):
        values = _decimal_triple(v)
        if any(m <= 0 for m in values):
            raise ValueError("exp_multipliers must be positive")
        return values

    @field_validator("show_zeroes", mode="before")
    @classmethod
    def expand_show_zeroes(cls, v):
        if isinstance(v, (list, tuple)):
            return _pad(v, 4, None)
        return (1, v, v, v)

    @field_validator("mantissa_rounding", mode="before")
    @classmethod
    def coerce_rounding(cls, v):
        if callable(v) and not isinstance(v, Decimal):
            return v
        return coerce_decimal(v)

    @field_validator("inner_notations", mode="before")
    @classmethod
    def expand_inner_notations(cls, v):
        if isinstance(v, Notation):
            return (v,) * 4
        return _pad(v, 4, None)


@dataclass(frozen=True)
class _Thresholds:
    maximums: Tuple[Decimal, Decimal, Decimal]
    original_maximums: Tuple[Decimal, Decimal, Decimal]


# =============================================================================
# NOTATION
# =============================================================================


class HypersplitNotation(Notation):
    """
    Разложение по гипероператорам: "((10^^)^p) ((10^)^t) m*10^e".

    Examples:
        >>> HypersplitNotation().format(1e15)
        '1*10^15'
    """

    config_model = HypersplitConfig
    default_name = "Hypersplit Notation"

    def _derive(self, config: HypersplitConfig) -> _Thresholds:
        maximums = config.maximums or (config.base,) * 3
        original = config.original_maximums or maximums
        effective_base = config.base.root(config.exp_multipliers[0])
        if not effective_base.to_float() > CONVERGENT_TETRATION_BASE:
            raise ConfigurationError(
                f"base ** (1 / exp_multipliers[0]) must exceed {CONVERGENT_TETRATION_BASE}"
            )
        return _Thresholds(maximums, original)

    def split(self, value: Decimal):
        """HypersplitResult для неотрицательного value."""
        config = self._config
        return hypersplit(
            value,
            config.base,
            self._derived.maximums,
            self._derived.original_maximums,
            config.minnum,
            config.mantissa_rounding,
            config.exp_multipliers,
        )

    def format_decimal(self, value: Decimal) -> str:
        config = self._config
        components = self.split(value).as_tuple()

        shown = []
        for index, component in enumerate(components):
            policy = config.show_zeroes[index]
            higher = any(c.sign != 0 for c in components[index + 1 :])
            shown.append(component.sign != 0 or policy > 0 or (policy == 0 and higher))
        if not any(shown):
            shown[0] = True

        text = ""
        for index in permutation_order(4, config.delimiter_permutation):
            if shown[index]:
                prefix, suffix = config.delimiters[index]
                text += prefix + config.inner_notations[index].format(components[index]) + suffix
        return text
