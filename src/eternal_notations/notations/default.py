"""
DefaultNotation — Plain, Scientific, Iterated-e and F Forms

Внутренняя нотация по умолчанию для всех составных нотаций.

Диапазоны (value >= 0):
    0                                   → "0"
    [minnum, maxnum)                    → commas_and_decimals ("1,234.5")
    < 10^maxnum                         → "{m}e{e}" ("1.5e300")
    < 10^10^...^maxnum (max_es + 1 раз) → "e" * k + format(остаток) ("ee1.5e300")
    < 10^^maxnum                        → "{m}F{h}"
    иначе                               → "F" + format(slog(value))

Значения < minnum записываются с отрицательным показателем.
"""

from pydantic import BaseModel, Field, field_validator

from eternal_notations.core.formatting import commas_and_decimals
from eternal_notations.core.math.eternity import TEN, Decimal
from eternal_notations.core.math.hyperoperators import hyperscientifify, scientifify
from eternal_notations.notations.base import Notation, coerce_decimal


# =============================================================================
# CONFIG
# =============================================================================


class DefaultConfig(BaseModel):
    """Параметры DefaultNotation."""

    places_above_1: int = Field(default=-4, description="Знаков после запятой при value >= 1 (<0: значащие)")
    places_below_1: int = Field(default=-4, description="Знаков после запятой при value < 1 (<0: значащие)")
    commas_min: Decimal = Field(default=Decimal(0), description="Разделители групп от этого значения")
    maxnum: Decimal = Field(default=Decimal(1e12), description="Начало экспоненциальной записи")
    minnum: Decimal = Field(default=Decimal(1e-6), description="Ниже - отрицательный показатель")
    max_es_in_a_row: int = Field(default=5, ge=0, description="Максимум ведущих 'e'")
    decimal_char: str = Field(default=".", description="Десятичный разделитель")
    comma_char: str = Field(default=",", description="Разделитель групп")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("commas_min", "maxnum", "minnum", mode="before")
    @classmethod
    def coerce_numbers(cls, v):
        return coerce_decimal(v)


# =============================================================================
# NOTATION
# =============================================================================


class DefaultNotation(Notation):
    """
    Привычная запись: обычные числа, затем "XeY", "eeX", "XFY", "FX".

    Examples:
        >>> DefaultNotation().format(1234.5678)
        '1,235'
        >>> DefaultNotation().format("1e1000")
        '1e1,000'
    """

    config_model = DefaultConfig
    default_name = "Default Notation"

    def _plain(self, value: float) -> str:
        config = self._config
        return commas_and_decimals(
            value,
            config.places_above_1,
            config.places_below_1,
            config.commas_min.to_float(),
            config.decimal_char,
            config.comma_char,
        )

    def _mantissa_rounding(self, value: Decimal) -> Decimal:
        places = self._config.places_above_1 if value >= 1 else self._config.places_below_1
        if places < 0:
            # Мантисса в [1, 10): значащие цифры = знаки после запятой + 1
            places = -places - 1
        return Decimal(10.0**-places)

    def format_decimal(self, value: Decimal) -> str:
        config = self._config
        if value.sign == 0:
            return "0"
        if config.minnum <= value < config.maxnum:
            return self._plain(value.to_float())

        rounding = self._mantissa_rounding(value)
        negative_exponent = False
        if value < 1:
            negative_exponent = True
            mantissa, exponent = scientifify(value, 10, rounding)
            value = exponent.neg().pow10().mul(mantissa)

        if value < config.maxnum.pow10():
            mantissa, exponent = scientifify(value, 10, rounding)
            if negative_exponent:
                exponent = exponent.neg()
            return self._plain(mantissa.to_float()) + "e" + self._plain(exponent.to_float())

        if value < TEN.iteratedexp(config.max_es_in_a_row + 1, config.maxnum):
            result = ""
            limit = config.maxnum.pow10()
            while value >= limit:
                result += "e"
                value = value.log10()
            if negative_exponent:
                value = value.neg()
            return result + self.format(value)

        if value < TEN.tetrate(config.maxnum.to_float()):
            mantissa, height = hyperscientifify(value, 10, rounding)
            if negative_exponent:
                height = height.neg()
            return self._plain(mantissa.to_float()) + "F" + self._plain(height.to_float())

        height = value.slog(10)
        if negative_exponent:
            height = height.neg()
        return "F" + self.format(height)
