"""
PolygonalNotation — Polygonal Roots

value = P(n, sides), выводится n: "△4" для 10 при sides = 3.
Большие значения вкладываются: "△(△4)" = P(P(4)).

Вложенность ограничена max_polys: на этой глубине остаток отдаётся
inner_notation.
"""

import logging
from typing import Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from eternal_notations.core.math.eternity import Decimal
from eternal_notations.core.math.polygonal import polygon, polygon_root
from eternal_notations.notations.base import ConfigurationError, Notation, coerce_decimal
from eternal_notations.notations.default import DefaultNotation

logger = logging.getLogger(__name__)

Pair = Tuple[str, str]


class PolygonalConfig(BaseModel):
    """Параметры PolygonalNotation."""

    sides: Decimal = Field(default=Decimal(3), description="Число сторон, > 2")
    poly_chars: Tuple[Pair, Pair] = Field(
        default=(("△", ""), ("△(", ")")), description="Обёртки простого и вложенного корня"
    )
    maxnum: Decimal = Field(default=Decimal(26796), description="Наибольший корень без вложения, > 1")
    max_polys: int = Field(default=5, ge=0, description="Максимальная глубина вложения")
    inner_notation: Notation = Field(default_factory=DefaultNotation, description="Нотация корня")
    minnum: Optional[Decimal] = Field(default=None, description="Ниже - через обратное (None: P(0.1))")
    recip_string: Optional[Pair] = Field(default=None, description="Обёртка обратного значения")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("sides", "maxnum", mode="before")
    @classmethod
    def coerce_numbers(cls, v):
        return coerce_decimal(v)

    @field_validator("minnum", mode="before")
    @classmethod
    def coerce_minnum(cls, v):
        return None if v is None else coerce_decimal(v)

    @model_validator(mode="after")
    def check_ranges(self) -> "PolygonalConfig":
        if self.sides <= 2:
            raise ValueError("sides must be greater than 2")
        if self.maxnum <= 1:
            raise ValueError("maxnum must be greater than 1")
        if self.minnum is not None and self.minnum >= 1:
            raise ValueError("minnum must be less than 1")
        return self


class PolygonalNotation(Notation):
    """
    Корень polygonal числа.

    Examples:
        >>> PolygonalNotation().format(10)
        '△4'
        >>> PolygonalNotation().format(1e12)
        '△(△1,681)'
    """

    config_model = PolygonalConfig
    default_name = "Polygonal Notation"

    def _derive(self, config: PolygonalConfig) -> Tuple[Decimal, Decimal]:
        minnum = config.minnum if config.minnum is not None else polygon(0.1, config.sides)
        if minnum >= 1:
            raise ConfigurationError("minnum must be less than 1")
        return minnum, polygon(config.maxnum, config.sides)

    def format_decimal(self, value: Decimal) -> str:
        return self._format_at(value, 0)

    def _format_at(self, value: Decimal, depth: int) -> str:
        config = self._config
        minnum, single_limit = self._derived
        if value < minnum:
            if value.sign == 0:
                return config.inner_notation.format(0)
            prefix, suffix = config.recip_string or (config.inner_notation.format(1) + " / ", "")
            return prefix + self._format_at(value.recip(), depth) + suffix

        root = polygon_root(value, config.sides)
        if value < single_limit or depth >= config.max_polys:
            if value >= single_limit:
                logger.debug("polygonal: nesting cap %d reached", config.max_polys)
            prefix, suffix = config.poly_chars[0]
            return prefix + config.inner_notation.format(root) + suffix
        prefix, suffix = config.poly_chars[1]
        return prefix + self._format_at(root, depth + 1) + suffix
