"""
Notation — Base Contract

Общий контракт всех нотаций: format(value) → str.

format() реализован один раз и не переопределяется:
1. NaN → nan_string
2. is_infinite(value) → infinity_string / negative_infinity_string
3. Ненулевое значение с бесконечным обратным → format(0)
4. Отрицательные → format_negative_decimal(|value|)
5. Остальные → format_decimal(value) (абстрактный, per-notation)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. format(NaN) == nan_string
2. format(+Inf) == infinity_string
3. format(-Inf) == negative_infinity_string или infinity_string в обёртке
   negative_string
4. Конфигурация: frozen pydantic модель; изменение заменяет модель целиком
   и пересчитывает производное состояние до присваивания
5. Ошибки валидации → ConfigurationError (ValueError)
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, Optional, Tuple, Type, final

from pydantic import BaseModel, Field, ValidationError

from eternal_notations.core.math.eternity import ZERO, Decimal, DecimalSource, to_decimal


# =============================================================================
# EXCEPTIONS
# =============================================================================


class ConfigurationError(ValueError):
    """Нарушено ограничение параметра нотации (при создании или изменении)."""

    pass


# =============================================================================
# COERCION
# =============================================================================


def coerce_decimal(value: Any) -> Decimal:
    """
    Приводит int/float/str/Decimal к Decimal для before-валидаторов.

    Raises:
        ValueError: Неподдерживаемый тип или строка, не являющаяся числом
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float, str)):
        try:
            return to_decimal(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"not a number: {value!r}") from exc
    raise ValueError(f"expected a number, got {type(value).__name__}")


def exact_infinity(value: Decimal) -> bool:
    """Предикат по умолчанию: |value| == Infinity."""
    return value.is_infinite()


# =============================================================================
# GLOBALS
# =============================================================================


class NotationGlobals(BaseModel):
    """
    Общие строки и предикат бесконечности, одинаковые для всех нотаций.
    """

    negative_string: Tuple[str, str] = Field(
        default=("-", ""), description="Префикс и суффикс отрицательных значений"
    )
    infinity_string: str = Field(default="Infinite", description="Строка для +Infinity")
    negative_infinity_string: Optional[str] = Field(
        default=None, description="Строка для -Infinity (None: infinity_string в negative_string)"
    )
    nan_string: str = Field(default="???", description="Строка для NaN")
    is_infinite: Callable[[Decimal], bool] = Field(
        default=exact_infinity, description="Какие значения считаются бесконечными"
    )

    model_config = {"frozen": True, "arbitrary_types_allowed": True}


# =============================================================================
# NOTATION
# =============================================================================


class Notation(ABC):
    """
    Базовый класс нотаций.

    Подкласс задаёт config_model (pydantic модель параметров) и
    format_decimal. Параметры доступны как атрибуты: notation.precision,
    notation.precision = 1e-3 (присваивание проходит через configure).

    Производное состояние (кэши, таблицы) строится в _derive(config) и
    пересчитывается при каждом изменении конфигурации.
    """

    config_model: ClassVar[Optional[Type[BaseModel]]] = None
    default_name: ClassVar[str] = "Notation"

    def __init__(self, **params: Any) -> None:
        object.__setattr__(self, "_globals", NotationGlobals())
        object.__setattr__(self, "_name", self.default_name)
        if self.config_model is None:
            if params:
                raise ConfigurationError(
                    f"{type(self).__name__} takes no parameters, got {sorted(params)}"
                )
            config = None
        else:
            unknown = set(params) - set(self.config_model.model_fields)
            if unknown:
                raise ConfigurationError(f"Unknown parameters for {type(self).__name__}: {sorted(unknown)}")
            config = self._validate(self.config_model, params)
        derived = self._derive(config)
        object.__setattr__(self, "_config", config)
        object.__setattr__(self, "_derived", derived)

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    @staticmethod
    def _validate(model: Type[BaseModel], params: dict) -> Any:
        try:
            return model(**params)
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc

    def _derive(self, config: Any) -> Any:
        """Производное состояние для config (по умолчанию нет)."""
        return None

    @property
    def config(self) -> Any:
        return self._config

    def configure(self, **changes: Any) -> "Notation":
        """
        Изменяет параметры: новая модель = старые поля + changes.

        Модель и производное состояние присваиваются только после успешной
        валидации обоих.

        Raises:
            ConfigurationError: Неизвестный параметр или нарушено ограничение
        """
        if self._config is None:
            if changes:
                raise ConfigurationError(f"{type(self).__name__} takes no parameters")
            return self
        fields = type(self._config).model_fields
        unknown = set(changes) - set(fields)
        if unknown:
            raise ConfigurationError(f"Unknown parameters for {type(self).__name__}: {sorted(unknown)}")
        current = {name: getattr(self._config, name) for name in fields}
        config = self._validate(type(self._config), {**current, **changes})
        derived = self._derive(config)
        object.__setattr__(self, "_config", config)
        object.__setattr__(self, "_derived", derived)
        return self

    def __getattr__(self, item: str) -> Any:
        config = self.__dict__.get("_config")
        if config is not None and item in type(config).model_fields:
            return getattr(config, item)
        raise AttributeError(f"{type(self).__name__!s} has no attribute {item!r}")

    def __setattr__(self, key: str, value: Any) -> None:
        config = self.__dict__.get("_config")
        if config is not None and key in type(config).model_fields:
            self.configure(**{key: value})
            return
        object.__setattr__(self, key, value)

    # -------------------------------------------------------------------------
    # Globals & name
    # -------------------------------------------------------------------------

    @property
    def notation_globals(self) -> NotationGlobals:
        return self._globals

    def set_notation_globals(self, **changes: Any) -> "Notation":
        """
        Задаёт любое подмножество полей NotationGlobals, остальные не меняются.

        Returns:
            self (для цепочек)
        """
        unknown = set(changes) - set(NotationGlobals.model_fields)
        if unknown:
            raise ConfigurationError(f"Unknown notation globals: {sorted(unknown)}")
        current = {name: getattr(self._globals, name) for name in NotationGlobals.model_fields}
        object.__setattr__(self, "_globals", self._validate(NotationGlobals, {**current, **changes}))
        return self

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        object.__setattr__(self, "_name", value)

    def set_name(self, name: str) -> "Notation":
        self.name = name
        return self

    # -------------------------------------------------------------------------
    # Formatting
    # -------------------------------------------------------------------------

    @final
    def format(self, value: DecimalSource) -> str:
        """
        Форматирует value (Decimal, int, float или str).

        Examples:
            >>> DefaultNotation().format(float("nan"))
            '???'
        """
        value = to_decimal(value)
        globals_ = self._globals
        if value.is_nan():
            return globals_.nan_string
        if globals_.is_infinite(value):
            if value.sign < 0:
                if globals_.negative_infinity_string is not None:
                    return globals_.negative_infinity_string
                prefix, suffix = globals_.negative_string
                return prefix + globals_.infinity_string + suffix
            return globals_.infinity_string
        if value.sign != 0 and globals_.is_infinite(value.recip()):
            return self.format(ZERO)
        if value.sign < 0:
            return self.format_negative_decimal(value.abs())
        return self.format_decimal(value)

    def format_negative_decimal(self, value: Decimal) -> str:
        """|value| через format_decimal в обёртке negative_string."""
        prefix, suffix = self._globals.negative_string
        return prefix + self.format_decimal(value) + suffix

    @abstractmethod
    def format_decimal(self, value: Decimal) -> str:
        """Неотрицательное конечное значение (включая 0) → строка."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"
