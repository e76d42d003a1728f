"""
Formatting — Digit Grouping and Decimal Places

Текстовое представление float-значений для внутренних нотаций.

Правила commas_and_decimals:
- Отрицательное число знаков (places) означает значащие цифры
- Незначащие нули в конце дробной части удаляются
- Группы разрядов ставятся только перед десятичным разделителем
- value >= 1e21 → "Xe+Y"
"""

import math
from typing import Final, Sequence

# Порог экспоненциальной записи
EXPONENTIAL_THRESHOLD: Final[float] = 1e21

# Максимум знаков после запятой
MAX_PLACES: Final[int] = 16


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _scientific(value: float) -> tuple:
    exponent = math.floor(math.log10(value))
    mantissa = value / 10.0**exponent
    if mantissa >= 10:
        mantissa /= 10
        exponent += 1
    elif mantissa < 1:
        mantissa *= 10
        exponent -= 1
    return mantissa, exponent


def add_commas(text: str, comma_chars: Sequence[str] = (",",), spacing: int = 3) -> str:
    """
    Вставляет разделители групп в целую часть text.

    comma_chars используются по очереди, от младших разрядов к старшим;
    последний повторяется.

    Examples:
        >>> add_commas("1234567")
        '1,234,567'
    """
    negative = text.startswith("-")
    digits = text[1:] if negative else text
    groups = []
    while len(digits) > spacing:
        groups.append(digits[-spacing:])
        digits = digits[:-spacing]
    result = digits
    for index, group in enumerate(reversed(groups)):
        separator_index = len(groups) - 1 - index
        separator = comma_chars[min(separator_index, len(comma_chars) - 1)]
        result += separator + group
    return ("-" if negative else "") + result


def commas_and_decimals(
    value: float,
    places_above_1: int = -4,
    places_below_1: int = -4,
    commas_min: float = 0,
    decimal_char: str = ".",
    comma_char: str = ",",
) -> str:
    """
    Форматирует value с разделителями групп и ограниченной дробной частью.

    Args:
        value: Число
        places_above_1: Знаков после запятой для |value| >= 1 (<0: значащие цифры)
        places_below_1: То же для |value| < 1
        commas_min: Разделители групп ставятся при value >= commas_min >= 0
        decimal_char: Десятичный разделитель
        comma_char: Разделитель групп

    Returns:
        Строка

    Examples:
        >>> commas_and_decimals(1234567.891)
        '1,234,568'
        >>> commas_and_decimals(0.00012345)
        '0.0001235'
    """
    value = float(value)
    if value == 0:
        return "0"
    if not math.isfinite(value):
        return str(value)
    if value < 0:
        return "-" + commas_and_decimals(
            -value, places_above_1, places_below_1, commas_min, decimal_char, comma_char
        )

    raw_places = min(places_below_1 if value < 1 else places_above_1, MAX_PLACES)
    mantissa, exponent = _scientific(value)
    places = raw_places
    if raw_places < 0:
        places = max(-raw_places - exponent - 1, 0)

    if value >= EXPONENTIAL_THRESHOLD:
        places = max(-raw_places - 1, 0) if raw_places < 0 else raw_places
        mantissa = _round_half_up(mantissa * 10**places) / 10**places
        if mantissa >= 10:
            mantissa /= 10
            exponent += 1
        inner = commas_and_decimals(
            mantissa, places_above_1, places_below_1, commas_min, decimal_char, comma_char
        )
        return f"{inner}e+{exponent}"

    if value < 1:
        ending = _round_half_up(value * 10**places)
        if ending == 0:
            return "0"
        if ending >= 10 ** (places + exponent + 1):
            exponent += 1
        if exponent >= 0:
            return commas_and_decimals(
                ending / 10**places, places_above_1, places_below_1, commas_min, decimal_char, comma_char
            )
        digits = str(ending).zfill(places + exponent + 1).rstrip("0")
        return "0" + decimal_char + "0" * (-exponent - 1) + digits

    whole = math.trunc(value)
    scale = 10**places
    leftover = _round_half_up((value - whole) * scale)
    if leftover >= scale:
        leftover -= scale
        whole += 1
    result = str(whole)
    if commas_min >= 0 and value >= commas_min:
        result = add_commas(result, (comma_char,))
    if leftover:
        fraction = str(leftover).zfill(places).rstrip("0")
        if fraction:
            result += decimal_char + fraction
    return result
