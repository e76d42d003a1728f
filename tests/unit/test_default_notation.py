"""
Тесты для DefaultNotation

Проверяемые инварианты:
1. Обычные числа с разделителями групп и 4 значащими цифрами
2. Экспоненциальная запись от maxnum, отрицательный показатель ниже minnum
3. Ведущие "e" ограничены max_es_in_a_row, затем "XFY" и "FX"
"""

import pytest

from eternal_notations import DefaultNotation
from eternal_notations.core.math.eternity import TEN, Decimal


@pytest.fixture
def notation():
    return DefaultNotation()


# =============================================================================
# ТЕСТЫ: Обычные числа
# =============================================================================


class TestPlain:
    """Диапазон [minnum, maxnum)."""

    def test_zero(self, notation):
        """0 → "0"."""
        assert notation.format(0) == "0"

    def test_commas(self, notation):
        """Группы разрядов и округление до значащих цифр."""
        assert notation.format(1234.5678) == "1,235"

    def test_small_decimal(self, notation):
        """0.001 записывается обычной дробью."""
        assert notation.format(0.001) == "0.001"

    def test_negative(self, notation):
        """Знак минус."""
        assert notation.format(-42) == "-42"

    def test_places_above_1(self):
        """Фиксированное число знаков после запятой."""
        assert DefaultNotation(places_above_1=2).format(3.14159) == "3.14"

    def test_custom_separators(self):
        """Свои десятичный разделитель и разделитель групп."""
        notation = DefaultNotation(decimal_char=",", comma_char=" ", places_above_1=1)
        assert notation.format(12345.67) == "12 345,7"


# =============================================================================
# ТЕСТЫ: Экспоненциальная запись
# =============================================================================


class TestScientific:
    """От maxnum до 10^maxnum."""

    def test_1e15(self, notation):
        """1e15 → "1e15"."""
        assert notation.format(1e15) == "1e15"

    def test_mantissa(self, notation):
        """Мантисса с дробной частью."""
        assert notation.format(1.5e300) == "1.5e300"

    def test_beyond_float(self, notation):
        """Значения больше float."""
        assert notation.format(Decimal("1e1000")) == "1e1,000"

    def test_below_minnum(self, notation):
        """1e-7 → отрицательный показатель."""
        assert notation.format(1e-7) == "1e-7"

    def test_lower_maxnum(self):
        """maxnum задаёт начало экспоненциальной записи."""
        assert DefaultNotation(maxnum=1000).format(5000) == "5e3"


# =============================================================================
# ТЕСТЫ: Гипер-запись
# =============================================================================


class TestHyper:
    """"e"-цепочки, "XFY" и "FX"."""

    def test_leading_e(self, notation):
        """10^10^100 → "e1e100"."""
        assert notation.format("ee100") == "e1e100"

    def test_f_form(self, notation):
        """10^^20 → "1F20"."""
        assert notation.format(TEN.tetrate(20)) == "1F20"

    def test_no_leading_es(self):
        """max_es_in_a_row = 0: сразу "XFY"."""
        assert DefaultNotation(max_es_in_a_row=0).format("ee100") == "2F3"

    def test_huge_height(self, notation):
        """Высота больше maxnum → "F" + высота."""
        result = notation.format(TEN.tetrate(1e15))
        assert result.startswith("F")
        assert result.endswith("e15")
