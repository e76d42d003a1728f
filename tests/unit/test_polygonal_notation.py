"""
Тесты для PolygonalNotation

Проверяемые инварианты:
1. value = P(n, sides) выводится как "△n"
2. Значения выше P(maxnum) вкладываются: "△(△n)"
3. Глубина вложения ограничена max_polys
4. Ниже minnum - через обратное значение
"""

import pytest

from eternal_notations import ConfigurationError, PolygonalNotation


@pytest.fixture
def notation():
    return PolygonalNotation()


# =============================================================================
# ТЕСТЫ: Вывод
# =============================================================================


class TestFormat:
    """Строковое представление."""

    def test_triangular(self, notation):
        """10 = P(4) → "△4"."""
        assert notation.format(10) == "△4"

    def test_nested(self, notation):
        """1e12 → "△(△1,681)"."""
        assert notation.format(1e12) == "△(△1,681)"

    def test_fractional_root(self, notation):
        """0.5 → корень 0.618."""
        assert notation.format(0.5) == "△0.618"

    def test_reciprocal(self, notation):
        """Ниже P(0.1) → "1 / " + обратное."""
        assert notation.format(0.01) == "1 / △13.65"

    def test_zero(self, notation):
        """0 → "0"."""
        assert notation.format(0) == "0"

    def test_negative(self, notation):
        """Знак перед записью."""
        assert notation.format(-10) == "-△4"

    def test_square(self):
        """sides = 4: 49 → "△7"."""
        assert PolygonalNotation(sides=4).format(49) == "△7"

    def test_custom_chars(self):
        """Свои обёртки."""
        notation = PolygonalNotation(poly_chars=(("P(", ")"), ("P(", ")")))
        assert notation.format(10) == "P(4)"

    def test_recip_string(self):
        """Своя обёртка обратного значения."""
        notation = PolygonalNotation(recip_string=("1/(", ")"))
        assert notation.format(0.01) == "1/(△13.65)"


# =============================================================================
# ТЕСТЫ: Вложенность
# =============================================================================


class TestNesting:
    """max_polys и maxnum."""

    def test_no_nesting(self):
        """max_polys = 0: корень выводится inner notation."""
        assert PolygonalNotation(max_polys=0).format(1e12) == "△1,414,213"

    def test_depth_bounded(self, notation):
        """Очень большие значения: не больше max_polys + 1 символов."""
        result = notation.format("1e100000")
        assert result.count("△") <= notation.max_polys + 1

    def test_lower_maxnum(self):
        """maxnum = 10: 100 = P(13.65) уже вкладывается."""
        assert PolygonalNotation(maxnum=10).format(100).startswith("△(△")


# =============================================================================
# ТЕСТЫ: Валидация
# =============================================================================


class TestValidation:
    """Ограничения параметров."""

    def test_sides(self):
        """sides <= 2 → ConfigurationError."""
        with pytest.raises(ConfigurationError, match="sides must be greater than 2"):
            PolygonalNotation(sides=2)

    def test_maxnum(self):
        """maxnum <= 1 → ConfigurationError."""
        with pytest.raises(ConfigurationError, match="maxnum must be greater than 1"):
            PolygonalNotation(maxnum=1)

    def test_minnum(self):
        """minnum >= 1 → ConfigurationError."""
        with pytest.raises(ConfigurationError, match="minnum must be less than 1"):
            PolygonalNotation(minnum=2)
