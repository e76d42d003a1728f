"""
Тесты для PrestigeLayerNotation и PrestigeLadder

Проверяемые инварианты:
1. divisor_at_layer: D(0) = 1, D(L + 1) = D(L) * requirement^(root^L)
2. get_layer монотонен и точен на границах слоёв
3. layer_and_currency: количество ∈ [1, requirement)
4. Ramping накопительно умножает корень
5. Корень < 1 и корень == 1 в recursive режиме запрещены
6. Рекурсивный вывод: вложенные слои, затем счётчик hyperlayer
"""

import pytest

from eternal_notations import ConfigurationError, PrestigeLayerNotation
from eternal_notations.core.math.eternity import ONE, TEN, ZERO, Decimal
from eternal_notations.notations.prestige_layer import PrestigeLadder, normalize_rampings


@pytest.fixture
def notation():
    return PrestigeLayerNotation(root=3, requirement=1e12)


@pytest.fixture
def recursive():
    return PrestigeLayerNotation(root=3, requirement=1e12, recursive=True)


# =============================================================================
# ТЕСТЫ: Лестница
# =============================================================================


class TestLadder:
    """Пороги слоёв."""

    def test_divisors(self, notation):
        """D(0) = 1, D(1) = 1e12, D(2) = 1e48, D(3) = 1e156."""
        ladder = notation.ladder
        assert ladder.divisor_at_layer(0) == ONE
        assert ladder.divisor_at_layer(1).to_float() == pytest.approx(1e12)
        assert ladder.divisor_at_layer(2).log10().to_float() == pytest.approx(48)
        assert ladder.divisor_at_layer(3).log10().to_float() == pytest.approx(156)

    def test_root_at_layer(self, notation):
        """Без ramping корень слоя L = root^L."""
        assert notation.ladder.root_at_layer(2).to_float() == pytest.approx(9)

    def test_ramping(self):
        """Ramping (2, 2, 1): корень удваивается начиная со слоя 2."""
        ladder = PrestigeLadder(Decimal(2), Decimal(10), [(2, 2, 1)])
        assert ladder.root_at_layer(2).to_float() == pytest.approx(4)
        assert ladder.root_at_layer(3).to_float() == pytest.approx(16)

    def test_normalize_rampings(self):
        """Сортировка, последний из дублей, (0, 1, 1) в начале."""
        rampings = normalize_rampings([(5, 2, 1), (2, 3, 1), (5, 4, 1)])
        assert [tuple(x.to_float() for x in r) for r in rampings] == [(0, 1, 1), (2, 3, 1), (5, 4, 1)]

    def test_root_below_one(self):
        """Ramping, уводящий корень ниже 1 → ConfigurationError."""
        with pytest.raises(ConfigurationError, match="root goes below 1"):
            PrestigeLayerNotation(root=3, requirement=10, rampings=[(1, 0.1, 1)])

    def test_recursive_root_one(self):
        """Корень 1 в recursive режиме → ConfigurationError."""
        with pytest.raises(ConfigurationError, match="root equal to 1"):
            PrestigeLayerNotation(root=1, requirement=10, recursive=True)

    def test_root_one_allowed(self):
        """Корень 1 без recursive: слои растут линейно по log."""
        notation = PrestigeLayerNotation(root=1, requirement=10)
        assert notation.get_layer(3e5) == 5

    def test_requirement_above_one(self):
        """requirement <= 1 → ConfigurationError."""
        with pytest.raises(ConfigurationError, match="requirement must stay above 1"):
            PrestigeLayerNotation(root=2, requirement=1)


# =============================================================================
# ТЕСТЫ: Слои
# =============================================================================


class TestLayers:
    """get_layer, layer_and_currency, hyperlayer."""

    def test_get_layer_boundaries(self, notation):
        """Граница слоя 1 - ровно requirement."""
        assert notation.get_layer(1) == ZERO
        assert notation.get_layer(1e12) == 1
        assert notation.get_layer(9.99e11) == 0
        assert notation.get_layer(1e50) == 2

    def test_get_layer_unrounded(self, notation):
        """1e30 - середина между 1e12 и 1e48 по log."""
        assert notation.get_layer(1e30, rounded=False).to_float() == pytest.approx(1.5)

    def test_get_layer_monotonic(self, notation):
        """get_layer не убывает."""
        values = [Decimal(10).pow(e) for e in (1, 11, 12, 47, 48, 155, 156, 1000)]
        layers = [notation.get_layer(v).to_float() for v in values]
        assert layers == sorted(layers)

    def test_get_layer_large(self, notation):
        """Целый слой около 1e15 определяется точно."""
        ladder = notation.ladder
        value = ladder.divisor_at_layer(1e15)
        assert ladder.get_layer(value).to_float() == pytest.approx(1e15)

    def test_layer_and_currency(self, notation):
        """1e21 на слое 1: (1e21 / 1e12)^(1/3) = 1000."""
        currency, layer = notation.layer_and_currency(1e21)
        assert layer == 1
        assert currency.to_float() == pytest.approx(1000)

    def test_layer_and_currency_zero(self, notation):
        """0 → (0, 0)."""
        assert notation.layer_and_currency(0) == (ZERO, ZERO)

    def test_iterated_layer(self, notation):
        """Слой слоя."""
        value = notation.ladder.divisor_at_layer(1e12)
        assert notation.iterated_layer(value, 2) == 1

    def test_hyperlayer_small(self, notation):
        """Значения < 1 имеют hyperlayer -1 + остаток."""
        assert notation.get_hyperlayer(0.5).to_float() == pytest.approx(-0.5)

    def test_hyperlayer_grows(self, notation):
        """Каждый слой добавляет единицу."""
        ladder = notation.ladder
        inner = notation.get_hyperlayer(1e15).to_float()
        outer = notation.get_hyperlayer(ladder.divisor_at_layer(1e15)).to_float()
        assert outer > inner + 0.9


# =============================================================================
# ТЕСТЫ: Вывод
# =============================================================================


class TestFormat:
    """Строковое представление."""

    def test_layer_one(self, notation):
        """1e12 → "[1] 1"."""
        assert notation.format(1e12) == "[1] 1"

    def test_layer_zero(self, notation):
        """5 → "[0] 5"."""
        assert notation.format(5) == "[0] 5"

    def test_hide_layer_zero(self):
        """show_layer_zero = False: обычное число."""
        notation = PrestigeLayerNotation(root=3, requirement=1e12, show_layer_zero=False)
        assert notation.format(5) == "5"

    def test_layer_after(self):
        """layer_before = False: количество, затем слой."""
        notation = PrestigeLayerNotation(root=3, requirement=1e12, layer_before=False, layer_chars=(" [", "]"))
        assert notation.format(1e21) == "1,000 [1]"

    def test_reciprocal(self, notation):
        """0.5 → "1 / [0] 2"."""
        assert notation.format(0.5) == "1 / [0] 2"

    def test_zero(self, notation):
        """0 → "0"."""
        assert notation.format(0) == "0"

    def test_recursive_nesting(self, recursive):
        """Слой 1e15 записан вложенно."""
        value = recursive.ladder.divisor_at_layer(1e15)
        assert recursive.format(value) == "[[1] 10]"

    def test_recursive_small(self, recursive):
        """Малые значения не вкладываются."""
        assert recursive.format(5) == "[0] 5"

    def test_hyperlayer_counter(self, recursive):
        """max_nesting = 0: счётчик hyperlayer и payload."""
        recursive.max_nesting = 0
        value = recursive.ladder.divisor_at_layer(1e15)
        assert recursive.format(value) == "{2} [0] 1"

    def test_hyperlayer_after(self):
        """hyperlayer_before = False: payload, затем счётчик."""
        notation = PrestigeLayerNotation(
            root=3, requirement=1e12, recursive=True, max_nesting=0, hyperlayer_before=False,
            recursive_chars=(("[", "]"), (" {", "}"), ("{", "}")),
        )
        value = notation.ladder.divisor_at_layer(1e15)
        assert notation.format(value) == "[0] 1 {2}"

    def test_huge_value_finite_output(self, recursive):
        """Очень большие значения форматируются за ограниченное время."""
        result = recursive.format(TEN.tetrate(1e6))
        assert isinstance(result, str)
        assert result.startswith("{")
