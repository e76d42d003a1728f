"""
Тесты для Hyperoperators — Splitting Values Across Operator Levels

Проверяемые инварианты:
1. round_to_multiple: единица или функция, 0 отключает
2. permutation_order: порядок вставки токенов
3. scientifify / hyperscientifify: мантисса в [1, base)
4. hypersplit: пороги, minnum, множители, валидация основания
5. hypercombine восстанавливает значение
6. linear_sroot обращает тетрацию
"""

import pytest

from eternal_notations.core.math.eternity import TEN, Decimal
from eternal_notations.core.math.hyperoperators import (
    HypersplitResult,
    hypercombine,
    hyperscientifify,
    hypersplit,
    linear_sroot,
    permutation_order,
    round_to_multiple,
    scientifify,
)


def _floats(result: HypersplitResult):
    return tuple(component.to_float() for component in result.as_tuple())


# =============================================================================
# ТЕСТЫ: Округление и порядок
# =============================================================================


class TestRoundToMultiple:
    """Тесты round_to_multiple."""

    def test_unit(self):
        """Округление до 0.01."""
        assert round_to_multiple(3.14159, 0.01).to_float() == pytest.approx(3.14)

    def test_zero_disables(self):
        """Единица 0 возвращает значение без изменений."""
        assert round_to_multiple(3.14159, 0).to_float() == 3.14159

    def test_callable(self):
        """Единица, вычисленная из значения."""
        result = round_to_multiple(123.4, lambda value: Decimal(10))
        assert result.to_float() == pytest.approx(120)


class TestPermutationOrder:
    """Тесты permutation_order."""

    def test_identity(self):
        """Перестановка 0 → обратный порядок вставки в начало."""
        assert permutation_order(3, 0) == [2, 1, 0]

    def test_three_tokens(self):
        """Перестановка 1 из трёх токенов."""
        assert permutation_order(3, 1) == [2, 0, 1]

    def test_four_tokens(self):
        """Перестановка 1 из четырёх: pentation, tetration, mantissa, exponent."""
        assert permutation_order(4, 1) == [3, 2, 0, 1]

    def test_all_permutations_distinct(self):
        """24 номера дают 24 разных порядка."""
        orders = {tuple(permutation_order(4, p)) for p in range(24)}
        assert len(orders) == 24


# =============================================================================
# ТЕСТЫ: Scientific splits
# =============================================================================


class TestScientifify:
    """Тесты scientifify и hyperscientifify."""

    def test_basic(self):
        """12345 = 1.2345 * 10^4."""
        mantissa, exponent = scientifify(12345)
        assert mantissa.to_float() == pytest.approx(1.2345)
        assert exponent == 4

    def test_rounding_rollover(self):
        """9.9996 с шагом 0.001 → 1 * 10^1."""
        mantissa, exponent = scientifify(9.9996, 10, 0.001)
        assert mantissa.to_float() == pytest.approx(1)
        assert exponent == 1

    def test_other_base(self):
        """1024 = 1 * 2^10."""
        mantissa, exponent = scientifify(1024, 2)
        assert mantissa.to_float() == pytest.approx(1)
        assert exponent == 10

    def test_layer_one(self):
        """Показатель значения на layer 1."""
        mantissa, exponent = scientifify(Decimal("3e500"))
        assert mantissa.to_float() == pytest.approx(3)
        assert exponent.to_float() == pytest.approx(500)

    def test_hyperscientifify(self):
        """10^^3 → мантисса 1, высота 3."""
        mantissa, height = hyperscientifify(TEN.tetrate(3))
        assert mantissa.to_float() == pytest.approx(1)
        assert height == 3

    def test_hyperscientifify_small(self):
        """Значения <= 1 не раскладываются."""
        mantissa, height = hyperscientifify(0.5)
        assert mantissa.to_float() == 0.5
        assert height == 0


# =============================================================================
# ТЕСТЫ: Hypersplit
# =============================================================================


class TestHypersplit:
    """Тесты hypersplit."""

    def test_1e15_maximums_10(self):
        """1e15 при base = 10, maximums = 10 → (1, 15, 0, 0)."""
        assert _floats(hypersplit(1e15, 10, maximums=10)) == pytest.approx((1, 15, 0, 0))

    def test_small_value(self):
        """Значение ниже порога мантиссы не раскладывается."""
        assert _floats(hypersplit(7)) == (7, 0, 0, 0)

    def test_zero(self):
        """0 → все компоненты 0."""
        assert _floats(hypersplit(0)) == (0, 0, 0, 0)

    def test_minnum_skips(self):
        """Значения ниже minnum возвращаются как есть."""
        assert _floats(hypersplit(500, minnum=1000)) == (500, 0, 0, 0)

    def test_mantissa_bounded(self):
        """Мантисса ниже maximums[0]."""
        result = hypersplit(Decimal("4.2e1234"))
        assert 1 <= result.mantissa.to_float() < 10
        assert result.exponent.to_float() == pytest.approx(1234)

    def test_tetration_level(self):
        """Показатель, не помещающийся в 1 цифру, поднимается на уровень тетрации."""
        result = hypersplit(Decimal("1e100"), 10, maximums=(10, 1, 10))
        assert result.tetration.to_float() >= 1
        assert result.exponent.to_float() < 10

    def test_multipliers(self):
        """exp_multipliers масштабируют показываемый exponent."""
        result = hypersplit(1e15, 10, maximums=10, exp_multipliers=(3, 1, 1))
        assert result.exponent.to_float() == pytest.approx(45)

    def test_convergent_base_rejected(self):
        """base <= e^(1/e) → ValueError."""
        with pytest.raises(ValueError, match="base must exceed"):
            hypersplit(100, base=1.2)

    def test_non_positive_maximums_rejected(self):
        """maximums <= 0 → ValueError."""
        with pytest.raises(ValueError, match="maximums must be positive"):
            hypersplit(100, maximums=0)

    def test_huge_value_finite_components(self):
        """10^^20 раскладывается на конечные компоненты."""
        result = hypersplit(TEN.tetrate(20))
        assert all(component.is_finite() for component in result.as_tuple())


class TestHypercombine:
    """Тесты hypercombine."""

    def test_inverse_of_split(self):
        """hypercombine(hypersplit(v)) ≈ v."""
        value = Decimal(123456789)
        combined = hypercombine(hypersplit(value))
        assert combined.to_float() == pytest.approx(123456789)

    def test_inverse_with_multipliers(self):
        """Множители учитываются при восстановлении."""
        result = hypersplit(1e15, 10, maximums=10, exp_multipliers=(3, 1, 1))
        assert hypercombine(result, 10, (3, 1, 1)).to_float() == pytest.approx(1e15)


# =============================================================================
# ТЕСТЫ: Super-root
# =============================================================================


class TestLinearSroot:
    """Тесты linear_sroot."""

    def test_square_super_root(self):
        """x^^2 = 256 → x = 4."""
        assert linear_sroot(256, 2).to_float() == pytest.approx(4, rel=1e-6)

    def test_degree_one(self):
        """Степень 1 возвращает значение."""
        assert linear_sroot(256, 1).to_float() == 256

    def test_small_value(self):
        """Значения <= 1 возвращаются как есть."""
        assert linear_sroot(0.5, 3).to_float() == 0.5
