"""
Тесты для Eternity — Layered Arbitrary-Magnitude Decimal

Проверяемые инварианты:
1. Конструирование из int / float / str / Decimal
2. Нормализация: переполнение float уходит на следующий layer
3. NaN распространяется, сравнения с NaN ложны
4. Арифметика и степени на слоях 0 и 1
5. Тетрация / slog / iteratedlog ограничены и согласованы
6. eq_tolerance и операторы Python
"""

import math

import pytest

from eternal_notations.core.math.eternity import (
    INF,
    NAN,
    NEG_INF,
    ONE,
    TEN,
    ZERO,
    Decimal,
    to_decimal,
)


# =============================================================================
# ТЕСТЫ: Конструирование
# =============================================================================


class TestConstruction:
    """Тесты создания Decimal."""

    def test_from_int_and_float(self):
        """int и float дают одинаковое значение."""
        assert Decimal(5) == Decimal(5.0)
        assert Decimal(5).to_float() == 5.0
        assert hash(Decimal(2)) == hash(Decimal(2.0))

    def test_from_big_int(self):
        """Целое больше 2^1023 переходит на layer 1."""
        value = Decimal(10**400)
        assert value.layer == 1
        assert value.mag == pytest.approx(400)

    def test_from_scientific_string(self):
        """Строка "1e400" больше любого float."""
        value = Decimal("1e400")
        assert value > Decimal(1e308)
        assert str(value) == "1e400"

    def test_from_special_strings(self):
        """NaN и бесконечности разбираются из строк."""
        assert Decimal("NaN").is_nan()
        assert Decimal("Infinity") == INF
        assert Decimal("-inf") == NEG_INF

    def test_from_f_string(self):
        """"F10" - башня из десяти десяток."""
        assert Decimal("F10") > Decimal("eeeee100")
        assert Decimal("F10").is_finite()

    def test_unsupported_type(self):
        """Неподдерживаемый тип → TypeError."""
        with pytest.raises(TypeError):
            Decimal([1, 2])

    def test_to_decimal_passthrough(self):
        """to_decimal не копирует Decimal."""
        value = Decimal(3)
        assert to_decimal(value) is value


# =============================================================================
# ТЕСТЫ: Нормализация и переполнение
# =============================================================================


class TestOverflow:
    """Переполнение float → следующий layer, не Infinity."""

    def test_mul_overflow(self):
        """1e308 * 1e308 конечно."""
        value = Decimal(1e308).mul(1e308)
        assert value.is_finite()
        assert value.layer == 1
        assert value.mag == pytest.approx(616)

    def test_add_overflow(self):
        """1.5e308 + 1.5e308 конечно и больше слагаемых."""
        value = Decimal(1.5e308).add(1.5e308)
        assert value.is_finite()
        assert value > Decimal(1.5e308)

    def test_mul_underflow(self):
        """1e-300 * 1e-300 не обнуляется."""
        value = Decimal(1e-300).mul(1e-300)
        assert value.sign == 1
        assert value < Decimal(1e-300)

    def test_div_overflow(self):
        """1e300 / 1e-300 конечно."""
        value = Decimal(1e300).div(1e-300)
        assert value.is_finite()
        assert value.mag == pytest.approx(600)

    def test_pow_overflow(self):
        """10^1000 уходит на layer 1."""
        value = TEN.pow(1000)
        assert value.layer == 1
        assert value.mag == pytest.approx(1000)

    def test_to_float_saturates(self):
        """Слишком большое значение → inf, слишком маленькое → 0."""
        assert Decimal("1e400").to_float() == math.inf
        assert Decimal("1e-400").to_float() == 0.0


# =============================================================================
# ТЕСТЫ: NaN и бесконечности
# =============================================================================


class TestSpecialValues:
    """NaN и Infinity."""

    def test_nan_propagates(self):
        """Арифметика с NaN даёт NaN."""
        assert NAN.add(1).is_nan()
        assert Decimal(2).mul(NAN).is_nan()
        assert NAN.pow(2).is_nan()

    def test_nan_comparisons_false(self):
        """NaN не равен и не упорядочен ни с чем."""
        assert not (NAN == NAN)
        assert not (NAN < 1)
        assert not (NAN > 1)

    def test_recip_of_zero_is_nan(self):
        """1 / 0 → NaN (обратное нуля не определено)."""
        assert ZERO.recip().is_nan()

    def test_recip_of_infinity(self):
        """1 / Infinity → 0."""
        assert INF.recip() == ZERO

    def test_infinity_predicates(self):
        """is_infinite / is_finite."""
        assert INF.is_infinite()
        assert not INF.is_finite()
        assert NEG_INF.sign == -1


# =============================================================================
# ТЕСТЫ: Арифметика
# =============================================================================


class TestArithmetic:
    """Базовые операции."""

    def test_add_sub(self):
        """Сложение и вычитание на layer 0."""
        assert Decimal(5).add(3) == 8
        assert Decimal(5).sub(8) == -3
        assert Decimal(5).sub(5) == ZERO

    def test_mul_div(self):
        """Умножение и деление."""
        assert Decimal(6).mul(7) == 42
        assert Decimal(1).div(4).to_float() == 0.25

    def test_pow_root(self):
        """Степень и корень."""
        assert Decimal(2).pow(10) == 1024
        assert Decimal(8).root(3).to_float() == pytest.approx(2)
        assert Decimal(2).sqrt().to_float() == pytest.approx(math.sqrt(2))

    def test_logs(self):
        """log10, log, ln."""
        assert Decimal(1e10).log10().to_float() == pytest.approx(10)
        assert Decimal(8).log(2).to_float() == pytest.approx(3)
        assert Decimal(math.e).ln().to_float() == pytest.approx(1)

    def test_layer_one_logs(self):
        """log10 значения на layer 1 - его mag."""
        assert Decimal("1e500").log10().to_float() == pytest.approx(500)

    def test_rounding(self):
        """floor, ceil, round, trunc."""
        value = Decimal(3.7)
        assert value.floor() == 3
        assert value.ceil() == 4
        assert value.round() == 4
        assert Decimal(-3.7).trunc() == -3

    def test_mod(self):
        """Остаток от деления."""
        assert Decimal(7.5).mod(2).to_float() == pytest.approx(1.5)

    def test_neg_abs(self):
        """Знак и модуль."""
        assert Decimal(-5).sign == -1
        assert Decimal(-5).abs() == 5
        assert Decimal(5).neg() == -5


# =============================================================================
# ТЕСТЫ: Гипероператоры
# =============================================================================


class TestHyperoperators:
    """tetrate / iteratedexp / iteratedlog / slog."""

    def test_tetrate_three(self):
        """10^^3 = 10^10^10."""
        assert str(TEN.tetrate(3)) == "1e10000000000"

    def test_iteratedexp_payload(self):
        """10^(10^2) = 1e100."""
        assert TEN.iteratedexp(2, 2).to_float() == pytest.approx(1e100)

    def test_tetrate_large_height_finite(self):
        """Огромная высота считается за ограниченное время."""
        value = TEN.tetrate(1e6)
        assert value.is_finite()
        assert value.layer > 1000

    def test_slog_of_ten(self):
        """slog(10) == 1, slog(1) == 0."""
        assert TEN.slog(10).to_float() == pytest.approx(1)
        assert ONE.slog(10).to_float() == pytest.approx(0)

    def test_slog_inverts_tetrate(self):
        """slog(10^^h) ≈ h для целых h."""
        assert TEN.tetrate(5).slog(10).to_float() == pytest.approx(5)

    def test_iteratedlog(self):
        """Два логарифма от 1e100 дают 2."""
        assert Decimal(1e100).iteratedlog(10, 2).to_float() == pytest.approx(2)

    def test_iteratedlog_inverts_iteratedexp(self):
        """iteratedlog(iteratedexp(x, n), n) ≈ x."""
        value = TEN.iteratedexp(4, 3)
        assert value.iteratedlog(10, 4).to_float() == pytest.approx(3)


# =============================================================================
# ТЕСТЫ: Сравнение и операторы
# =============================================================================


class TestComparisonAndOperators:
    """Сравнения, eq_tolerance, операторы Python."""

    def test_ordering_across_layers(self):
        """Значения разных слоёв упорядочены."""
        assert Decimal(1e300) < Decimal("1e400") < Decimal("ee400")
        assert Decimal("-1e400") < Decimal(-1)

    def test_ordering_with_numbers(self):
        """Сравнение с int и float."""
        assert Decimal(3) < 4
        assert Decimal(3) >= 3.0

    def test_eq_tolerance(self):
        """Относительная погрешность по mag."""
        assert Decimal(1).eq_tolerance(1.00000001)
        assert not Decimal(1).eq_tolerance(1.1)
        assert not NAN.eq_tolerance(NAN)

    def test_operators(self):
        """+, -, *, /, ** и унарные операторы."""
        assert Decimal(2) * 3 == 6
        assert 1 / Decimal(4) == 0.25
        assert Decimal(2) ** 3 == 8
        assert 10 - Decimal(4) == 6
        assert -Decimal(2) == -2
        assert abs(Decimal(-2)) == 2

    def test_str(self):
        """Строковое представление."""
        assert str(Decimal(1234.5)) == "1234.5"
        assert str(Decimal(0)) == "0"
        assert str(NAN) == "NaN"
        assert str(NEG_INF) == "-Infinity"
