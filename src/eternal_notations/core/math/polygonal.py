"""
Polygonal Numbers

polygon(n, s) - n-е s-угольное число, продолженное на вещественные n:

    P(n, s) = ((n - 1)(s - 2) + 2) * n / 2

polygon_root(x, s) - положительный корень P(n, s) = x относительно n:

    n = (sqrt(8(s - 2)x + (s - 4)^2) + s - 4) / (2s - 4)

Примеры (s = 3, треугольные числа):
    polygon(4, 3) = 10
    polygon_root(10, 3) = 4
"""

from eternal_notations.core.math.eternity import Decimal, DecimalSource, to_decimal


def polygon(n: DecimalSource, sides: DecimalSource = 3) -> Decimal:
    """n-е polygonal число со sides сторонами."""
    n = to_decimal(n)
    sides = to_decimal(sides)
    return n.sub(1).mul(sides.sub(2)).add(2).mul(n).div(2)


def polygon_root(value: DecimalSource, sides: DecimalSource = 3) -> Decimal:
    """Обратная к polygon по n (положительная ветвь)."""
    value = to_decimal(value)
    sides = to_decimal(sides)
    shift = sides.sub(4)
    discriminant = value.mul(sides.sub(2)).mul(8).add(shift.sqr())
    return discriminant.sqrt().add(shift).div(sides.mul(2).sub(4))
