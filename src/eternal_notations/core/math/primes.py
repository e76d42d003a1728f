"""
Primes — Sieve and Factorization

Простые числа и разложение целых и дробей на множители.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. prime_factorize(0) == [(0, 1)], prime_factorize(1) == []
2. Отрицательные значения начинаются с (-1, 1)
3. Остаток, не делящийся на простые из списка, добавляется как (остаток, 1)
4. prime_factorize_fraction возвращает основания по возрастанию со знаковыми
   показателями; нулевые показатели удаляются
"""

import math
from typing import List, Optional, Sequence, Tuple, Union

from eternal_notations.core.math.continued_fractions import fraction_approximation
from eternal_notations.core.math.eternity import INF, DecimalSource

Factorization = List[Tuple[int, int]]


def primes_array(limit: int) -> List[int]:
    """
    Все простые <= limit (решето Эратосфена).

    Examples:
        >>> primes_array(20)
        [2, 3, 5, 7, 11, 13, 17, 19]
    """
    limit = int(limit)
    if limit < 2:
        return []
    sieve = bytearray([1]) * (limit + 1)
    sieve[0] = sieve[1] = 0
    for p in range(2, math.isqrt(limit) + 1):
        if sieve[p]:
            sieve[p * p :: p] = bytearray(len(range(p * p, limit + 1, p)))
    return [n for n, is_prime in enumerate(sieve) if is_prime]


def _prime_list(primes: Union[int, Sequence[int]]) -> Sequence[int]:
    if isinstance(primes, int):
        return primes_array(primes)
    return primes


def prime_factorize(value: int, primes: Union[int, Sequence[int]]) -> Factorization:
    """
    Разложение целого value на множители из primes.

    Args:
        value: Целое число
        primes: Список простых или верхняя граница для primes_array

    Returns:
        Список (основание, показатель); например 60 → [(2, 2), (3, 1), (5, 1)]
    """
    value = int(value)
    if value == 0:
        return [(0, 1)]
    result: Factorization = []
    if value < 0:
        result.append((-1, 1))
        value = -value
    for prime in _prime_list(primes):
        if value == 1:
            break
        exponent = 0
        while value % prime == 0:
            value //= prime
            exponent += 1
        if exponent > 0:
            result.append((prime, exponent))
    if value > 1:
        result.append((value, 1))
    return result


def prime_factorize_fraction(
    value: DecimalSource,
    primes: Union[int, Sequence[int]],
    precision: DecimalSource,
    max_iterations: Optional[int] = None,
    max_denominator: DecimalSource = INF,
    strict_max_denominator: bool = False,
    max_numerator: DecimalSource = INF,
    strict_max_numerator: bool = False,
) -> Factorization:
    """
    Приближает value дробью и раскладывает её как произведение степеней.

    40/63 → [(2, 3), (3, -2), (5, 1), (7, -1)]
    """
    approximation = fraction_approximation(
        value,
        precision,
        max_iterations,
        max_denominator,
        strict_max_denominator,
        max_numerator,
        strict_max_numerator,
    )
    numerator = int(approximation.numerator.to_float())
    denominator = int(approximation.denominator.to_float())
    if numerator == 0:
        return [(0, 1)]

    result: Factorization = []
    if numerator < 0:
        result.append((-1, 1))
        numerator = -numerator

    prime_list = _prime_list(primes)
    upper = prime_factorize(numerator, prime_list)
    lower = prime_factorize(denominator, prime_list)

    # Остаточные множители могут иметь общий делитель
    if upper and lower:
        shared = math.gcd(upper[-1][0], lower[-1][0])
        if shared > 1:
            upper[-1] = (upper[-1][0] // shared, upper[-1][1])
            lower[-1] = (lower[-1][0] // shared, lower[-1][1])
            if upper[-1][0] == 1:
                upper.pop()
            if lower[-1][0] == 1:
                lower.pop()

    merged = [(base, exponent) for base, exponent in upper]
    merged += [(base, -exponent) for base, exponent in lower]
    merged.sort(key=lambda pair: pair[0])
    for base, exponent in merged:
        if result and result[-1][0] == base:
            result[-1] = (base, result[-1][1] + exponent)
        else:
            result.append((base, exponent))
        if result[-1][1] == 0:
            result.pop()
    return result
