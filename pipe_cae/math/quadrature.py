"""固定次数 Gauss-Legendre 求積.

GAUSS_LEGENDRE_20 は [-1, 1] 上の 20 点則を (重み w_i, 座標 ξ_i) の組で
保持する不変テーブル。対称な10組を内側から順に並べている。
曲がり管要素の数値結果はこの表に依存するため、要素側では表を差し替え
可能な引数として受け取るが、既定値は常にこの表とする。

区間 [a, b] への写像:
  x_i = p·ξ_i + q,  p = (b - a)/2,  q = (b + a)/2
  ∫_a^b f(x) dx ≈ Σ p·w_i f(x_i)
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

import numpy as np

QuadratureRule = Sequence[tuple[float, float]]

GAUSS_LEGENDRE_20: tuple[tuple[float, float], ...] = (
    (0.1527533871307258, -0.0765265211334973),
    (0.1527533871307258, 0.0765265211334973),
    (0.1491729864726037, -0.2277858511416451),
    (0.1491729864726037, 0.2277858511416451),
    (0.1420961093183820, -0.3737060887154195),
    (0.1420961093183820, 0.3737060887154195),
    (0.1316886384491766, -0.5108670019508271),
    (0.1316886384491766, 0.5108670019508271),
    (0.1181945319615184, -0.6360536807265150),
    (0.1181945319615184, 0.6360536807265150),
    (0.1019301198172404, -0.7463319064601508),
    (0.1019301198172404, 0.7463319064601508),
    (0.0832767415767048, -0.8391169718222188),
    (0.0832767415767048, 0.8391169718222188),
    (0.0626720483341091, -0.9122344282513259),
    (0.0626720483341091, 0.9122344282513259),
    (0.0406014298003869, -0.9639719272779138),
    (0.0406014298003869, 0.9639719272779138),
    (0.0176140071391521, -0.9931285991850949),
    (0.0176140071391521, 0.9931285991850949),
)


def gauss_legendre_rule(n: int) -> tuple[tuple[float, float], ...]:
    """n 点 Gauss-Legendre 則を (w, ξ) の組で返す（検証用の高次則など）."""
    if n < 1:
        raise ValueError(f"積分点数 n は1以上: {n}")
    xi, w = np.polynomial.legendre.leggauss(n)
    return tuple((float(wi), float(x)) for wi, x in zip(w, xi, strict=True))


def map_rule(a: float, b: float, rule: QuadratureRule = GAUSS_LEGENDRE_20) -> list[tuple[float, float]]:
    """[-1, 1] 上の則を [a, b] に写像した (重み, 座標) のリストを返す."""
    p = (b - a) / 2.0
    q = (b + a) / 2.0
    return [(w * p, xi * p + q) for w, xi in rule]


def integrate_gauss(
    func: Callable[[float], np.ndarray],
    a: float,
    b: float,
    rule: QuadratureRule = GAUSS_LEGENDRE_20,
) -> np.ndarray:
    """配列値関数 func を [a, b] で数値積分する.

    Args:
        func: x → ndarray（スカラー・ベクトル・行列いずれも可）
        a: 下限
        b: 上限
        rule: [-1, 1] 上の (w, ξ) 組

    Returns:
        積分値（func の戻り値と同じ形状）
    """
    total: np.ndarray | None = None
    for w, x in map_rule(a, b, rule):
        term = w * np.asarray(func(x), dtype=float)
        total = term if total is None else total + term
    if total is None:
        raise ValueError("積分則が空です。")
    return total
