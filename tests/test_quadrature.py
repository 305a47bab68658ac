"""固定次数 Gauss-Legendre 求積のテスト."""

from __future__ import annotations

import math

import numpy as np
import pytest

from pipe_cae.math.quadrature import (
    GAUSS_LEGENDRE_20,
    gauss_legendre_rule,
    integrate_gauss,
    map_rule,
)


class TestGaussLegendre20Table:
    """20点則テーブルの性質."""

    def test_twenty_points(self):
        assert len(GAUSS_LEGENDRE_20) == 20
        assert isinstance(GAUSS_LEGENDRE_20, tuple)

    def test_weights_sum_to_two(self):
        total = sum(w for w, _ in GAUSS_LEGENDRE_20)
        assert total == pytest.approx(2.0, rel=1e-13)

    def test_symmetric_pairs(self):
        for k in range(0, 20, 2):
            w_a, x_a = GAUSS_LEGENDRE_20[k]
            w_b, x_b = GAUSS_LEGENDRE_20[k + 1]
            assert w_a == w_b
            assert x_a == -x_b

    def test_matches_numpy_leggauss(self):
        xi_ref, w_ref = np.polynomial.legendre.leggauss(20)
        pts = sorted(GAUSS_LEGENDRE_20, key=lambda p: p[1])
        np.testing.assert_allclose([p[1] for p in pts], xi_ref, atol=1e-13)
        np.testing.assert_allclose([p[0] for p in pts], w_ref, atol=1e-13)

    def test_exact_for_degree_39(self):
        """20点則は 39 次多項式まで厳密."""
        val = sum(w * x**38 for w, x in GAUSS_LEGENDRE_20)
        assert val == pytest.approx(2.0 / 39.0, rel=1e-10)
        odd = sum(w * x**39 for w, x in GAUSS_LEGENDRE_20)
        assert abs(odd) < 1e-14


class TestMapping:
    """区間写像と積分."""

    def test_map_rule_weights_sum_to_interval(self):
        mapped = map_rule(-0.3, 1.2)
        assert sum(w for w, _ in mapped) == pytest.approx(1.5, rel=1e-13)
        assert all(-0.3 < x < 1.2 for _, x in mapped)

    def test_integrate_sin(self):
        val = integrate_gauss(math.sin, 0.0, math.pi)
        assert float(val) == pytest.approx(2.0, rel=1e-12)

    def test_integrate_matrix_valued(self):
        def func(x):
            return np.array([[1.0, x], [x, x * x]])

        val = integrate_gauss(func, -1.0, 2.0)
        expected = np.array([[3.0, 1.5], [1.5, 3.0]])
        np.testing.assert_allclose(val, expected, rtol=1e-12)

    def test_custom_rule(self):
        rule = gauss_legendre_rule(3)
        val = integrate_gauss(lambda x: x**4, 0.0, 1.0, rule=rule)
        assert float(val) == pytest.approx(0.2, rel=1e-12)

    def test_empty_rule_raises(self):
        with pytest.raises(ValueError, match="空"):
            integrate_gauss(math.sin, 0.0, 1.0, rule=())

    def test_invalid_order_raises(self):
        with pytest.raises(ValueError, match="1以上"):
            gauss_legendre_rule(0)
