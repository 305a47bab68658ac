"""曲がり管要素カーネル（幾何・bx・fs・Spx・kb・plw）のテスト.

検証項目:
  - 円弧幾何の算出と検証エラー
  - 直線極限で直線梁の基本系柔性に一致
  - fb の対称性
  - 無荷重で ub0 = pb0 = 0
  - 内圧項の線形性と曲率変化の向き
  - 1/4 円弧で kb が対称正定値、高次積分と一致
  - 固定端力 plw の力・モーメント釣合い
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from pipe_cae.core.results import PipeProperties
from pipe_cae.elements.curved_pipe import (
    curved_pipe_bx,
    curved_pipe_fs,
    curved_pipe_kb,
    curved_pipe_plw,
    curved_pipe_spx,
    integrate_basic_flexibility,
    pressure_locked_deformation,
    solve_arc_geometry,
    thermal_locked_deformation,
)
from pipe_cae.math.quadrature import gauss_legendre_rule
from pipe_cae.sections.pipe import PipeSection

# =====================================================================
# テストパラメータ
# =====================================================================
E = 200e9  # Pa
NU = 0.3
G = E / (2.0 * (1.0 + NU))
D_OUT = 0.1
WALL = 0.01


def _props(alpha_v: float = 2.0, alpha: float = 1.2e-5) -> PipeProperties:
    sec = PipeSection.from_dimensions(D_OUT, WALL, alpha_v=alpha_v)
    return PipeProperties(
        E=E,
        G=G,
        alpha=alpha,
        nu=NU,
        A=sec.A,
        Iy=sec.Iy,
        Iz=sec.Iz,
        J=sec.J,
        alpha_v=alpha_v,
        d_outer=D_OUT,
        wall=WALL,
        rho=0.0,
    )


def _quarter_circle(radius: float = 1.0):
    return solve_arc_geometry(
        np.array([radius, 0.0, 0.0]),
        np.array([0.0, radius, 0.0]),
        np.zeros(3),
        WALL,
        0.1,
    )


def _arc_with_chord(length: float, radius: float):
    """弦長 length, 半径 radius の円弧幾何（中心は原点、弦は y 軸に垂直）."""
    half = 0.5 * length
    h = math.sqrt(radius**2 - half**2)
    return solve_arc_geometry(
        np.array([-half, h, 0.0]),
        np.array([half, h, 0.0]),
        np.zeros(3),
        WALL,
        0.1,
    )


def _straight_beam_fb(length: float, props: PipeProperties) -> np.ndarray:
    """直線梁の基本系柔性（せん断変形込み）."""
    L = length
    fb = np.zeros((6, 6))
    fb[0, 0] = L / (E * props.A)
    bend = np.array([[2.0, -1.0], [-1.0, 2.0]])
    shear = np.ones((2, 2)) / (G * (props.A / props.alpha_v) * L)
    fb[1:3, 1:3] = L / (6.0 * E * props.Iz) * bend + shear
    fb[3:5, 3:5] = L / (6.0 * E * props.Iy) * bend + shear
    fb[5, 5] = L / (G * props.J)
    return fb


# =====================================================================
# 幾何
# =====================================================================


class TestArcGeometry:
    """円弧幾何の算出."""

    def test_quarter_circle(self):
        g = _quarter_circle(2.0)
        assert g.radius == pytest.approx(2.0)
        assert g.theta0 == pytest.approx(math.pi / 4.0)
        assert g.length == pytest.approx(2.0 * math.sqrt(2.0))
        assert g.arc_length == pytest.approx(math.pi)

    def test_radius_mismatch_raises(self):
        with pytest.raises(ValueError, match="肉厚"):
            solve_arc_geometry(
                np.array([1.0, 0.0, 0.0]),
                np.array([0.0, 1.02, 0.0]),
                np.zeros(3),
                WALL,
                0.1,
            )

    def test_small_mismatch_within_tolerance(self):
        g = solve_arc_geometry(
            np.array([1.0, 0.0, 0.0]),
            np.array([0.0, 1.0005, 0.0]),
            np.zeros(3),
            WALL,
            0.1,
        )
        assert g.radius == pytest.approx(1.00025)
        assert g.r_j - g.r_i == pytest.approx(0.0005)

    def test_near_half_circle_raises(self):
        with pytest.raises(ValueError, match="178"):
            solve_arc_geometry(
                np.array([1.0, 0.0, 0.0]),
                np.array([-1.0, 0.001, 0.0]),
                np.zeros(3),
                WALL,
                0.1,
            )

    def test_zero_radius_raises(self):
        with pytest.raises(ValueError, match="半径"):
            solve_arc_geometry(np.zeros(3), np.zeros(3), np.zeros(3), WALL, 0.1)


# =====================================================================
# 点ごとのカーネル
# =====================================================================


class TestPointKernels:
    """bx, fs, Spx, plw."""

    def test_bx_end_moments(self):
        """端部で Mz が端モーメント（符号規約込み）に一致."""
        g = _quarter_circle()
        bx_i = curved_pipe_bx(-g.theta0, g.theta0, g.radius, g.length)
        bx_j = curved_pipe_bx(g.theta0, g.theta0, g.radius, g.length)
        np.testing.assert_allclose(bx_i[1], [0.0, -1.0, 0.0, 0.0, 0.0, 0.0], atol=1e-14)
        np.testing.assert_allclose(bx_j[1], [0.0, 0.0, 1.0, 0.0, 0.0, 0.0], atol=1e-14)

    def test_bx_invalid_geometry_raises(self):
        with pytest.raises(ValueError):
            curved_pipe_bx(0.0, 0.1, 0.0, 1.0)
        with pytest.raises(ValueError):
            curved_pipe_bx(0.0, 0.1, 1.0, 0.0)

    def test_fs_diagonal(self):
        props = _props()
        fs = curved_pipe_fs(0.3, props)
        assert np.count_nonzero(fs - np.diag(np.diag(fs))) == 0
        assert fs[0, 0] == pytest.approx(1.0 / (E * props.A))
        assert fs[3, 3] == pytest.approx(1.0 / (G * props.J))
        assert fs[4, 4] == pytest.approx(props.alpha_v / (G * props.A))

    @pytest.mark.parametrize("alpha_v", [100.0, 0.0, -1.0])
    def test_fs_shear_rigid(self, alpha_v):
        fs = curved_pipe_fs(0.0, _props(alpha_v=alpha_v))
        assert fs[4, 4] == 0.0
        assert fs[5, 5] == 0.0

    def test_spx_vanishes_without_load(self):
        g = _quarter_circle()
        np.testing.assert_array_equal(curved_pipe_spx(0.2, g.theta0, g.radius, g.length), 0.0)

    def test_spx_zero_moment_at_free_end(self):
        """特解は J 端で曲げモーメント 0."""
        g = _quarter_circle()
        spx = curved_pipe_spx(g.theta0, g.theta0, g.radius, g.length, 1.0, 2.0, 3.0)
        assert spx[1] == pytest.approx(0.0, abs=1e-12)
        assert spx[2] == pytest.approx(0.0, abs=1e-12)
        assert spx[3] == pytest.approx(0.0, abs=1e-12)

    def test_plw_force_balance(self):
        g = _quarter_circle()
        wx, wy, wz = 1.0, -2.0, 0.5
        p = curved_pipe_plw(g.theta0, g.radius, g.length, wx, wy, wz)
        arc = g.arc_length
        assert p[0] == pytest.approx(-wx * arc)
        assert p[1] + p[2] == pytest.approx(-wy * arc)
        assert p[3] + p[4] == pytest.approx(-wz * arc)

    def test_plw_moment_balance(self):
        """弦中点まわりの荷重モーメントと固定端力のモーメントが釣り合う."""
        g = _quarter_circle()
        R, t0, L = g.radius, g.theta0, g.length
        wx, wy, wz = 0.7, 0.0, 1.3
        p = curved_pipe_plw(t0, R, L, wx, wy, wz)
        # 荷重の弦中点まわりモーメント（局所 x, z 成分）
        load_mx = -2.0 * wz * R**2 * (math.sin(t0) - t0 * math.cos(t0))
        load_mz = 2.0 * wx * R**2 * (math.sin(t0) - t0 * math.cos(t0))
        end_mx = p[5]
        end_mz = (-0.5 * L) * p[1] + (0.5 * L) * p[2]
        assert end_mx + load_mx == pytest.approx(0.0, abs=1e-12)
        assert end_mz + load_mz == pytest.approx(0.0, abs=1e-12)


# =====================================================================
# 積分と kb
# =====================================================================


class TestBasicFlexibility:
    """fb, ub0, kb."""

    def test_straight_limit(self):
        """R → ∞ で直線梁の基本系柔性に一致."""
        L = 1.0
        props = _props()
        g = _arc_with_chord(L, 1.0e4 * L)
        fb, _ = integrate_basic_flexibility(g, props)
        fb_s = _straight_beam_fb(L, props)
        scale = 1.0 / np.sqrt(np.diag(fb_s))
        np.testing.assert_allclose(
            fb * np.outer(scale, scale),
            fb_s * np.outer(scale, scale),
            atol=1e-3,
        )

    def test_kb_inverts_fb(self):
        g = _quarter_circle(0.8)
        props = _props()
        fb, _ = integrate_basic_flexibility(g, props)
        kb, _, _ = curved_pipe_kb(g, props)
        np.testing.assert_allclose(kb @ fb, np.eye(6), atol=1e-8)

    def test_fb_symmetric(self):
        g = _quarter_circle(1.5)
        fb, _ = integrate_basic_flexibility(g, _props(), 1.0, 2.0, 3.0)
        np.testing.assert_allclose(fb, fb.T, rtol=1e-12, atol=1e-12 * np.abs(fb).max())

    def test_zero_load_idempotent(self):
        g = _quarter_circle()
        result = curved_pipe_kb(g, _props())
        np.testing.assert_array_equal(result.ub0, 0.0)
        np.testing.assert_array_equal(result.pb0, 0.0)

    def test_quarter_circle_spd(self):
        g = _quarter_circle(1.2)
        props = _props()
        kb, _, _ = curved_pipe_kb(g, props)
        np.testing.assert_allclose(kb, kb.T, rtol=1e-8, atol=1e-8 * np.abs(kb).max())
        assert np.linalg.eigvalsh(0.5 * (kb + kb.T)).min() > 0.0

    def test_quarter_circle_matches_high_order(self):
        g = _quarter_circle(1.2)
        props = _props()
        kb20, pb20, _ = curved_pipe_kb(g, props, 1.0, -3.0, 2.0)
        kb64, pb64, _ = curved_pipe_kb(g, props, 1.0, -3.0, 2.0, rule=gauss_legendre_rule(64))
        np.testing.assert_allclose(kb20, kb64, rtol=1e-6, atol=1e-6 * np.abs(kb64).max())
        np.testing.assert_allclose(pb20, pb64, rtol=1e-6, atol=1e-6 * np.abs(pb64).max())

    def test_pb0_is_minus_kb_ub0(self):
        g = _quarter_circle()
        kb, pb0, ub0 = curved_pipe_kb(g, _props(), 0.0, 10.0, -5.0, d_temp=30.0, pressure=2e6)
        np.testing.assert_allclose(pb0, -kb @ ub0)

    def test_singular_flexibility_raises(self):
        g = _quarter_circle()
        props = _props()._replace(E=np.inf, G=np.inf)
        with pytest.raises(np.linalg.LinAlgError):
            curved_pipe_kb(g, props)


# =====================================================================
# 熱・内圧
# =====================================================================


class TestThermalAndPressure:
    """拘束変形の熱・内圧寄与."""

    def test_thermal_is_chord_expansion(self):
        g = _quarter_circle(2.0)
        vec = thermal_locked_deformation(g.radius, g.theta0, 1.2e-5, 50.0)
        assert vec[0] == pytest.approx(1.2e-5 * 50.0 * g.length)
        np.testing.assert_array_equal(vec[1:], 0.0)

    def test_thermal_ignores_non_positive_rise(self):
        g = _quarter_circle()
        np.testing.assert_array_equal(thermal_locked_deformation(g.radius, g.theta0, 1.2e-5, -20.0), 0.0)

    def test_pressure_linear(self):
        g = _quarter_circle(0.5)
        args = (g.radius, g.theta0, D_OUT, WALL, E, NU)
        v1 = pressure_locked_deformation(1.0e6, *args)
        v2 = pressure_locked_deformation(2.0e6, *args)
        np.testing.assert_allclose(v2, 2.0 * v1, rtol=1e-4)

    def test_pressure_straightens_bend(self):
        """内圧で曲率が減少する（Bourdon 効果）."""
        g = _quarter_circle(0.5)
        v = pressure_locked_deformation(5.0e6, g.radius, g.theta0, D_OUT, WALL, E, NU)
        assert v[1] > 0.0
        assert v[2] < 0.0
        assert v[1] == pytest.approx(-v[2])
        np.testing.assert_array_equal(v[3:], 0.0)

    def test_zero_pressure(self):
        g = _quarter_circle()
        v = pressure_locked_deformation(0.0, g.radius, g.theta0, D_OUT, WALL, E, NU)
        np.testing.assert_array_equal(v, 0.0)

    def test_radius_below_pipe_radius_raises(self):
        with pytest.raises(ValueError, match="平均半径"):
            pressure_locked_deformation(1e6, 0.04, 0.5, D_OUT, WALL, E, NU)
