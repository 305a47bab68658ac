"""管断面（PipeSection）のテスト."""

from __future__ import annotations

import dataclasses
import math

import pytest

from pipe_cae.core.capability import (
    MassPerLength,
    OuterDiameter,
    PipeSectionProtocol,
    ShearCorrectionFactor,
    WallThickness,
)
from pipe_cae.sections.pipe import ALPHA_V_RIGID, PipeSection

D_OUT = 0.1
WALL = 0.01


class TestFromDimensions:
    """外径・肉厚からの断面諸量."""

    def test_area_and_inertia(self):
        sec = PipeSection.from_dimensions(D_OUT, WALL)
        d_in = D_OUT - 2 * WALL
        assert sec.A == pytest.approx(math.pi * (D_OUT**2 - d_in**2) / 4.0)
        assert sec.Iy == pytest.approx(math.pi * (D_OUT**4 - d_in**4) / 64.0)
        assert sec.Iz == sec.Iy
        assert sec.J == pytest.approx(2.0 * sec.Iy)

    def test_derived_radii(self):
        sec = PipeSection.from_dimensions(D_OUT, WALL)
        assert sec.d_inner == pytest.approx(0.08)
        assert sec.mean_radius == pytest.approx(0.045)

    def test_from_density(self):
        sec = PipeSection.from_density(D_OUT, WALL, density=7850.0)
        assert sec.rho == pytest.approx(7850.0 * sec.A)

    def test_wall_too_thick_raises(self):
        with pytest.raises(ValueError, match="肉厚"):
            PipeSection.from_dimensions(0.1, 0.06)

    def test_frozen(self):
        sec = PipeSection.from_dimensions(D_OUT, WALL)
        with pytest.raises(dataclasses.FrozenInstanceError):
            sec.A = 1.0  # type: ignore[misc]


class TestValidation:
    """直接生成時の検証."""

    @pytest.mark.parametrize("field,value", [("A", 0.0), ("Iy", -1.0), ("Iz", 0.0), ("J", 0.0)])
    def test_nonpositive_properties_raise(self, field, value):
        base = PipeSection.from_dimensions(D_OUT, WALL)
        with pytest.raises(ValueError):
            dataclasses.replace(base, **{field: value})

    def test_negative_rho_raises(self):
        base = PipeSection.from_dimensions(D_OUT, WALL)
        with pytest.raises(ValueError, match="rho"):
            dataclasses.replace(base, rho=-1.0)


class TestShearFactor:
    """せん断形状係数."""

    def test_rigid_sentinel(self):
        sec = PipeSection.from_dimensions(D_OUT, WALL, alpha_v=ALPHA_V_RIGID + 1.0)
        assert sec.shear_rigid
        sec0 = PipeSection.from_dimensions(D_OUT, WALL, alpha_v=0.0)
        assert sec0.shear_rigid
        assert not PipeSection.from_dimensions(D_OUT, WALL).shear_rigid

    def test_cowper_thin_wall_limit(self):
        nu = 0.3
        sec = PipeSection.from_dimensions(1.0, 1e-6)
        expected = (4.0 + 3.0 * nu) / (2.0 * (1.0 + nu))
        assert sec.cowper_alpha_v(nu) == pytest.approx(expected, rel=1e-4)

    def test_cowper_solid_limit(self):
        nu = 0.3
        sec = PipeSection.from_dimensions(1.0, 0.5)
        expected = (7.0 + 6.0 * nu) / (6.0 * (1.0 + nu))
        assert sec.cowper_alpha_v(nu) == pytest.approx(expected, rel=1e-12)


class TestProtocol:
    """能力インタフェース適合."""

    def test_conforms(self):
        sec = PipeSection.from_dimensions(D_OUT, WALL)
        assert isinstance(sec, PipeSectionProtocol)
        for proto in (OuterDiameter, WallThickness, ShearCorrectionFactor, MassPerLength):
            assert isinstance(sec, proto)

    def test_partial_object_does_not_conform(self):
        class Rod:
            A = 1.0
            Iy = 1.0
            Iz = 1.0
            J = 1.0

        assert not isinstance(Rod(), PipeSectionProtocol)
