"""断面・材料の能力（capability）インタフェース定義.

曲がり管要素が依存する性質だけを小さな Protocol に分割して定義する。
具象クラス（PipeSection, PipeMaterial 等）は継承不要で、属性・メソッドを
持っていれば適合する（構造的部分型）。

断面側:
  OuterDiameter              — 外径 d_outer
  WallThickness              — 肉厚 wall
  ShearCorrectionFactor      — せん断形状係数 alpha_v（A/alpha_v が有効せん断断面積）
  SectionStiffnessProperties — A, Iy, Iz, J
  MassPerLength              — 単位長さあたり質量 rho
  PipeSectionProtocol        — 上記すべて

材料側（温度依存）:
  ElasticModuli              — E(T), G(T), ν(T)
  ThermalExpansion           — α(T)
  PipeMaterialProtocol       — 上記すべて

ダウンキャストによる型判定の代わりに、要素生成時に
isinstance(obj, PipeSectionProtocol) で一度だけ適合性を確認する。
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class OuterDiameter(Protocol):
    """外径を持つ断面."""

    d_outer: float


@runtime_checkable
class WallThickness(Protocol):
    """肉厚を持つ断面."""

    wall: float


@runtime_checkable
class ShearCorrectionFactor(Protocol):
    """せん断形状係数を持つ断面.

    有効せん断断面積は A / alpha_v。alpha_v > 99 または alpha_v <= 0 は
    「せん断変形を無視」を意味する。
    """

    alpha_v: float


@runtime_checkable
class SectionStiffnessProperties(Protocol):
    """剛性計算に必要な断面諸量."""

    A: float
    Iy: float
    Iz: float
    J: float


@runtime_checkable
class MassPerLength(Protocol):
    """単位長さあたり質量."""

    rho: float


@runtime_checkable
class PipeSectionProtocol(
    OuterDiameter,
    WallThickness,
    ShearCorrectionFactor,
    SectionStiffnessProperties,
    MassPerLength,
    Protocol,
):
    """曲がり管要素が要求する断面の能力セット."""


@runtime_checkable
class ElasticModuli(Protocol):
    """温度依存の弾性定数."""

    def elastic_modulus(self, temperature: float) -> float:
        """ヤング率 E(T)."""
        ...

    def shear_modulus(self, temperature: float) -> float:
        """せん断弾性率 G(T)."""
        ...

    def poisson_ratio(self, temperature: float) -> float:
        """ポアソン比 ν(T)."""
        ...


@runtime_checkable
class ThermalExpansion(Protocol):
    """温度依存の線膨張係数."""

    def thermal_expansion(self, temperature: float) -> float:
        """線膨張係数 α(T)."""
        ...


@runtime_checkable
class PipeMaterialProtocol(ElasticModuli, ThermalExpansion, Protocol):
    """曲がり管要素が要求する材料の能力セット."""
