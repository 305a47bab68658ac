"""管（パイプ）の断面特性モデル.

PipeSection — 外径・肉厚を持つ中空円形断面（PipeSectionProtocol 適合）

せん断形状係数 alpha_v:
  有効せん断断面積 As = A / alpha_v。Timoshenko のせん断補正係数 κ の逆数。
  alpha_v > 99 は「せん断剛性無限大（せん断変形を無視）」の番兵値。

  Cowper (1966) の中空円形断面の補正係数（m = r_i / r_o）:
    κ = 6(1+ν)(1+m²)² / ((7+6ν)(1+m²)² + (20+12ν)m²)
  薄肉極限 (m→1) で κ → 2(1+ν)/(4+3ν)、alpha_v ≈ 1.9（ν=0.3）。

  参考文献:
    Cowper, G.R. (1966) "The shear coefficient in Timoshenko's beam theory",
    J. Applied Mechanics, 33, 335-340.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

# せん断変形を無視する番兵値の閾値
ALPHA_V_RIGID = 99.0


@dataclass(frozen=True)
class PipeSection:
    """管断面の特性.

    Attributes:
        d_outer: 外径
        wall: 肉厚
        A: 断面積
        Iy: y軸（局所）まわり断面二次モーメント
        Iz: z軸（局所）まわり断面二次モーメント
        J: ねじり定数
        alpha_v: せん断形状係数（A/alpha_v が有効せん断断面積）
        rho: 単位長さあたり質量（0 = 質量なし）
    """

    d_outer: float
    wall: float
    A: float
    Iy: float
    Iz: float
    J: float
    alpha_v: float = 2.0
    rho: float = 0.0

    def __post_init__(self) -> None:
        if self.d_outer <= 0:
            raise ValueError(f"外径 d_outer は正値でなければなりません: {self.d_outer}")
        if self.wall <= 0 or self.wall > 0.5 * self.d_outer:
            raise ValueError(
                f"肉厚 wall は 0 < wall <= d_outer/2 でなければなりません: "
                f"wall={self.wall}, d_outer={self.d_outer}"
            )
        if self.A <= 0:
            raise ValueError(f"断面積 A は正値でなければなりません: {self.A}")
        if self.Iy <= 0:
            raise ValueError(f"断面二次モーメント Iy は正値でなければなりません: {self.Iy}")
        if self.Iz <= 0:
            raise ValueError(f"断面二次モーメント Iz は正値でなければなりません: {self.Iz}")
        if self.J <= 0:
            raise ValueError(f"ねじり定数 J は正値でなければなりません: {self.J}")
        if self.rho < 0:
            raise ValueError(f"単位長さ質量 rho は非負でなければなりません: {self.rho}")

    @property
    def d_inner(self) -> float:
        """内径."""
        return self.d_outer - 2.0 * self.wall

    @property
    def mean_radius(self) -> float:
        """肉厚中心の半径 (d_outer - wall)/2."""
        return 0.5 * (self.d_outer - self.wall)

    @property
    def shear_rigid(self) -> bool:
        """せん断変形を無視する設定か."""
        return self.alpha_v > ALPHA_V_RIGID or self.alpha_v <= 0.0

    def cowper_alpha_v(self, nu: float) -> float:
        """Cowper (1966) の中空円形断面せん断係数から alpha_v = 1/κ を返す.

        Args:
            nu: ポアソン比

        Returns:
            alpha_v: せん断形状係数
        """
        m = self.d_inner / self.d_outer
        m2 = m * m
        num = 6.0 * (1.0 + nu) * (1.0 + m2) ** 2
        den = (7.0 + 6.0 * nu) * (1.0 + m2) ** 2 + (20.0 + 12.0 * nu) * m2
        return den / num

    @classmethod
    def from_dimensions(
        cls,
        d_outer: float,
        wall: float,
        alpha_v: float = 2.0,
        rho: float = 0.0,
    ) -> PipeSection:
        """外径と肉厚から管断面を生成する.

        Args:
            d_outer: 外径
            wall: 肉厚
            alpha_v: せん断形状係数
            rho: 単位長さあたり質量

        Returns:
            PipeSection インスタンス

        断面諸量:
            A  = π(d_o² - d_i²)/4
            Iy = Iz = π(d_o⁴ - d_i⁴)/64
            J  = π(d_o⁴ - d_i⁴)/32（= 2·Iy、円管の厳密解）
        """
        if wall <= 0 or wall > 0.5 * d_outer:
            raise ValueError(
                f"肉厚 wall は 0 < wall <= d_outer/2 でなければなりません: "
                f"wall={wall}, d_outer={d_outer}"
            )
        d_inner = d_outer - 2.0 * wall
        A = math.pi * (d_outer**2 - d_inner**2) / 4.0
        I_val = math.pi * (d_outer**4 - d_inner**4) / 64.0
        J = math.pi * (d_outer**4 - d_inner**4) / 32.0
        return cls(
            d_outer=d_outer,
            wall=wall,
            A=A,
            Iy=I_val,
            Iz=I_val,
            J=J,
            alpha_v=alpha_v,
            rho=rho,
        )

    @classmethod
    def from_density(
        cls,
        d_outer: float,
        wall: float,
        density: float,
        alpha_v: float = 2.0,
    ) -> PipeSection:
        """材料密度 [kg/m³] から単位長さ質量を求めて管断面を生成する."""
        sec = cls.from_dimensions(d_outer, wall, alpha_v=alpha_v)
        return replace(sec, rho=density * sec.A)
