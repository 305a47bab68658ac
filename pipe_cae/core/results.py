"""メソッド戻り値の型定義.

各モジュールの公開関数が返すデータ構造を NamedTuple で統一的に定義する。
名前付きアクセス（result.kb 等）とタプルアンパッキング
（kb, pb0, ub0 = curved_pipe_kb(...)）の両方が使える。
"""

from __future__ import annotations

from typing import Any, NamedTuple

import numpy as np
import scipy.sparse as sp


class LinearSolveResult(NamedTuple):
    """線形ソルバーの結果.

    Attributes:
        u: (ndof,) 解ベクトル
        info: ソルバー情報辞書 (method, residual_norm, solve_time 等)
    """

    u: np.ndarray
    info: dict[str, Any]


class DirichletResult(NamedTuple):
    """Dirichlet 境界条件適用後の結果.

    Attributes:
        K: 拘束適用後の剛性行列 (CSR)
        f: 拘束適用後の右辺ベクトル (ndof,)
    """

    K: sp.csr_matrix
    f: np.ndarray


class ArcGeometry(NamedTuple):
    """円弧要素の幾何.

    Attributes:
        radius: 曲率半径（両端から求めた半径の平均）
        theta0: 弦が中心に張る角の半分 [rad]
        length: 弦長 L
        r_i: 節点 I から求めた半径
        r_j: 節点 J から求めた半径
    """

    radius: float
    theta0: float
    length: float
    r_i: float
    r_j: float

    @property
    def arc_length(self) -> float:
        """円弧長 2Rθ0."""
        return 2.0 * self.radius * self.theta0


class PipeProperties(NamedTuple):
    """kb 計算時点の断面・材料諸量のスナップショット.

    Attributes:
        E: ヤング率
        G: せん断弾性率
        alpha: 線膨張係数
        nu: ポアソン比
        A: 断面積
        Iy: y軸まわり断面二次モーメント
        Iz: z軸まわり断面二次モーメント
        J: ねじり定数
        alpha_v: せん断形状係数
        d_outer: 外径
        wall: 肉厚
        rho: 単位長さあたり質量
    """

    E: float
    G: float
    alpha: float
    nu: float
    A: float
    Iy: float
    Iz: float
    J: float
    alpha_v: float
    d_outer: float
    wall: float
    rho: float


class FlexibilityIntegral(NamedTuple):
    """円弧に沿った積分結果.

    Attributes:
        fb: (6, 6) 基本系柔性行列 ∫ bxᵀ fs bx ds
        ub0: (6,) 分布荷重による拘束変形 ∫ bxᵀ fs Spx ds
    """

    fb: np.ndarray
    ub0: np.ndarray


class BasicStiffnessResult(NamedTuple):
    """基本系の剛性と等価荷重.

    Attributes:
        kb: (6, 6) 基本系剛性行列 = fb⁻¹
        pb0: (6,) 基本系等価荷重 = -kb · ub0
        ub0: (6,) 熱・内圧補正後の拘束変形
    """

    kb: np.ndarray
    pb0: np.ndarray
    ub0: np.ndarray
