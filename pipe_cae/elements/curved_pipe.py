"""曲がり管（円弧梁）要素: 柔性法による定式化.

各節点の自由度: (ux, uy, uz, θx, θy, θz) → 6 DOF/node, 2 nodes → 12 DOF/element

円弧は中心 C、節点 I・J を通る平面内にあり、弦 IJ を局所 x 軸とする。
角度 θ ∈ [-θ0, θ0] は弦の垂直二等分線から J 側を正として測る。

基本系（剛体モード除去済み）:
  q = [N, Mz_i, Mz_j, My_i, My_j, T]
断面力の並び:
  s = [N, Mz, My, T, Vy, Vz]

定式化:
  s(θ) = bx(θ) q + Spx(θ)                   （J側自由体の釣合い）
  fb   = ∫ bxᵀ fs bx  R dθ                   （基本系柔性）
  ub0  = ∫ bxᵀ fs Spx R dθ + 熱 + 内圧        （拘束変形）
  kb   = fb⁻¹,  pb0 = -kb ub0
  q    = kb v + pb0
  P    = Tᵀ (A_blᵀ q + plw) - Q

積分は 20 点 Gauss-Legendre 則（固定）。収束判定はなく、精度は積分次数で決まる。
"""

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np

from pipe_cae.core.capability import PipeMaterialProtocol, PipeSectionProtocol
from pipe_cae.core.results import (
    ArcGeometry,
    BasicStiffnessResult,
    FlexibilityIntegral,
    PipeProperties,
)
from pipe_cae.elements.transf3d import LinearCrdTransf3D
from pipe_cae.math.quadrature import GAUSS_LEGENDRE_20, QuadratureRule, map_rule
from pipe_cae.sections.pipe import ALPHA_V_RIGID

if TYPE_CHECKING:
    from pipe_cae.domain import Domain

# 弦の半長 / 半径 の上限（円弧角 約178°）。asin の特異点近傍を避ける。
MAX_HALF_CHORD_RATIO = 0.99985


# =====================================================================
# 幾何
# =====================================================================


def solve_arc_geometry(
    crd_i: np.ndarray,
    crd_j: np.ndarray,
    center: np.ndarray,
    wall: float,
    tol_wall: float,
) -> ArcGeometry:
    """両端節点と円弧中心から半径と半角 θ0 を求める.

    Args:
        crd_i: (3,) 節点 I 座標
        crd_j: (3,) 節点 J 座標
        center: (3,) 円弧中心
        wall: 肉厚（半径の整合判定に使用）
        tol_wall: 許容差（肉厚に対する比率）

    Returns:
        ArcGeometry

    Raises:
        ValueError: 半径が正でない、両端の半径差が tol_wall·wall を超える、
            または円弧角が約178°以上の場合
    """
    crd_i = np.asarray(crd_i, dtype=float)
    crd_j = np.asarray(crd_j, dtype=float)
    center = np.asarray(center, dtype=float)

    r_i = float(np.linalg.norm(center - crd_i))
    r_j = float(np.linalg.norm(center - crd_j))
    radius = 0.5 * (r_i + r_j)
    if radius <= 0.0:
        raise ValueError(f"曲率半径が正ではありません: R={radius}")

    if abs(r_i - r_j) > tol_wall * wall:
        raise ValueError(
            f"節点Iから求めた半径 {r_i:.6g} と節点Jから求めた半径 {r_j:.6g} の差が "
            f"{tol_wall} × 肉厚 ({tol_wall * wall:.6g}) を超えています。"
        )

    length = float(np.linalg.norm(crd_j - crd_i))
    if length < 1e-15:
        raise ValueError("要素長さがほぼゼロです。2節点が同一座標です。")

    half = 0.5 * length
    if half > MAX_HALF_CHORD_RATIO * radius:
        raise ValueError(
            f"円弧角が 178° 以上です（L/2={half:.6g}, R={radius:.6g}）。"
        )
    theta0 = math.asin(half / radius)
    return ArcGeometry(radius=radius, theta0=theta0, length=length, r_i=r_i, r_j=r_j)


# =====================================================================
# 位置 θ におけるカーネル
# =====================================================================


def curved_pipe_bx(theta: float, theta0: float, radius: float, length: float) -> np.ndarray:
    """基本系力 q → 位置 θ の断面力 s の変換行列 bx (6x6).

    行: [N, Mz, My, T, Vy, Vz]、列: [N, Mz_i, Mz_j, My_i, My_j, T]

    Args:
        theta: 位置角
        theta0: 半角
        radius: 曲率半径 R
        length: 弦長 L

    Returns:
        bx: (6, 6)
    """
    if radius <= 0.0:
        raise ValueError(f"曲率半径が正ではありません: R={radius}")
    if length <= 0.0:
        raise ValueError(f"弦長が正ではありません: L={length}")

    c = math.cos(theta)
    s = math.sin(theta)
    R = radius
    H = R * (c - math.cos(theta0))
    H0 = R * math.cos(theta0)
    inv_l = 1.0 / length

    bx = np.zeros((6, 6), dtype=float)
    # 軸力
    bx[0, 0] = c
    bx[0, 1] = -s * inv_l
    bx[0, 2] = -s * inv_l
    # 面内曲げ Mz
    bx[1, 0] = -H
    bx[1, 1] = R * s * inv_l - 0.5
    bx[1, 2] = R * s * inv_l + 0.5
    # 面外曲げ My
    bx[2, 3] = s * H0 * inv_l - 0.5 * c
    bx[2, 4] = s * H0 * inv_l + 0.5 * c
    bx[2, 5] = -s
    # ねじり
    bx[3, 3] = R * inv_l * (1.0 - math.cos(theta - theta0))
    bx[3, 4] = R * inv_l * (1.0 - math.cos(theta + theta0))
    bx[3, 5] = c
    # せん断
    bx[4, 0] = s
    bx[4, 1] = c * inv_l
    bx[4, 2] = c * inv_l
    bx[5, 3] = inv_l
    bx[5, 4] = inv_l
    return bx


def curved_pipe_fs(theta: float, props: PipeProperties) -> np.ndarray:
    """断面柔性行列 fs (6x6, 対角).

    diag(1/EA, 1/EIz, 1/EIy, 1/GJ, 1/(G·A/αv), 1/(G·A/αv))
    αv > 99 または αv <= 0 の場合、せん断柔性は 0（せん断変形を無視）。
    θ は使わない（一様断面）。
    """
    E = props.E
    G = props.G
    fs = np.zeros((6, 6), dtype=float)
    fs[0, 0] = 1.0 / (E * props.A)
    fs[1, 1] = 1.0 / (E * props.Iz)
    fs[2, 2] = 1.0 / (E * props.Iy)
    fs[3, 3] = 1.0 / (G * props.J)

    alpha_v = props.alpha_v
    if alpha_v > ALPHA_V_RIGID:
        alpha_v = 0.0
    if alpha_v > 0.0:
        a_shear = props.A / alpha_v
        fs[4, 4] = 1.0 / (G * a_shear)
        fs[5, 5] = 1.0 / (G * a_shear)
    return fs


def curved_pipe_spx(
    theta: float,
    theta0: float,
    radius: float,
    length: float,
    wx: float = 0.0,
    wy: float = 0.0,
    wz: float = 0.0,
) -> np.ndarray:
    """等分布荷重による位置 θ の特解断面力 (6,).

    J 側自由体（J 端に plw の固定端力）の釣合いから得られる。
    wx, wy, wz は弦基準の局所座標系における単位円弧長あたりの荷重。
    """
    c = math.cos(theta)
    s = math.sin(theta)
    R = radius
    R2 = R * R
    H0 = R * math.cos(theta0)
    inv_l = 1.0 / length
    stt0 = math.sin(theta - theta0)
    ctt0 = math.cos(theta - theta0)

    vec = np.zeros(6, dtype=float)
    vec[0] = wx * R * (c * theta0 - s - c * theta + 2.0 * s * theta0 * H0 * inv_l) - wy * R * s * theta
    vec[1] = wx * R * (
        c * R * theta - 2.0 * s * R * theta0 * H0 * inv_l - c * R * theta0 + theta0 * H0
    ) + wy * R * (s * R * theta - theta0 * length * 0.5 + c * R - H0)
    vec[2] = wz * R2 * (-theta0 * stt0 + ctt0 - 1.0)
    vec[3] = wz * R2 * (-theta + theta0 * ctt0 + stt0)
    vec[4] = wx * R * (c + s * theta0 - s * theta - 2.0 * c * theta0 * H0 * inv_l) + wy * R * c * theta
    vec[5] = -wz * R * theta
    return vec


def curved_pipe_plw(
    theta0: float,
    radius: float,
    length: float,
    wx: float = 0.0,
    wy: float = 0.0,
    wz: float = 0.0,
) -> np.ndarray:
    """等分布荷重による固定端力 (6,)（積分なしの閉形式）.

    並びは LinearCrdTransf3D.global_resisting_force の p0 に合わせる:
      [節点I軸力, 節点I yせん断, 節点J yせん断, 節点I zせん断, 節点J zせん断, 節点I ねじり]
    """
    R = radius
    H0 = R * math.cos(theta0)
    L = length
    chord_term = 1.0 - 2.0 * theta0 * H0 / L

    vec = np.zeros(6, dtype=float)
    vec[0] = -2.0 * wx * R * theta0
    vec[1] = wx * R * chord_term - wy * R * theta0
    vec[2] = -wx * R * chord_term - wy * R * theta0
    vec[3] = -wz * R * theta0
    vec[4] = -wz * R * theta0
    vec[5] = wz * R * (L - 2.0 * theta0 * H0)
    return vec


# =====================================================================
# 積分と基本系剛性
# =====================================================================


def integrate_basic_flexibility(
    geometry: ArcGeometry,
    props: PipeProperties,
    wx: float = 0.0,
    wy: float = 0.0,
    wz: float = 0.0,
    rule: QuadratureRule = GAUSS_LEGENDRE_20,
) -> FlexibilityIntegral:
    """fb = ∫ bxᵀ fs bx ds, ub0 = ∫ bxᵀ fs Spx ds を [-θ0, θ0] で積分する.

    ds = R dθ のため、θ 積分の結果に R を掛ける。
    """
    R = geometry.radius
    theta0 = geometry.theta0
    L = geometry.length

    fb = np.zeros((6, 6), dtype=float)
    ub0 = np.zeros(6, dtype=float)
    for w, theta in map_rule(-theta0, theta0, rule):
        bx = curved_pipe_bx(theta, theta0, R, L)
        fs = curved_pipe_fs(theta, props)
        spx = curved_pipe_spx(theta, theta0, R, L, wx, wy, wz)
        fb += w * (bx.T @ fs @ bx)
        ub0 += w * (bx.T @ (fs @ spx))
    fb *= R
    ub0 *= R
    return FlexibilityIntegral(fb=fb, ub0=ub0)


def thermal_locked_deformation(
    radius: float,
    theta0: float,
    alpha: float,
    d_temp: float,
) -> np.ndarray:
    """一様温度上昇による拘束変形 (6,)（弦長の自由膨張 α·ΔT·L）.

    温度上昇 d_temp <= 0 の場合は寄与なし。
    """
    vec = np.zeros(6, dtype=float)
    if d_temp > 0.0:
        vec[0] = 2.0 * radius * alpha * d_temp * math.sin(theta0)
    return vec


def pressure_locked_deformation(
    pressure: float,
    radius: float,
    theta0: float,
    d_outer: float,
    wall: float,
    E: float,
    nu: float,
) -> np.ndarray:
    """内圧による拘束変形 (6,).

    薄肉曲がり管の閉形式関係（Bourdon 効果）:
      RM  = (D - t)/2,  DU2 = R/RM,  DUM = p·RM/(2Et)
      DU3 = 1 + DUM (1 - ν(2·DU2 - 1)/(DU2 - 1))
      β   = -(1 - DU3/(1 + DUM(2 - ν))) / R        （曲率変化）
      v0 += p·R(D - t)(1 - 2ν) sin θ0 / (2Et) + 2R²β(θ0 cos θ0 - sin θ0)
      v1 += -Rβθ0,  v2 += Rβθ0

    Raises:
        ValueError: 曲率半径が管の平均半径以下の場合
    """
    vec = np.zeros(6, dtype=float)
    if pressure == 0.0:
        return vec

    R = radius
    rm = 0.5 * (d_outer - wall)
    du2 = R / rm
    if du2 <= 1.0:
        raise ValueError(
            f"曲率半径 R={R:.6g} が管の平均半径 RM={rm:.6g} 以下です。"
        )
    dum = pressure * rm * 0.5 / (E * wall)
    du3 = 1.0 + dum * (1.0 - nu * (2.0 * du2 - 1.0) / (du2 - 1.0))
    beta = du3 / (1.0 + dum * (2.0 - nu))
    beta = -(1.0 - beta) / R

    s0 = math.sin(theta0)
    c0 = math.cos(theta0)
    vec[0] = 0.5 * pressure * R * (d_outer - wall) * (1.0 - 2.0 * nu) * s0 / (E * wall)
    vec[0] += 2.0 * R * R * beta * (theta0 * c0 - s0)
    vec[1] = -R * beta * theta0
    vec[2] = R * beta * theta0
    return vec


def curved_pipe_kb(
    geometry: ArcGeometry,
    props: PipeProperties,
    wx: float = 0.0,
    wy: float = 0.0,
    wz: float = 0.0,
    d_temp: float = 0.0,
    pressure: float = 0.0,
    rule: QuadratureRule = GAUSS_LEGENDRE_20,
) -> BasicStiffnessResult:
    """基本系剛性 kb と等価荷重 pb0 を計算する.

    手順:
      1) fb, ub0 を Gauss 積分
      2) 温度上昇 > 0 なら熱膨張を ub0 に加算
      3) 内圧 ≠ 0 なら内圧補正を ub0 に加算
      4) kb = fb⁻¹（特異なら numpy.linalg.LinAlgError）
      5) pb0 = -kb · ub0

    Args:
        geometry: 円弧幾何
        props: 断面・材料諸量のスナップショット
        wx, wy, wz: 局所座標系の等分布荷重（単位円弧長あたり）
        d_temp: 基準温度からの温度上昇
        pressure: 内圧
        rule: 積分則

    Returns:
        BasicStiffnessResult: (kb, pb0, ub0)
    """
    fb, ub0 = integrate_basic_flexibility(geometry, props, wx, wy, wz, rule=rule)
    ub0 = ub0 + thermal_locked_deformation(geometry.radius, geometry.theta0, props.alpha, d_temp)
    ub0 = ub0 + pressure_locked_deformation(
        pressure,
        geometry.radius,
        geometry.theta0,
        props.d_outer,
        props.wall,
        props.E,
        props.nu,
    )

    kb = np.linalg.inv(fb)
    if not np.all(np.isfinite(kb)):
        raise np.linalg.LinAlgError("基本系柔性行列の逆行列が有限ではありません。")
    pb0 = -kb @ ub0
    return BasicStiffnessResult(kb=kb, pb0=pb0, ub0=ub0)


# =====================================================================
# 質量
# =====================================================================


def curved_pipe_mass_local(
    rho: float,
    arc_length: float,
    length: float,
    A: float,
    J: float,
    *,
    consistent: bool = False,
) -> np.ndarray:
    """局所座標系の質量行列 (12x12).

    全質量は rho × 円弧長。集中質量は各節点の並進 DOF に半分ずつ。
    整合質量は弦長 L の直線梁の整合質量行列（ねじりは J/A で換算）を
    全質量でスケールしたもの。
    """
    ml = np.zeros((12, 12), dtype=float)
    m_total = rho * arc_length
    if m_total == 0.0:
        return ml

    if not consistent:
        m_half = 0.5 * m_total
        for d in (0, 1, 2, 6, 7, 8):
            ml[d, d] = m_half
        return ml

    L = length
    m = m_total / 420.0
    ml[0, 0] = ml[6, 6] = m * 140.0
    ml[0, 6] = ml[6, 0] = m * 70.0
    ml[3, 3] = ml[9, 9] = m * (J / A) * 140.0
    ml[3, 9] = ml[9, 3] = m * (J / A) * 70.0

    ml[2, 2] = ml[8, 8] = m * 156.0
    ml[2, 8] = ml[8, 2] = m * 54.0
    ml[4, 4] = ml[10, 10] = m * 4.0 * L * L
    ml[4, 10] = ml[10, 4] = -m * 3.0 * L * L
    ml[2, 4] = ml[4, 2] = -m * 22.0 * L
    ml[8, 10] = ml[10, 8] = -ml[2, 4]
    ml[2, 10] = ml[10, 2] = m * 13.0 * L
    ml[4, 8] = ml[8, 4] = -ml[2, 10]

    ml[1, 1] = ml[7, 7] = m * 156.0
    ml[1, 7] = ml[7, 1] = m * 54.0
    ml[5, 5] = ml[11, 11] = m * 4.0 * L * L
    ml[5, 11] = ml[11, 5] = -m * 3.0 * L * L
    ml[1, 5] = ml[5, 1] = m * 22.0 * L
    ml[7, 11] = ml[11, 7] = -ml[1, 5]
    ml[1, 11] = ml[11, 1] = -m * 13.0 * L
    ml[5, 7] = ml[7, 5] = -ml[1, 11]
    return ml


# =====================================================================
# 要素
# =====================================================================


class ElementState(Enum):
    """要素のライフサイクル."""

    UNATTACHED = "unattached"
    ATTACHED = "attached"
    ACTIVE = "active"


@dataclass
class CurvedPipeConfig:
    """曲がり管要素の生成パラメータ.

    Attributes:
        t0: 基準（応力ゼロ）温度。材料特性はこの温度 + 温度荷重で評価する。
        pressure: 内圧
        consistent_mass: True で整合質量、False で集中質量
        tol_wall: 両端半径の許容差（肉厚に対する比率, [0, 1]）
        verbose: 幾何・失敗情報を表示する
    """

    t0: float = 0.0
    pressure: float = 0.0
    consistent_mass: bool = False
    tol_wall: float = 0.1
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.tol_wall < 0.0 or self.tol_wall > 1.0:
            raise ValueError(f"tol_wall は [0, 1] でなければなりません: {self.tol_wall}")


@dataclass
class PipeLoadState:
    """荷重ステージごとに変化する要素荷重.

    Attributes:
        wx: 局所x（弦方向）の等分布荷重
        wy: 局所y の等分布荷重
        wz: 局所z（円弧面法線）の等分布荷重
        d_temp: 基準温度からの温度上昇
    """

    wx: float = 0.0
    wy: float = 0.0
    wz: float = 0.0
    d_temp: float = 0.0

    def clear(self) -> None:
        """全荷重を 0 に戻す."""
        self.wx = 0.0
        self.wy = 0.0
        self.wz = 0.0
        self.d_temp = 0.0


class CurvedPipe:
    """曲がり管要素（ElementProtocol, DynamicElementProtocol 適合）.

    Args:
        tag: 要素番号
        node_i: 節点 I の番号
        node_j: 節点 J の番号
        material: 管材料（PipeMaterialProtocol）
        section: 管断面（PipeSectionProtocol）
        center: (3,) 円弧中心座標
        config: 生成パラメータ。None の場合は既定値。
        rule: 積分則（既定は 20 点 Gauss-Legendre）

    DOF配置:
        各節点: (ux, uy, uz, θx, θy, θz) → 6 DOF/node
        要素: 2 nodes → 12 DOF/element

    ライフサイクル:
        UNATTACHED --set_domain--> ATTACHED --剛性/抵抗力照会--> ACTIVE
    """

    ndof_per_node: int = 6
    nnodes: int = 2
    ndof: int = 12

    def __init__(
        self,
        tag: int,
        node_i: int,
        node_j: int,
        material: PipeMaterialProtocol,
        section: PipeSectionProtocol,
        center,
        config: CurvedPipeConfig | None = None,
        rule: QuadratureRule = GAUSS_LEGENDRE_20,
    ) -> None:
        if not isinstance(section, PipeSectionProtocol):
            raise TypeError(f"断面 {section!r} は管断面（PipeSectionProtocol）ではありません。")
        if not isinstance(material, PipeMaterialProtocol):
            raise TypeError(f"材料 {material!r} は管材料（PipeMaterialProtocol）ではありません。")
        center = np.asarray(center, dtype=float)
        if center.shape != (3,):
            raise ValueError(f"円弧中心は (3,) が必要: {center.shape}")

        self.tag = tag
        self.node_tags: tuple[int, ...] = (node_i, node_j)
        self.material = material
        self.section = section
        self.center = center
        self.config = config if config is not None else CurvedPipeConfig()
        self.rule = tuple(rule)

        self.pressure = self.config.pressure
        self.loads = PipeLoadState()
        self.state = ElementState.UNATTACHED
        self.transf: LinearCrdTransf3D | None = None
        self.geometry: ArcGeometry | None = None
        self.props: PipeProperties | None = None
        self.q = np.zeros(6, dtype=float)
        self._Q = np.zeros(self.ndof, dtype=float)

    # -----------------------------------------------------------------
    # 接続
    # -----------------------------------------------------------------

    def set_domain(self, domain: Domain) -> None:
        """ホストに接続し、座標変換・断面材料・円弧幾何を確定する.

        Raises:
            ValueError: Domain が None、3D でない、節点が存在しない、
                中心と両節点が一直線上、または円弧幾何の検証に失敗した場合
        """
        if domain is None:
            raise ValueError(f"要素 {self.tag}: Domain が None です。")
        if domain.ndm != 3:
            raise ValueError(f"要素 {self.tag}: 曲がり管要素は 3D（ndm=3）専用です: ndm={domain.ndm}")

        nodes = []
        for tag in self.node_tags:
            node = domain.get_node(tag)
            if node is None:
                raise ValueError(f"要素 {self.tag}: 節点 {tag} が存在しません。")
            nodes.append(node)
        node_i, node_j = nodes

        ci = node_i.crds - self.center
        ij = node_j.crds - node_i.crds
        norm_ci = float(np.linalg.norm(ci))
        norm_ij = float(np.linalg.norm(ij))
        if norm_ci < 1e-15 or norm_ij < 1e-15:
            raise ValueError(f"要素 {self.tag}: 節点が中心または他方の節点と一致しています。")
        vecxz = np.cross(ci / norm_ci, ij / norm_ij)
        if np.linalg.norm(vecxz) < 1e-12:
            raise ValueError(f"要素 {self.tag}: 中心・節点I・節点J が一直線上にあります。")

        self.transf = LinearCrdTransf3D(vecxz)
        self.transf.initialize(node_i, node_j)

        props = self._update_properties()
        self.geometry = solve_arc_geometry(
            node_i.crds,
            node_j.crds,
            self.center,
            props.wall,
            self.config.tol_wall,
        )
        self.state = ElementState.ATTACHED

        if self.config.verbose:
            g = self.geometry
            print(
                f"[CurvedPipe {self.tag}] R={g.radius:.6g}, "
                f"θ0={math.degrees(g.theta0):.4f} deg, L={g.length:.6g}"
            )

    def _require_attached(self) -> None:
        if self.state is ElementState.UNATTACHED:
            raise RuntimeError(f"要素 {self.tag}: set_domain 前に照会されました。")

    # -----------------------------------------------------------------
    # 状態
    # -----------------------------------------------------------------

    @property
    def temperature(self) -> float:
        """現在温度（基準温度 + 温度荷重）."""
        return self.config.t0 + self.loads.d_temp

    @property
    def arc_length(self) -> float:
        """円弧長."""
        self._require_attached()
        assert self.geometry is not None
        return self.geometry.arc_length

    @property
    def basic_forces(self) -> np.ndarray:
        """最後に計算した基本系力 q (6,)."""
        return self.q.copy()

    def _update_properties(self) -> PipeProperties:
        """断面・材料諸量を現在温度で取り直す."""
        T = self.temperature
        mat = self.material
        sec = self.section
        self.props = PipeProperties(
            E=float(mat.elastic_modulus(T)),
            G=float(mat.shear_modulus(T)),
            alpha=float(mat.thermal_expansion(T)),
            nu=float(mat.poisson_ratio(T)),
            A=float(sec.A),
            Iy=float(sec.Iy),
            Iz=float(sec.Iz),
            J=float(sec.J),
            alpha_v=float(sec.alpha_v),
            d_outer=float(sec.d_outer),
            wall=float(sec.wall),
            rho=float(sec.rho),
        )
        return self.props

    # -----------------------------------------------------------------
    # 荷重
    # -----------------------------------------------------------------

    def add_uniform_load(
        self,
        wy: float,
        wz: float,
        wx: float = 0.0,
        load_factor: float = 1.0,
    ) -> None:
        """局所座標系の等分布荷重（単位円弧長あたり）を加える."""
        self.loads.wy += load_factor * wy
        self.loads.wz += load_factor * wz
        self.loads.wx += load_factor * wx

    def add_global_uniform_load(self, w_global, load_factor: float = 1.0) -> None:
        """全体座標系の等分布荷重（自重など）を局所成分に変換して加える."""
        self._require_attached()
        assert self.transf is not None
        w_local = self.transf.rotation @ np.asarray(w_global, dtype=float)
        self.add_uniform_load(w_local[1], w_local[2], w_local[0], load_factor=load_factor)

    def add_thermal_load(self, d_temp: float, load_factor: float = 1.0) -> None:
        """基準温度からの一様温度上昇を加える."""
        self.loads.d_temp += load_factor * d_temp

    def set_pressure(self, pressure: float) -> None:
        """内圧を設定する（zero_load では消えない）."""
        self.pressure = float(pressure)

    def zero_load(self) -> None:
        """等分布荷重・温度荷重・不釣合い力をクリアし、諸量を取り直す."""
        self.loads.clear()
        self._Q[:] = 0.0
        self._update_properties()

    def add_inertia_load_to_unbalance(self, accel: np.ndarray) -> None:
        """節点加速度 (12,)（全体座標系）による慣性力 -M·a を不釣合い力に加える."""
        self._require_attached()
        if self.section.rho == 0.0:
            return
        accel = np.asarray(accel, dtype=float)
        self._Q -= self.mass_matrix() @ accel

    # -----------------------------------------------------------------
    # 剛性・抵抗力
    # -----------------------------------------------------------------

    def basic_stiffness(self) -> BasicStiffnessResult:
        """基本系剛性 kb・等価荷重 pb0 を現在の幾何・荷重から計算する.

        断面・材料諸量は呼出しごとに取り直す（パラメータ更新への追従）。

        Raises:
            numpy.linalg.LinAlgError: 柔性行列が特異の場合
            ValueError: 材料諸量が取得できない場合（温度が材料表の範囲外など）
        """
        self._require_attached()
        assert self.geometry is not None
        props = self._update_properties()
        return curved_pipe_kb(
            self.geometry,
            props,
            self.loads.wx,
            self.loads.wy,
            self.loads.wz,
            d_temp=self.loads.d_temp,
            pressure=self.pressure,
            rule=self.rule,
        )

    def _try_basic_stiffness(self, caller: str) -> BasicStiffnessResult | None:
        """kb を計算し、失敗時は警告して None を返す."""
        try:
            return self.basic_stiffness()
        except (np.linalg.LinAlgError, ValueError) as exc:
            msg = f"要素 {self.tag}: kb の計算に失敗しました -- {caller}: {exc}"
            if self.config.verbose:
                print(f"[CurvedPipe {self.tag}] {msg}")
            warnings.warn(msg, RuntimeWarning, stacklevel=3)
            return None

    def tangent_stiffness(self) -> np.ndarray:
        """接線剛性行列 (12, 12)（全体座標系）. 失敗時はゼロ行列."""
        self._require_attached()
        assert self.transf is not None
        v = self.transf.basic_trial_disp()
        result = self._try_basic_stiffness("tangent_stiffness")
        if result is None:
            return np.zeros((self.ndof, self.ndof), dtype=float)
        self.state = ElementState.ACTIVE
        self.q = result.kb @ v + result.pb0
        return self.transf.global_stiffness(result.kb, self.q)

    def initial_stiffness(self) -> np.ndarray:
        """初期剛性行列 (12, 12)（全体座標系）. 失敗時はゼロ行列."""
        self._require_attached()
        assert self.transf is not None
        result = self._try_basic_stiffness("initial_stiffness")
        if result is None:
            return np.zeros((self.ndof, self.ndof), dtype=float)
        self.state = ElementState.ACTIVE
        return self.transf.initial_global_stiffness(result.kb)

    def resisting_force(self) -> np.ndarray:
        """抵抗力ベクトル (12,)（全体座標系）. 失敗時はゼロベクトル."""
        self._require_attached()
        assert self.transf is not None and self.geometry is not None
        v = self.transf.basic_trial_disp()
        result = self._try_basic_stiffness("resisting_force")
        if result is None:
            return np.zeros(self.ndof, dtype=float)
        self.state = ElementState.ACTIVE
        self.q = result.kb @ v + result.pb0

        g = self.geometry
        p0 = curved_pipe_plw(g.theta0, g.radius, g.length, self.loads.wx, self.loads.wy, self.loads.wz)
        P = self.transf.global_resisting_force(self.q, p0)

        # 外部（慣性）不釣合い力を控除
        if self.section.rho != 0.0:
            P = P - self._Q
        return P

    def mass_matrix(self) -> np.ndarray:
        """質量行列 (12, 12)（全体座標系）."""
        self._require_attached()
        assert self.transf is not None and self.geometry is not None
        sec = self.section
        ml = curved_pipe_mass_local(
            sec.rho,
            self.geometry.arc_length,
            self.geometry.length,
            sec.A,
            sec.J,
            consistent=self.config.consistent_mass,
        )
        return self.transf.global_matrix_from_local(ml)
