"""3D 線形座標変換（基本系 ⇄ 全体系）.

基本系（剛体モード除去済み、6成分）:
  q = [N, Mz_i, Mz_j, My_i, My_j, T]
  v = [Δu, θz_i', θz_j', θy_i', θy_j', Δθx]   （q と共役な変形）

局所系（12成分）:
  [u1, v1, w1, θx1, θy1, θz1, u2, v2, w2, θx2, θy2, θz2]

局所座標系:
  - x軸: 節点I→節点J（弦方向）
  - y軸: vecxz × x（正規化）
  - z軸: x × y
  vecxz は局所 xz 面内にある参照ベクトル。曲がり管では円弧面の法線を与える。

基本変形と局所変位の関係 v = A_bl · u_local:
  v0 = u2 - u1
  v1 = θz1 + (v1 - v2)/L,  v2 = θz2 + (v1 - v2)/L
  v3 = θy1 - (w1 - w2)/L,  v4 = θy2 - (w1 - w2)/L
  v5 = θx2 - θx1

変換:
  K_global = Tᵀ (A_blᵀ kb A_bl) T
  p_local  = A_blᵀ q + p0（分布荷重による固定端力）
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from pipe_cae.domain import Node


def _build_local_axes(e_x: np.ndarray, vecxz: np.ndarray) -> np.ndarray:
    """局所座標系の回転行列 R (3x3) を構築する.

    R の行ベクトルが局所 x, y, z 軸を全体座標系で表したもの。

    Args:
        e_x: 弦方向の単位ベクトル
        vecxz: 局所 xz 面内の参照ベクトル

    Returns:
        R: (3, 3) 回転行列（全体→局所）
    """
    e_y = np.cross(vecxz, e_x)
    norm_ey = np.linalg.norm(e_y)
    if norm_ey < 1e-10:
        raise ValueError(f"参照ベクトルが要素軸と平行です。vecxz={vecxz}, e_x={e_x}")
    e_y = e_y / norm_ey
    e_z = np.cross(e_x, e_y)

    R = np.zeros((3, 3), dtype=float)
    R[0, :] = e_x
    R[1, :] = e_y
    R[2, :] = e_z
    return R


def _transformation_matrix_3d(R: np.ndarray) -> np.ndarray:
    """12x12 のブロック対角回転行列 T（u_local = T @ u_global）."""
    T = np.zeros((12, 12), dtype=float)
    for i in range(4):
        T[3 * i : 3 * i + 3, 3 * i : 3 * i + 3] = R
    return T


def basic_from_local_matrix(length: float) -> np.ndarray:
    """局所変位 → 基本変形の行列 A_bl (6x12) を返す."""
    inv_l = 1.0 / length
    A = np.zeros((6, 12), dtype=float)
    # 軸
    A[0, 0] = -1.0
    A[0, 6] = 1.0
    # xy面曲げ（θz）
    A[1, 1] = inv_l
    A[1, 5] = 1.0
    A[1, 7] = -inv_l
    A[2, 1] = inv_l
    A[2, 7] = -inv_l
    A[2, 11] = 1.0
    # xz面曲げ（θy）
    A[3, 2] = -inv_l
    A[3, 4] = 1.0
    A[3, 8] = inv_l
    A[4, 2] = -inv_l
    A[4, 8] = inv_l
    A[4, 10] = 1.0
    # ねじり
    A[5, 3] = -1.0
    A[5, 9] = 1.0
    return A


class LinearCrdTransf3D:
    """3D 線形座標変換.

    要素ごとに1つ生成し、その要素が寿命の間だけ排他的に所有する。

    Args:
        vecxz: 局所 xz 面内の参照ベクトル (3,)
    """

    def __init__(self, vecxz: np.ndarray) -> None:
        vecxz = np.asarray(vecxz, dtype=float)
        if vecxz.shape != (3,):
            raise ValueError(f"vecxz は (3,) が必要: {vecxz.shape}")
        if np.linalg.norm(vecxz) < 1e-15:
            raise ValueError("vecxz がゼロベクトルです。")
        self.vecxz = vecxz
        self._nodes: tuple[Node, Node] | None = None
        self._L = 0.0
        self._R: np.ndarray | None = None
        self._T: np.ndarray | None = None
        self._A_bl: np.ndarray | None = None

    def initialize(self, node_i: Node, node_j: Node) -> None:
        """節点座標から長さと局所座標系を確定する."""
        dx = np.asarray(node_j.crds, dtype=float) - np.asarray(node_i.crds, dtype=float)
        length = float(np.linalg.norm(dx))
        if length < 1e-15:
            raise ValueError("要素長さがほぼゼロです。2節点が同一座標です。")
        self._nodes = (node_i, node_j)
        self._L = length
        self._R = _build_local_axes(dx / length, self.vecxz)
        self._T = _transformation_matrix_3d(self._R)
        self._A_bl = basic_from_local_matrix(length)

    def _require_initialized(self) -> None:
        if self._nodes is None:
            raise RuntimeError("座標変換が初期化されていません（initialize 未呼出）。")

    @property
    def initial_length(self) -> float:
        """初期弦長 L."""
        self._require_initialized()
        return self._L

    @property
    def deformed_length(self) -> float:
        """変形後弦長（線形変換では初期弦長と同じ）."""
        return self.initial_length

    @property
    def rotation(self) -> np.ndarray:
        """(3, 3) 全体→局所の回転行列."""
        self._require_initialized()
        assert self._R is not None
        return self._R

    def local_trial_disp(self) -> np.ndarray:
        """節点の試行変位を局所座標系 (12,) で返す."""
        self._require_initialized()
        assert self._nodes is not None and self._T is not None
        ug = np.concatenate([self._nodes[0].disp, self._nodes[1].disp])
        return self._T @ ug

    def basic_trial_disp(self) -> np.ndarray:
        """基本系の試行変形 v (6,)."""
        u_local = self.local_trial_disp()
        assert self._A_bl is not None
        return self._A_bl @ u_local

    def initial_global_stiffness(self, kb: np.ndarray) -> np.ndarray:
        """基本系剛性 kb (6,6) → 全体系剛性 (12,12)."""
        self._require_initialized()
        assert self._A_bl is not None and self._T is not None
        kl = self._A_bl.T @ kb @ self._A_bl
        return self._T.T @ kl @ self._T

    def global_stiffness(self, kb: np.ndarray, q: np.ndarray) -> np.ndarray:
        """接線剛性の全体系変換.

        線形変換では幾何剛性を持たないため q は使わない。
        """
        return self.initial_global_stiffness(kb)

    def global_resisting_force(self, q: np.ndarray, p0: np.ndarray) -> np.ndarray:
        """基本系力 q と固定端力 p0 から全体系抵抗力 (12,) を返す.

        p0 の並びは局所DOF（1始まり）の [1, 2, 8, 3, 9, 4] 成分:
          p0[0] → 節点I軸力, p0[1] → 節点I y せん断, p0[2] → 節点J y せん断,
          p0[3] → 節点I z せん断, p0[4] → 節点J z せん断, p0[5] → 節点I ねじり
        """
        self._require_initialized()
        assert self._A_bl is not None and self._T is not None
        q = np.asarray(q, dtype=float)
        p0 = np.asarray(p0, dtype=float)
        pl = self._A_bl.T @ q
        pl[0] += p0[0]
        pl[1] += p0[1]
        pl[7] += p0[2]
        pl[2] += p0[3]
        pl[8] += p0[4]
        if p0.size > 5:
            pl[3] += p0[5]
        return self._T.T @ pl

    def global_matrix_from_local(self, ml: np.ndarray) -> np.ndarray:
        """局所系 (12,12) 行列を全体系に変換する（質量行列用）."""
        self._require_initialized()
        assert self._T is not None
        return self._T.T @ ml @ self._T
