"""境界条件.

- fixed_dofs_of: 節点番号と局所DOF番号から全体DOFインデックスを作る
- apply_dirichlet: 行・列消去＋右辺補正で規定変位を課す
"""

from __future__ import annotations

import warnings
from collections.abc import Iterable

import numpy as np
import scipy.sparse as sp
from scipy.sparse import SparseEfficiencyWarning

from pipe_cae.core.results import DirichletResult
from pipe_cae.domain import Domain

warnings.simplefilter("ignore", SparseEfficiencyWarning)


def fixed_dofs_of(
    domain: Domain,
    node_tags: Iterable[int],
    dofs: Iterable[int] = range(6),
) -> np.ndarray:
    """節点ごとの拘束DOF（0=ux … 5=θz）を全体DOFインデックスに変換する.

    Args:
        domain: Domain
        node_tags: 拘束する節点番号
        dofs: 拘束する節点内DOF番号

    Returns:
        (n_fixed,) 全体DOFインデックス（昇順・重複なし）
    """
    dofs = list(dofs)
    for d in dofs:
        if d < 0 or d >= domain.ndf:
            raise ValueError(f"節点内DOF番号は 0..{domain.ndf - 1}: {d}")
    out = []
    for tag in node_tags:
        base = domain.ndf * domain.node_index(tag)
        out.extend(base + d for d in dofs)
    return np.unique(np.asarray(out, dtype=np.int64))


def apply_dirichlet(
    K: sp.csr_matrix,
    f: np.ndarray,
    fixed_dofs: np.ndarray,
    values: float | np.ndarray = 0.0,
) -> DirichletResult:
    """Dirichlet境界条件（行・列消去＋右辺補正）を適用する.

    アルゴリズム（元のK, fから）:
      1) f <- f - K[:, fixed_dofs] @ values  （元のKで一括補正）
      2) K[:, fixed_dofs] = 0, K[fixed_dofs, :] = 0
      3) K[d,d] = 1, f[d] = val

    Args:
        K: CSR剛性行列
        f: 右辺ベクトル (n,)
        fixed_dofs: 拘束するDOFの配列
        values: 拘束変位値（スカラー or 同長配列）

    Returns:
        DirichletResult: (K, f)
    """
    fbc = np.asarray(f, dtype=float).copy()
    fixed_dofs = np.asarray(fixed_dofs, dtype=int)
    if np.isscalar(values):
        vals = np.full(fixed_dofs.shape, float(values))
    else:
        vals = np.asarray(values, dtype=float)
        if vals.shape != fixed_dofs.shape:
            raise ValueError("values の長さと fixed_dofs の長さが一致していません。")

    if fbc.shape[0] != K.shape[0]:
        raise ValueError("K と f のサイズが一致していません。")

    nz = vals != 0.0
    if np.any(nz):
        fbc -= K.tocsc()[:, fixed_dofs[nz]] @ vals[nz]

    Kbc = K.tolil(copy=True)
    for dof in fixed_dofs:
        Kbc[dof, :] = 0.0
        Kbc[:, dof] = 0.0
        Kbc[dof, dof] = 1.0
    fbc[fixed_dofs] = vals

    return DirichletResult(K=Kbc.tocsr(), f=fbc)
