"""線形ソルバー.

  - solve_displacement(): 拘束適用済みの K u = f を spsolve で解く
  - solve_linear_static(): Domain の線形静解析
      K u = f_ext - P(0)
    P(0) は変位ゼロでの抵抗力（分布荷重・温度・内圧の等価節点力の符号反転）。
"""

from __future__ import annotations

import time
from typing import Any

import numpy as np
import scipy.sparse as sp
import scipy.sparse.linalg as spla

from pipe_cae.assembly import assemble_global_stiffness, assemble_resisting_force
from pipe_cae.bc import apply_dirichlet
from pipe_cae.core.results import LinearSolveResult
from pipe_cae.domain import Domain


def solve_displacement(
    K: sp.csr_matrix,
    f: np.ndarray,
    *,
    show_progress: bool = True,
) -> LinearSolveResult:
    """spsolve による直接解法.

    Args:
        K: CSR剛性行列（拘束適用済み）
        f: 右辺ベクトル
        show_progress: ソルブ時間を表示

    Returns:
        LinearSolveResult: (u, info) の NamedTuple
            info: method, residual_norm, solve_time
    """
    n = K.shape[0]
    t0 = time.time()
    u = spla.spsolve(K.tocsc(), f)
    elapsed = time.time() - t0
    u = np.atleast_1d(np.asarray(u, dtype=float))
    res = K @ u - f

    info: dict[str, Any] = {
        "method": "spsolve",
        "success": bool(np.all(np.isfinite(u))),
        "residual_norm": float(np.linalg.norm(res)),
        "solve_time": elapsed,
    }
    if show_progress:
        print(f"[spsolve] n={n}, nnz={K.nnz}, elapsed={elapsed:.3f} s")
    return LinearSolveResult(u=u, info=info)


def solve_linear_static(
    domain: Domain,
    fixed_dofs: np.ndarray,
    f_ext: np.ndarray | None = None,
    *,
    show_progress: bool = True,
) -> LinearSolveResult:
    """線形静解析: 変位ゼロから1回の剛性評価で解き、Domain に書き戻す.

    Args:
        domain: 要素荷重を設定済みの Domain
        fixed_dofs: 拘束する全体DOF（規定値 0）
        f_ext: (ndof,) 外部節点荷重。None ならゼロ。
        show_progress: 進捗表示の有無

    Returns:
        LinearSolveResult: u は (ndof,) 全体変位
    """
    ndof = domain.ndof
    f = np.zeros(ndof) if f_ext is None else np.asarray(f_ext, dtype=float).copy()
    if f.shape != (ndof,):
        raise ValueError(f"外部荷重は ({ndof},) が必要: {f.shape}")

    domain.set_trial_displacement(np.zeros(ndof))
    K = assemble_global_stiffness(domain, show_progress=show_progress)
    P0 = assemble_resisting_force(domain)

    Kbc, fbc = apply_dirichlet(K, f - P0, fixed_dofs, 0.0)
    result = solve_displacement(Kbc, fbc, show_progress=show_progress)
    domain.set_trial_displacement(result.u)
    return result
