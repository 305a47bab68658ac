"""Protocol ベース汎用アセンブリ.

Domain に登録された任意の ElementProtocol 適合要素から全体剛性行列・
抵抗力ベクトル・質量行列を構築する。
行列は COO 形式で要素ごとの寄与を蓄積し、最終的に CSR 行列を生成する。
"""

from __future__ import annotations

import time

import numpy as np
import scipy.sparse as sp

from pipe_cae.core.element import DynamicElementProtocol, ElementProtocol
from pipe_cae.domain import Domain


def _element_dofs(domain: Domain, elem: ElementProtocol) -> np.ndarray:
    return domain.dof_indices(elem.node_tags)


def _assemble_matrix(
    domain: Domain,
    label: str,
    compute,
    *,
    show_progress: bool = True,
) -> sp.csr_matrix:
    """要素行列を COO で蓄積して CSR に変換する."""
    elements = domain.elements
    n_total = len(elements)
    ndof_total = domain.ndof

    nnz_total = max(sum(e.ndof * e.ndof for e in elements), 1)
    rows = np.empty(nnz_total, dtype=np.int64)
    cols = np.empty(nnz_total, dtype=np.int64)
    data = np.empty(nnz_total, dtype=np.float64)

    t0 = time.time()
    progress_step = max(1, n_total // 100)
    k = 0
    for counter, elem in enumerate(elements, start=1):
        m = elem.ndof
        edofs = _element_dofs(domain, elem)
        Ke = compute(elem)
        block = m * m
        rows[k : k + block] = np.repeat(edofs, m)
        cols[k : k + block] = np.tile(edofs, m)
        data[k : k + block] = Ke.ravel()
        k += block

        if show_progress and (counter % progress_step == 0 or counter == n_total):
            ratio = counter / n_total
            bar_len = 40
            filled = int(bar_len * ratio)
            bar = "#" * filled + "-" * (bar_len - filled)
            elapsed = time.time() - t0
            print(
                f"\rAssemble {label} [{bar}] {counter}/{n_total} "
                f"({ratio * 100:5.1f}% in {elapsed:5.2f} sec)",
                end="",
                flush=True,
            )
            if counter == n_total:
                print()

    K = sp.csr_matrix((data[:k], (rows[:k], cols[:k])), shape=(ndof_total, ndof_total))
    K.sum_duplicates()
    return K


def assemble_global_stiffness(
    domain: Domain,
    *,
    initial: bool = False,
    show_progress: bool = True,
) -> sp.csr_matrix:
    """全体剛性行列（COO→CSR）.

    Args:
        domain: 節点・要素を保持する Domain
        initial: True で初期剛性、False で接線剛性
        show_progress: 進捗表示の有無

    Returns:
        K: CSR形式の全体剛性行列 (ndof, ndof)
    """
    if initial:
        return _assemble_matrix(domain, "K0", lambda e: e.initial_stiffness(), show_progress=show_progress)
    return _assemble_matrix(domain, "K", lambda e: e.tangent_stiffness(), show_progress=show_progress)


def assemble_mass_matrix(domain: Domain, *, show_progress: bool = True) -> sp.csr_matrix:
    """全体質量行列（COO→CSR）.

    DynamicElementProtocol に適合しない要素は寄与しない。
    """

    def _mass(elem: ElementProtocol) -> np.ndarray:
        if isinstance(elem, DynamicElementProtocol):
            return elem.mass_matrix()
        return np.zeros((elem.ndof, elem.ndof))

    return _assemble_matrix(domain, "M", _mass, show_progress=show_progress)


def assemble_resisting_force(domain: Domain) -> np.ndarray:
    """全体抵抗力ベクトル (ndof,)."""
    P = np.zeros(domain.ndof, dtype=float)
    for elem in domain.elements:
        edofs = _element_dofs(domain, elem)
        P[edofs] += elem.resisting_force()
    return P
