"""ホスト側の節点・要素コンテナ.

Domain は節点（座標・試行変位・加速度）と要素を保持し、要素を追加した
時点で element.set_domain(domain) を呼んで幾何を確定させる。
全体 DOF 番号は節点の追加順に 6 DOF/node で振る。
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from pipe_cae.core.element import ElementProtocol


@dataclass
class Node:
    """3D 節点.

    Attributes:
        tag: 節点番号
        crds: (3,) 座標
        disp: (ndf,) 試行変位 [ux, uy, uz, θx, θy, θz]
        accel: (ndf,) 試行加速度
    """

    tag: int
    crds: np.ndarray
    disp: np.ndarray = field(default_factory=lambda: np.zeros(6))
    accel: np.ndarray = field(default_factory=lambda: np.zeros(6))

    def __post_init__(self) -> None:
        self.crds = np.asarray(self.crds, dtype=float)
        self.disp = np.asarray(self.disp, dtype=float)
        self.accel = np.asarray(self.accel, dtype=float)


class Domain:
    """節点と要素の集合.

    Args:
        ndm: 空間次元（曲がり管要素は 3 のみ）
        ndf: 節点あたり自由度数
    """

    def __init__(self, ndm: int = 3, ndf: int = 6) -> None:
        self.ndm = ndm
        self.ndf = ndf
        self._nodes: dict[int, Node] = {}
        self._order: list[int] = []
        self._elements: dict[int, ElementProtocol] = {}

    @property
    def nodes(self) -> list[Node]:
        """追加順の節点リスト."""
        return [self._nodes[t] for t in self._order]

    @property
    def elements(self) -> list[ElementProtocol]:
        """追加順の要素リスト."""
        return list(self._elements.values())

    @property
    def ndof(self) -> int:
        """全体自由度数."""
        return self.ndf * len(self._order)

    def add_node(self, tag: int, crds) -> Node:
        """節点を追加する."""
        if tag in self._nodes:
            raise ValueError(f"節点 {tag} は既に存在します。")
        crds = np.asarray(crds, dtype=float)
        if crds.shape != (self.ndm,):
            raise ValueError(f"節点座標は ({self.ndm},) が必要: {crds.shape}")
        node = Node(tag, crds, disp=np.zeros(self.ndf), accel=np.zeros(self.ndf))
        self._nodes[tag] = node
        self._order.append(tag)
        return node

    def get_node(self, tag: int) -> Node | None:
        """節点を返す（存在しなければ None）."""
        return self._nodes.get(tag)

    def node_index(self, tag: int) -> int:
        """節点の通し番号（DOF 番号の基準）."""
        return self._order.index(tag)

    def dof_indices(self, node_tags) -> np.ndarray:
        """節点番号列から全体 DOF インデックスを返す."""
        edofs = np.empty(self.ndf * len(node_tags), dtype=np.int64)
        for idx, tag in enumerate(node_tags):
            n = self.node_index(tag)
            for d in range(self.ndf):
                edofs[self.ndf * idx + d] = self.ndf * n + d
        return edofs

    def add_element(self, element: ElementProtocol) -> None:
        """要素を追加し、set_domain で幾何を確定する."""
        if element.tag in self._elements:
            raise ValueError(f"要素 {element.tag} は既に存在します。")
        element.set_domain(self)
        self._elements[element.tag] = element

    def set_trial_displacement(self, u: np.ndarray) -> None:
        """全体変位ベクトル (ndof,) を節点の試行変位に書き込む."""
        u = np.asarray(u, dtype=float)
        if u.shape != (self.ndof,):
            raise ValueError(f"変位ベクトルは ({self.ndof},) が必要: {u.shape}")
        for n, tag in enumerate(self._order):
            self._nodes[tag].disp = u[self.ndf * n : self.ndf * (n + 1)].copy()

    def trial_displacement(self) -> np.ndarray:
        """節点の試行変位を全体ベクトル (ndof,) にまとめて返す."""
        if not self._order:
            return np.zeros(0)
        return np.concatenate([self._nodes[t].disp for t in self._order])

    def zero_loads(self) -> None:
        """全要素の要素荷重をクリアする（荷重ステージ開始）."""
        for element in self._elements.values():
            element.zero_load()
