"""要素の抽象インタフェース定義.

Protocol 階層:
  ElementProtocol         — ホストソルバが毎反復呼び出す最小限の契約
                            （set_domain, tangent/initial 剛性, 抵抗力, zero_load）
  DynamicElementProtocol  — 動解析用（+ mass_matrix, 慣性不釣合い力）

要素はホスト（Domain）に接続された後、全体座標系の (ndof, ndof) 剛性行列と
(ndof,) 抵抗力ベクトルを返す。要素内部の基本系（basic system）の扱いは
各要素の責務であり、本 Protocol には現れない。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

import numpy as np

if TYPE_CHECKING:
    from pipe_cae.domain import Domain


@runtime_checkable
class ElementProtocol(Protocol):
    """有限要素の共通インタフェース.

    Attributes:
        tag: 要素番号
        ndof_per_node: 1節点あたりの自由度数（3D梁=6）
        nnodes: 要素の節点数
        ndof: 要素あたりの総自由度数（= ndof_per_node * nnodes）
        node_tags: 接続節点番号

    適合クラス例:
      - CurvedPipe
    """

    tag: int
    ndof_per_node: int
    nnodes: int
    ndof: int
    node_tags: tuple[int, ...]

    def set_domain(self, domain: Domain) -> None:
        """ホストに接続し、節点座標から要素幾何を確定する."""
        ...

    def tangent_stiffness(self) -> np.ndarray:
        """接線剛性行列 (ndof, ndof)（全体座標系）."""
        ...

    def initial_stiffness(self) -> np.ndarray:
        """初期剛性行列 (ndof, ndof)（全体座標系）."""
        ...

    def resisting_force(self) -> np.ndarray:
        """抵抗力ベクトル (ndof,)（全体座標系、等価節点荷重控除済み）."""
        ...

    def zero_load(self) -> None:
        """要素荷重をクリアする（荷重ステージ開始時）."""
        ...


@runtime_checkable
class DynamicElementProtocol(ElementProtocol, Protocol):
    """動解析に対応する要素のインタフェース.

    適合クラス例:
      - CurvedPipe（集中/整合質量の切替のみ）
    """

    def mass_matrix(self) -> np.ndarray:
        """質量行列 (ndof, ndof)（全体座標系）."""
        ...

    def add_inertia_load_to_unbalance(self, accel: np.ndarray) -> None:
        """節点加速度 (ndof,) から慣性力を不釣合い力に加える."""
        ...
