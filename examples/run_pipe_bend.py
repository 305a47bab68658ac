#!/usr/bin/env python3
"""pipe-cae 曲がり管サンプルの解析実行スクリプト.

90° エルボ片持ち（固定端: (R,0,0), 自由端: (0,R,0)）に対し、
荷重ケースごとに線形静解析を実行して先端変位を表示する。
先端集中荷重は Castigliano の解析解と比較する。

Usage:
    python examples/run_pipe_bend.py              # 全ケース実行
    python examples/run_pipe_bend.py tip          # 先端集中荷重のみ
    python examples/run_pipe_bend.py weight       # 自重のみ
    python examples/run_pipe_bend.py pressure     # 内圧（Bourdon 効果）のみ
    python examples/run_pipe_bend.py thermal      # 温度上昇のみ
"""

from __future__ import annotations

import math
import sys
from pathlib import Path

import numpy as np

# プロジェクトルートを PYTHONPATH に追加
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from pipe_cae.bc import fixed_dofs_of
from pipe_cae.domain import Domain
from pipe_cae.elements.curved_pipe import CurvedPipe, CurvedPipeConfig
from pipe_cae.materials.pipe import PipeMaterial
from pipe_cae.sections.pipe import PipeSection
from pipe_cae.solver import solve_linear_static

# 鋼管 114.3 x 6.0（SI 単位）
RADIUS = 0.1524 * 1.5
D_OUT = 0.1143
WALL = 0.006
DENSITY = 7850.0
GRAVITY = 9.81

STEEL = PipeMaterial.tabular(
    [
        [20.0, 203e9, 0.3, 11.5e-6],
        [200.0, 191e9, 0.3, 12.6e-6],
        [400.0, 176e9, 0.3, 13.6e-6],
    ]
)


def build_elbow(n_elems: int, config: CurvedPipeConfig | None = None) -> tuple[Domain, list[CurvedPipe]]:
    """原点中心の 90° エルボを n_elems 要素で生成する."""
    sec = PipeSection.from_density(D_OUT, WALL, DENSITY)
    dom = Domain()
    for k in range(n_elems + 1):
        phi = 0.5 * math.pi * k / n_elems
        dom.add_node(k + 1, [RADIUS * math.cos(phi), RADIUS * math.sin(phi), 0.0])
    elems = []
    for k in range(n_elems):
        el = CurvedPipe(k + 1, k + 1, k + 2, STEEL, sec, [0.0, 0.0, 0.0], config=config)
        dom.add_element(el)
        elems.append(el)
    return dom, elems


def _solve(dom: Domain, f: np.ndarray | None = None) -> np.ndarray:
    result = solve_linear_static(dom, fixed_dofs_of(dom, [1]), f, show_progress=False)
    return result.u[-6:]


def _print_tip(u: np.ndarray) -> None:
    print(f"  先端変位 u  = ({u[0]:+.6e}, {u[1]:+.6e}, {u[2]:+.6e}) m")
    print(f"  先端回転 θ  = ({u[3]:+.6e}, {u[4]:+.6e}, {u[5]:+.6e}) rad")


def run_tip_load():
    """先端集中荷重: 面内 Fy と面外 Fz."""
    print("=" * 60)
    print("90° エルボ 先端集中荷重（1要素）")
    print("=" * 60)
    F = 1.0e3
    sec = PipeSection.from_dimensions(D_OUT, WALL)
    E = STEEL.elastic_modulus(20.0)
    G = STEEL.shear_modulus(20.0)
    EI = E * sec.Iz
    GJ = G * sec.J

    dom, _ = build_elbow(1, CurvedPipeConfig(t0=20.0))
    f = np.zeros(dom.ndof)
    f[-5] = F
    u = _solve(dom, f)
    _print_tip(u)
    ref = math.pi * F * RADIUS**3 / (4.0 * EI)
    print(f"  δy（曲げのみの解析解）= {ref:.6e}, FE = {u[1]:.6e}, 比 = {u[1] / ref:.4f}")

    dom, _ = build_elbow(1, CurvedPipeConfig(t0=20.0))
    f = np.zeros(dom.ndof)
    f[-4] = F
    u = _solve(dom, f)
    ref = F * RADIUS**3 * (math.pi / (4.0 * EI) + (0.75 * math.pi - 2.0) / GJ)
    print(f"  δz（曲げ+ねじりの解析解）= {ref:.6e}, FE = {u[2]:.6e}, 比 = {u[2] / ref:.4f}")


def run_self_weight():
    """自重（全体 -z 方向）: 1要素と4要素の比較."""
    print("=" * 60)
    print("90° エルボ 自重")
    print("=" * 60)
    for n in (1, 4):
        dom, elems = build_elbow(n, CurvedPipeConfig(t0=20.0))
        for el in elems:
            el.add_global_uniform_load([0.0, 0.0, -el.section.rho * GRAVITY])
        u = _solve(dom)
        print(f"  要素数 {n}:")
        _print_tip(u)


def run_pressure():
    """内圧 10 MPa による Bourdon 効果（エルボが開く）."""
    print("=" * 60)
    print("90° エルボ 内圧 10 MPa")
    print("=" * 60)
    dom, _ = build_elbow(1, CurvedPipeConfig(t0=20.0, pressure=10.0e6))
    _print_tip(_solve(dom))


def run_thermal():
    """20 → 300 ℃ の一様温度上昇（自由熱膨張）."""
    print("=" * 60)
    print("90° エルボ 温度上昇 20 → 300 ℃")
    print("=" * 60)
    dom, (el,) = build_elbow(1, CurvedPipeConfig(t0=20.0, verbose=True))
    el.add_thermal_load(280.0)
    u = _solve(dom)
    _print_tip(u)
    strain = STEEL.thermal_expansion(300.0) * 280.0
    print(f"  相似膨張の参考値 = ({-strain * RADIUS:+.6e}, {strain * RADIUS:+.6e}, 0)")


CASES = {
    "tip": run_tip_load,
    "weight": run_self_weight,
    "pressure": run_pressure,
    "thermal": run_thermal,
}


if __name__ == "__main__":
    selected = sys.argv[1:] or list(CASES)
    for name in selected:
        if name not in CASES:
            print(f"未知のケース: {name}（{', '.join(CASES)}）")
            sys.exit(1)
        CASES[name]()
        print()
