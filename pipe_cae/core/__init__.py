"""pipe_cae.core - 要素・断面・材料の抽象インタフェース定義・戻り値型.

Protocol 階層:
  ElementProtocol          — ホストソルバ向け要素契約
  DynamicElementProtocol   — 動解析用（+ mass_matrix）
  PipeSectionProtocol      — 管断面の能力セット（外径・肉厚・せん断係数 等）
  PipeMaterialProtocol     — 管材料の能力セット（E, G, α, ν の温度依存値）
"""

from pipe_cae.core.capability import (
    ElasticModuli,
    MassPerLength,
    OuterDiameter,
    PipeMaterialProtocol,
    PipeSectionProtocol,
    SectionStiffnessProperties,
    ShearCorrectionFactor,
    ThermalExpansion,
    WallThickness,
)
from pipe_cae.core.element import DynamicElementProtocol, ElementProtocol
from pipe_cae.core.results import (
    ArcGeometry,
    BasicStiffnessResult,
    DirichletResult,
    FlexibilityIntegral,
    LinearSolveResult,
    PipeProperties,
)

__all__ = [
    "ElementProtocol",
    "DynamicElementProtocol",
    "OuterDiameter",
    "WallThickness",
    "ShearCorrectionFactor",
    "SectionStiffnessProperties",
    "MassPerLength",
    "PipeSectionProtocol",
    "ElasticModuli",
    "ThermalExpansion",
    "PipeMaterialProtocol",
    "ArcGeometry",
    "PipeProperties",
    "FlexibilityIntegral",
    "BasicStiffnessResult",
    "LinearSolveResult",
    "DirichletResult",
]
