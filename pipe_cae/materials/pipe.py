"""管要素用の温度依存線形弾性材料."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np


class PipeMaterial:
    """温度依存の管材料（PipeMaterialProtocol適合）.

    温度点ごとに E, ν, α（と任意で G）を与え、区間内は線形補間する。
    温度点が1つの場合は温度に依存しない定数材料。
    表の範囲外の温度は ValueError。

    Args:
        temperatures: 温度点（狭義単調増加）
        E: 各温度点のヤング率
        nu: 各温度点のポアソン比
        alpha: 各温度点の線膨張係数
        G: 各温度点のせん断弾性率。None の場合 E/(2(1+ν))。
    """

    def __init__(
        self,
        temperatures: Sequence[float],
        E: Sequence[float],
        nu: Sequence[float],
        alpha: Sequence[float],
        G: Sequence[float] | None = None,
    ) -> None:
        self.temperatures = np.asarray(temperatures, dtype=float)
        self._E = np.asarray(E, dtype=float)
        self._nu = np.asarray(nu, dtype=float)
        self._alpha = np.asarray(alpha, dtype=float)
        self._G = None if G is None else np.asarray(G, dtype=float)

        n = self.temperatures.size
        if n == 0:
            raise ValueError("温度点が空です。")
        for name, arr in (("E", self._E), ("nu", self._nu), ("alpha", self._alpha)):
            if arr.shape != (n,):
                raise ValueError(f"{name} の点数が温度点数 {n} と一致しません: {arr.shape}")
        if self._G is not None and self._G.shape != (n,):
            raise ValueError(f"G の点数が温度点数 {n} と一致しません: {self._G.shape}")
        if n > 1 and np.any(np.diff(self.temperatures) <= 0.0):
            raise ValueError(f"温度点は狭義単調増加でなければなりません: {self.temperatures}")
        if np.any(self._E <= 0.0):
            raise ValueError(f"ヤング率 E は正値でなければなりません: {self._E}")
        if np.any(self._nu <= -1.0) or np.any(self._nu >= 0.5):
            raise ValueError(f"ポアソン比 nu は (-1, 0.5): {self._nu}")
        if self._G is not None and np.any(self._G <= 0.0):
            raise ValueError(f"せん断弾性率 G は正値でなければなりません: {self._G}")

    @classmethod
    def constant(
        cls,
        E: float,
        nu: float = 0.3,
        alpha: float = 0.0,
        G: float | None = None,
    ) -> PipeMaterial:
        """温度に依存しない材料を生成する."""
        return cls(
            [0.0],
            [E],
            [nu],
            [alpha],
            G=None if G is None else [G],
        )

    @classmethod
    def tabular(
        cls,
        table: Sequence[Sequence[float]],
        G: Sequence[float] | None = None,
    ) -> PipeMaterial:
        """(T, E, ν, α) 行の表から材料を生成する.

        Args:
            table: [[T0, E0, nu0, alpha0], [T1, E1, nu1, alpha1], ...]
            G: 各行のせん断弾性率（省略可）
        """
        arr = np.asarray(table, dtype=float)
        if arr.ndim != 2 or arr.shape[1] != 4:
            raise ValueError(f"表は (n, 4) = [T, E, nu, alpha] の形状が必要です: {arr.shape}")
        return cls(arr[:, 0], arr[:, 1], arr[:, 2], arr[:, 3], G=G)

    def _interp(self, values: np.ndarray, temperature: float) -> float:
        """温度で線形補間する（範囲外は ValueError）."""
        if self.temperatures.size == 1:
            return float(values[0])
        t_min = float(self.temperatures[0])
        t_max = float(self.temperatures[-1])
        if temperature < t_min or temperature > t_max:
            raise ValueError(
                f"温度 {temperature} が材料表の範囲 [{t_min}, {t_max}] 外です。"
            )
        return float(np.interp(temperature, self.temperatures, values))

    def elastic_modulus(self, temperature: float = 0.0) -> float:
        """ヤング率 E(T)."""
        return self._interp(self._E, temperature)

    def poisson_ratio(self, temperature: float = 0.0) -> float:
        """ポアソン比 ν(T)."""
        return self._interp(self._nu, temperature)

    def shear_modulus(self, temperature: float = 0.0) -> float:
        """せん断弾性率 G(T)."""
        if self._G is not None:
            return self._interp(self._G, temperature)
        return self.elastic_modulus(temperature) / (
            2.0 * (1.0 + self.poisson_ratio(temperature))
        )

    def thermal_expansion(self, temperature: float = 0.0) -> float:
        """線膨張係数 α(T)."""
        return self._interp(self._alpha, temperature)
