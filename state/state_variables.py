"""状態変数

膜内部節点の濃度（O2, N2）とタンク物質量を1本の状態ベクトルとして扱います。

状態ベクトルの並び:
    [C_O2[1..N-2], C_N2[1..N-2], n_tank]

境界節点（0, N-1）は積分対象外で、評価のたびに境界条件で上書きします。
"""

from dataclasses import dataclass
from typing import Dict

import numpy as np

from common.enums import Species
from .results import BoundaryState


# 状態ベクトル上の成分の並び順
SPECIES_ORDER = (Species.O2, Species.N2)


@dataclass(frozen=True)
class StateLayout:
    """状態ベクトルの区画情報"""

    num_nodes: int

    @property
    def num_interior(self) -> int:
        """内部節点数 N - 2"""
        return self.num_nodes - 2

    @property
    def size(self) -> int:
        """状態ベクトル長"""
        return len(SPECIES_ORDER) * self.num_interior + 1

    @property
    def tank_index(self) -> int:
        return self.size - 1

    def interior_slice(self, species: Species) -> slice:
        """成分の内部節点が格納されている区間"""
        offset = SPECIES_ORDER.index(species) * self.num_interior
        return slice(offset, offset + self.num_interior)

    def pack(self, interiors: Dict[Species, np.ndarray], tank_moles: float) -> np.ndarray:
        """内部節点濃度とタンク物質量を状態ベクトルに詰める"""
        y = np.empty(self.size, dtype=np.float64)
        for species in SPECIES_ORDER:
            y[self.interior_slice(species)] = interiors[species]
        y[self.tank_index] = tank_moles
        return y

    def interior(self, y: np.ndarray, species: Species) -> np.ndarray:
        """状態ベクトルから内部節点濃度を取り出す（コピーではなくビュー）"""
        return y[self.interior_slice(species)]

    def tank_moles(self, y: np.ndarray) -> float:
        return float(y[self.tank_index])

    def profile(self, y: np.ndarray, species: Species, boundary: BoundaryState) -> np.ndarray:
        """
        境界値を埋めた全節点の濃度分布を作る

        Args:
            y: 状態ベクトル
            species: 成分
            boundary: 現時刻の境界状態

        Returns:
            長さ N の濃度分布（index 0: 供給側、index N-1: 透過側）
        """
        profile = np.empty(self.num_nodes, dtype=np.float64)
        profile[0] = boundary.feed_concentration(species)
        profile[1:-1] = self.interior(y, species)
        profile[-1] = boundary.permeate_concentration(species)
        return profile
