"""システム結合モデル

供給圧力 → 膜境界 → 膜内拡散場 → 透過流束 → 流量分配 → タンク → 放圧弁
を結合し、状態ベクトル全体の時間微分を与えます。

状態ベクトル: [C_O2[1..N-2], C_N2[1..N-2], n_tank]

微分の評価は状態ベクトルを読むだけで、書き換えは行いません。
タンク・弁は膜の出力を受け取る一方向の結合で、膜側へは戻りません。
"""

from typing import Callable, Dict, Optional, Tuple

import numpy as np

from common.constants import NEGATIVE_CONCENTRATION_TOLERANCE
from common.enums import Species
from common.exceptions import NumericalInstabilityError
from config.sim_conditions import SimulationConditions
from physics.feed_pressure import FeedPressureStep
from physics.henry import calculate_boundary_state
from physics.membrane import calculate_interior_derivatives, create_initial_interior
from physics.permeation import calculate_flow_split, calculate_flux_sample, calculate_stage_cut
from physics.tank import calculate_moles_from_pressure, calculate_net_inflow, calculate_tank_state
from physics.valve import calculate_valve_outflow
from state import BoundaryState, StateLayout, SystemSnapshot, SPECIES_ORDER


class SystemModel:
    """膜分離器 + バッファタンク + 放圧弁の結合モデル

    属性:
        sim_conds: シミュレーション条件
        layout: 状態ベクトルの区画情報
        dx: 節点間隔 [m]
        feed_pressure_source: 時刻 [s] → 供給全圧 [Pa]
    """

    def __init__(
        self,
        sim_conds: SimulationConditions,
        feed_pressure_source: Optional[Callable[[float], float]] = None,
    ):
        self.sim_conds = sim_conds
        self.layout = StateLayout(sim_conds.num_nodes)
        self.dx = sim_conds.node_spacing
        if feed_pressure_source is None:
            feed_pressure_source = FeedPressureStep(sim_conds.feed_pressure_step)
        self.feed_pressure_source = feed_pressure_source

    # ============================================================
    # 初期状態
    # ============================================================

    def initial_state(self) -> np.ndarray:
        """初期状態ベクトル（内部節点濃度 + タンク物質量）"""
        boundary = self.boundary_state(0.0)
        mode = self.sim_conds.common.initial_profile_mode
        interiors = {
            species: create_initial_interior(
                mode,
                boundary.feed_concentration(species),
                boundary.permeate_concentration(species),
                self.layout.num_nodes,
            )
            for species in SPECIES_ORDER
        }
        return self.layout.pack(interiors, self.sim_conds.common.initial_tank_moles)

    # ============================================================
    # 導出量
    # ============================================================

    def boundary_state(self, time: float) -> BoundaryState:
        return calculate_boundary_state(
            self.feed_pressure_source(time),
            self.sim_conds.feed_gas,
            self.sim_conds.permeate,
            self.sim_conds.membrane,
        )

    def profiles(self, y: np.ndarray, boundary: BoundaryState) -> Dict[Species, np.ndarray]:
        """境界値を埋めた全節点の濃度分布（成分ごと）"""
        return {species: self.layout.profile(y, species, boundary) for species in SPECIES_ORDER}

    def evaluate(
        self,
        time: float,
        y: np.ndarray,
        fallback_composition: Optional[Tuple[float, float]] = None,
    ) -> SystemSnapshot:
        """
        ある時刻の全導出量を計算

        Args:
            time: 時刻 [s]
            y: 状態ベクトル
            fallback_composition: 残留組成が定義できない場合に使う (O2, N2) モル分率

        Returns:
            SystemSnapshot: 境界・流束・流量分配・タンク・弁の計算結果
        """
        snapshot, _ = self._evaluate(time, y, fallback_composition)
        return snapshot

    def _evaluate(self, time: float, y: np.ndarray, fallback_composition=None):
        """導出量と全節点の濃度分布を返す"""
        conds = self.sim_conds
        feed_pressure = self.feed_pressure_source(time)
        boundary = calculate_boundary_state(feed_pressure, conds.feed_gas, conds.permeate, conds.membrane)
        profiles = self.profiles(y, boundary)
        flux = calculate_flux_sample(profiles, conds.membrane, self.dx)
        flows = calculate_flow_split(flux, conds.membrane.area, conds.feed_gas, fallback_composition)
        tank = calculate_tank_state(self.layout.tank_moles(y), conds.tank)
        valve_outflow = calculate_valve_outflow(tank.pressure, conds.valve)
        snapshot = SystemSnapshot(
            time=time,
            feed_pressure=feed_pressure,
            boundary=boundary,
            flux=flux,
            flows=flows,
            tank=tank,
            valve_outflow=valve_outflow,
            stage_cut=calculate_stage_cut(flows, conds.feed_gas),
        )
        return snapshot, profiles

    # ============================================================
    # 時間微分
    # ============================================================

    def derivatives(self, time: float, y: np.ndarray) -> np.ndarray:
        """
        状態ベクトルの時間微分 dy/dt

        (a) 供給圧力 → (b) 境界濃度 → (c) 境界節点の上書き →
        (d) 内部節点の拡散 → (e) 流束・流量分配 → (f) 放圧弁 → (g) 微分ベクトル

        Args:
            time: 時刻 [s]
            y: 状態ベクトル（読み取りのみ）

        Returns:
            dy/dt
        """
        conds = self.sim_conds
        snapshot, profiles = self._evaluate(time, y)

        dydt = np.empty_like(y, dtype=np.float64)
        for species in SPECIES_ORDER:
            dydt[self.layout.interior_slice(species)] = calculate_interior_derivatives(
                profiles[species], conds.membrane.diffusivity(species), self.dx
            )
        dydt[self.layout.tank_index] = calculate_net_inflow(
            snapshot.flows.n2_retentate_flow, snapshot.valve_outflow
        )
        return dydt

    def interior_derivative_norm(self, time: float, y: np.ndarray) -> float:
        """内部節点の dC/dt の最大絶対値 [mol/(m^3·s)]（定常判定用）"""
        dydt = self.derivatives(time, y)
        return float(np.max(np.abs(dydt[: self.layout.tank_index])))

    # ============================================================
    # 発散チェック
    # ============================================================

    def check_state(self, time: float, y: np.ndarray) -> None:
        """
        状態ベクトルの健全性チェック

        Raises:
            NumericalInstabilityError: 非有限値、負濃度、負のタンク物質量
        """
        if not np.all(np.isfinite(y)):
            raise NumericalInstabilityError(f"t = {time:.6g} s で状態量が非有限値になりました")

        boundary = self.boundary_state(time)
        for species in SPECIES_ORDER:
            scale = max(
                abs(boundary.feed_concentration(species)),
                abs(boundary.permeate_concentration(species)),
            )
            interior = self.layout.interior(y, species)
            if interior.size and interior.min() < -NEGATIVE_CONCENTRATION_TOLERANCE * scale:
                raise NumericalInstabilityError(
                    f"t = {time:.6g} s で{species.name}濃度が負になりました (min = {interior.min():.6g} mol/m^3)"
                )

        reference_moles = calculate_moles_from_pressure(
            max(self.sim_conds.valve.atmospheric_pressure, self.feed_pressure_source(time)),
            self.sim_conds.tank,
        )
        tank_moles = self.layout.tank_moles(y)
        if tank_moles < -NEGATIVE_CONCENTRATION_TOLERANCE * reference_moles:
            raise NumericalInstabilityError(
                f"t = {time:.6g} s でタンク物質量が負になりました (n = {tank_moles:.6g} mol)"
            )
