"""計算結果のデータクラス

膜境界・透過流束・流量分配・タンク状態などの導出量を保持します。
いずれも各評価時点で再計算され、状態としては保持されません。
"""

from dataclasses import dataclass
from typing import Any, Dict

from common.enums import Species


@dataclass
class BoundaryState:
    """膜両面の分圧と平衡濃度（Henry則）"""

    o2_feed_partial_pressure: float  # Pa
    n2_feed_partial_pressure: float  # Pa
    o2_permeate_partial_pressure: float  # Pa
    n2_permeate_partial_pressure: float  # Pa
    o2_feed_concentration: float  # mol/m^3
    n2_feed_concentration: float  # mol/m^3
    o2_permeate_concentration: float  # mol/m^3
    n2_permeate_concentration: float  # mol/m^3

    def feed_concentration(self, species: Species) -> float:
        return getattr(self, f"{species.value}_feed_concentration")

    def permeate_concentration(self, species: Species) -> float:
        return getattr(self, f"{species.value}_permeate_concentration")


@dataclass
class FluxSample:
    """透過側界面の流束 [mol/(m^2·s)]（正: 透過側へ向かう向き）"""

    o2_flux: float
    n2_flux: float

    def flux(self, species: Species) -> float:
        return getattr(self, f"{species.value}_flux")


@dataclass
class FlowSplit:
    """透過・残留への流量分配結果"""

    o2_raw_permeate_flow: float  # mol/s 流束 × 膜面積（制限前）
    n2_raw_permeate_flow: float  # mol/s
    o2_permeate_flow: float  # mol/s 制限後
    n2_permeate_flow: float  # mol/s
    o2_retentate_flow: float  # mol/s
    n2_retentate_flow: float  # mol/s
    retentate_flow: float  # mol/s 残留側合計
    o2_retentate_mole_fraction: float  # -
    n2_retentate_mole_fraction: float  # -
    o2_saturated: bool = False  # 上限（供給量の99%）到達
    n2_saturated: bool = False
    is_degenerate: bool = False  # 残留側合計流量がほぼ0で組成が直前値

    def permeate_flow(self, species: Species) -> float:
        return getattr(self, f"{species.value}_permeate_flow")

    def raw_permeate_flow(self, species: Species) -> float:
        return getattr(self, f"{species.value}_raw_permeate_flow")

    def retentate_flow_of(self, species: Species) -> float:
        return getattr(self, f"{species.value}_retentate_flow")

    def retentate_mole_fraction(self, species: Species) -> float:
        return getattr(self, f"{species.value}_retentate_mole_fraction")

    @property
    def permeate_total_flow(self) -> float:
        return self.o2_permeate_flow + self.n2_permeate_flow

    def to_dict(self) -> Dict[str, Any]:
        return {
            "o2_raw_permeate_flow": self.o2_raw_permeate_flow,
            "n2_raw_permeate_flow": self.n2_raw_permeate_flow,
            "o2_permeate_flow": self.o2_permeate_flow,
            "n2_permeate_flow": self.n2_permeate_flow,
            "o2_retentate_flow": self.o2_retentate_flow,
            "n2_retentate_flow": self.n2_retentate_flow,
            "retentate_flow": self.retentate_flow,
            "o2_retentate_mole_fraction": self.o2_retentate_mole_fraction,
            "n2_retentate_mole_fraction": self.n2_retentate_mole_fraction,
            "o2_saturated": self.o2_saturated,
            "n2_saturated": self.n2_saturated,
            "composition_degenerate": self.is_degenerate,
        }


@dataclass
class TankState:
    """バッファタンクの状態"""

    moles: float  # mol
    pressure: float  # Pa


@dataclass
class SystemSnapshot:
    """ある時刻における全導出量"""

    time: float  # s
    feed_pressure: float  # Pa
    boundary: BoundaryState
    flux: FluxSample
    flows: FlowSplit
    tank: TankState
    valve_outflow: float  # mol/s
    stage_cut: float = 0.0  # - 透過流量 / 供給流量

    def to_dict(self) -> Dict[str, Any]:
        record = {
            "time": self.time,
            "feed_pressure": self.feed_pressure,
        }
        record.update(self.flows.to_dict())
        record.update({
            "tank_pressure": self.tank.pressure,
            "tank_moles": self.tank.moles,
            "valve_outflow": self.valve_outflow,
            "stage_cut": self.stage_cut,
        })
        return record
