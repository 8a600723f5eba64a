"""状態管理

膜内濃度分布とタンク物質量の状態ベクトル、および導出量のデータクラスを提供します。

主要なエクスポート:
- StateLayout: 状態ベクトルの区画情報
- BoundaryState / FluxSample / FlowSplit / TankState: 各時刻の導出量
- SystemSnapshot: ある時刻の全導出量
"""

from .state_variables import StateLayout, SPECIES_ORDER

from .results import (
    BoundaryState,
    FluxSample,
    FlowSplit,
    TankState,
    SystemSnapshot,
)

__all__ = [
    "StateLayout",
    "SPECIES_ORDER",
    "BoundaryState",
    "FluxSample",
    "FlowSplit",
    "TankState",
    "SystemSnapshot",
]
