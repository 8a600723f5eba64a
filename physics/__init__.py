"""物理計算モジュール

膜分離器とバッファタンクで使用する純粋な物理計算を提供します。

設計方針:
- 各モジュールは単一の物理量/物理式を計算
- 状態に依存しない純粋な関数として実装
- 状態ベクトルの組み立てと時間積分は process/ で行う

主要なモジュール:
- henry.py: Henry則による膜境界濃度
- membrane.py: 膜内拡散場（線の方法）
- permeation.py: 透過流束・流量分配
- tank.py: バッファタンクの物質収支・圧力
- valve.py: 放圧弁
- feed_pressure.py: 供給圧力のステップ入力

使用例:
    from physics.henry import calculate_boundary_state
    boundary = calculate_boundary_state(feed_pressure, conds.feed_gas, conds.permeate, conds.membrane)

    from physics.valve import calculate_valve_outflow
    outflow = calculate_valve_outflow(tank_pressure, conds.valve)
"""

from .henry import (
    calculate_partial_pressure,
    calculate_equilibrium_concentration,
    calculate_boundary_state,
)

from .membrane import (
    calculate_interior_derivatives,
    calculate_linear_steady_profile,
    create_initial_interior,
)

from .permeation import (
    calculate_permeate_flux,
    calculate_flux_sample,
    permeate_flow_limit,
    calculate_flow_split,
    calculate_stage_cut,
)

from .tank import (
    calculate_tank_pressure,
    calculate_moles_from_pressure,
    calculate_tank_state,
    calculate_net_inflow,
)

from .valve import calculate_valve_outflow, calculate_balance_pressure

from .feed_pressure import calculate_step_pressure, FeedPressureStep

__all__ = [
    # 境界条件
    "calculate_partial_pressure",
    "calculate_equilibrium_concentration",
    "calculate_boundary_state",

    # 拡散場
    "calculate_interior_derivatives",
    "calculate_linear_steady_profile",
    "create_initial_interior",

    # 流束・流量
    "calculate_permeate_flux",
    "calculate_flux_sample",
    "permeate_flow_limit",
    "calculate_flow_split",
    "calculate_stage_cut",

    # タンク
    "calculate_tank_pressure",
    "calculate_moles_from_pressure",
    "calculate_tank_state",
    "calculate_net_inflow",

    # 放圧弁
    "calculate_valve_outflow",
    "calculate_balance_pressure",

    # 供給圧力
    "calculate_step_pressure",
    "FeedPressureStep",
]
