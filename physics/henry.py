"""Henry則による膜境界条件

供給側・透過側の分圧から、膜両面の平衡溶解濃度を計算します。

計算式:
    p_i = P × y_i          （分圧）
    C_i = S_i × p_i        （Henry則、S_i: 溶解度係数）

主要な関数:
- calculate_partial_pressure(): 分圧
- calculate_equilibrium_concentration(): 平衡濃度
- calculate_boundary_state(): 膜両面の分圧・平衡濃度一式
"""

from common.enums import Species
from config.sim_conditions import FeedGasConditions, MembraneConditions, PermeateConditions
from state.results import BoundaryState


def calculate_partial_pressure(total_pressure: float, mole_fraction: float) -> float:
    """分圧 [Pa]"""
    return total_pressure * mole_fraction


def calculate_equilibrium_concentration(partial_pressure: float, solubility: float) -> float:
    """Henry則による平衡濃度 [mol/m^3]"""
    return solubility * partial_pressure


def calculate_boundary_state(
    feed_pressure: float,
    feed_gas: FeedGasConditions,
    permeate: PermeateConditions,
    membrane: MembraneConditions,
) -> BoundaryState:
    """
    膜両面の分圧と平衡濃度を計算

    供給圧力は時間変化しますが、モル分率と透過側条件は運転中一定です。
    負の圧力は条件設定時に排除されるため、ここではチェックしません。

    Args:
        feed_pressure: 供給側全圧 [Pa]
        feed_gas: 供給ガス条件
        permeate: 透過側条件
        membrane: 膜条件（溶解度係数）

    Returns:
        BoundaryState: 分圧 [Pa] と平衡濃度 [mol/m^3]
    """
    values = {}
    for species in Species:
        solubility = membrane.solubility(species)
        p_feed = calculate_partial_pressure(feed_pressure, feed_gas.mole_fraction(species))
        p_perm = calculate_partial_pressure(permeate.pressure, permeate.mole_fraction(species))
        values[f"{species.value}_feed_partial_pressure"] = p_feed
        values[f"{species.value}_permeate_partial_pressure"] = p_perm
        values[f"{species.value}_feed_concentration"] = calculate_equilibrium_concentration(p_feed, solubility)
        values[f"{species.value}_permeate_concentration"] = calculate_equilibrium_concentration(p_perm, solubility)
    return BoundaryState(**values)
