"""放圧弁

タンク圧力が大気圧を超えた分に比例して流出する不感帯付き線形弁です。

    q = Cv × (P - P_atm)   (P > P_atm)
    q = 0                  (P <= P_atm)

大気圧の位置で微分が不連続になります。
"""

import math

from config.sim_conditions import ValveConditions


def calculate_valve_outflow(tank_pressure: float, valve: ValveConditions) -> float:
    """
    放圧弁流出量 [mol/s]

    Args:
        tank_pressure: タンク圧力 [Pa]
        valve: 放圧弁条件

    Returns:
        流出量（非負）
    """
    return valve.coefficient * max(0.0, tank_pressure - valve.atmospheric_pressure)


def calculate_balance_pressure(inflow: float, valve: ValveConditions) -> float:
    """
    流入量と弁流出量が釣り合うタンク圧力 [Pa]

    弁が閉じたまま（coefficient = 0）で流入がある場合は釣り合わないため inf を返します。

    Args:
        inflow: タンクへの流入量 [mol/s]（非負）
        valve: 放圧弁条件
    """
    if valve.coefficient <= 0:
        return math.inf if inflow > 0 else valve.atmospheric_pressure
    return valve.atmospheric_pressure + inflow / valve.coefficient
