"""バッファタンク

残留側N2流量を受け入れるタンクの物質収支と圧力を計算します。
温度・体積は一定とし、理想気体の状態方程式で圧力を求めます。

    dn/dt = 残留N2流量 - 放圧弁流出量
    P = n R T / V
"""

from common.constants import GAS_CONSTANT
from config.sim_conditions import TankConditions
from state.results import TankState


def calculate_tank_pressure(moles: float, tank: TankConditions) -> float:
    """物質量からタンク圧力を計算 [Pa]"""
    return moles * GAS_CONSTANT * tank.temperature / tank.volume


def calculate_moles_from_pressure(pressure: float, tank: TankConditions) -> float:
    """圧力からタンク内物質量を計算 [mol]"""
    return pressure * tank.volume / (GAS_CONSTANT * tank.temperature)


def calculate_tank_state(moles: float, tank: TankConditions) -> TankState:
    return TankState(moles=moles, pressure=calculate_tank_pressure(moles, tank))


def calculate_net_inflow(retentate_n2_flow: float, valve_outflow: float) -> float:
    """タンク正味流入量 dn/dt [mol/s]"""
    return retentate_n2_flow - valve_outflow
