"""シミュレーター（ファサード）

膜分離器 + バッファタンクのシミュレーションを実行するためのメインクラスです。
内部的には以下のクラスに責務を分離しています：

- SimulationIO: 入力（条件ファイルの読み込み）
- SimulationRunner: シミュレーション実行（計算ロジック）

使用例:
    from process import MembraneTankSimulator

    simulator = MembraneTankSimulator("default")
    output = simulator.execute_simulation()
"""

from typing import Callable, Optional

from physics.valve import calculate_balance_pressure
from process.simulation_io import SimulationIO
from process.simulation_runner import SimulationRunner, SimulationOutput
import logger as log


class MembraneTankSimulator:
    """膜分離器 + バッファタンクのシミュレーションを実行するクラス

    属性:
        cond_id: 条件ID（例: "default"）
        sim_conds: シミュレーション条件
    """

    def __init__(self, cond_id: str, feed_pressure_source: Optional[Callable[[float], float]] = None):
        """
        初期化

        Args:
            cond_id: 条件ID
            feed_pressure_source: 供給圧力源（省略時は条件のステップ入力）
        """
        self.logger = log.logger.getChild(__name__)
        self.cond_id = cond_id

        self._io = SimulationIO()
        self.sim_conds = self._io.load_conditions(cond_id)
        self.runner = SimulationRunner(self.sim_conds, feed_pressure_source)

    def execute_simulation(self) -> SimulationOutput:
        """
        シミュレーションを実行し、最終時刻の主要な出力をログに記録する

        Returns:
            SimulationOutput: シミュレーション出力
        """
        output = self.runner.run()

        final = output.results.final_snapshot
        if final is not None:
            self.logger.info(
                f"最終値 t = {final.time:.3f} s: "
                f"yN2_ret = {final.flows.n2_retentate_mole_fraction:.4f}, "
                f"F_ret = {final.flows.retentate_flow:.4e} mol/s, "
                f"F_perm_O2 = {final.flows.o2_permeate_flow:.4e} mol/s, "
                f"F_perm_N2 = {final.flows.n2_permeate_flow:.4e} mol/s, "
                f"stage_cut = {final.stage_cut:.4f}, "
                f"P_tank = {final.tank.pressure:.1f} Pa"
            )

            # 定常判定の目安（膜内の dC/dt と、現在の流入量に対する弁の釣り合い圧力）
            derivative_norm = self.runner.model.interior_derivative_norm(output.final_time, output.final_state)
            balance_pressure = calculate_balance_pressure(final.flows.n2_retentate_flow, self.sim_conds.valve)
            self.logger.info(
                f"max|dC/dt| = {derivative_norm:.3e} mol/(m^3·s), "
                f"P_balance = {balance_pressure:.1f} Pa"
            )
        return output
