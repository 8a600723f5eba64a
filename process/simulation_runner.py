"""シミュレーション実行モジュール

結合モデルの状態ベクトルを時間積分するクラスを提供します。
入出力処理は含まず、純粋な計算のみを担当します。

積分には scipy.integrate の OdeSolver（RK45 など）を用い、1ステップずつ進めます。
終了条件はステップ間で判定し、出力は一定間隔の時刻でステップ内の補間値から作ります。

使用例:
    from config.sim_conditions import SimulationConditions
    from process.simulation_runner import SimulationRunner

    sim_conds = SimulationConditions.from_cond_id("default")
    runner = SimulationRunner(sim_conds)
    output = runner.run()
    df = output.results.to_dataframe()
"""

import warnings
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

import numpy as np
from scipy import integrate

from common.enums import SimulationStatus, Species
from common.exceptions import NumericalInstabilityError, SingularityWarning
from config.sim_conditions import SimulationConditions
from process.simulation_results import SimulationResults
from process.system_model import SystemModel
from process.termination_conditions import (
    TerminationCondition,
    TerminationConditionType,
    determine_termination,
    should_continue,
)
from state import SystemSnapshot
import logger as log


# 進捗ログを出力するステップ間隔
PROGRESS_LOG_INTERVAL = 1000


@dataclass
class SimulationOutput:
    """シミュレーション出力

    Attributes:
        results: 出力時刻ごとの結果
        final_time: 最終時刻 [s]
        final_state: 最終時刻の状態ベクトル
        final_profiles: 最終時刻の全節点濃度分布（成分ごと）[mol/m^3]
        status: 終了時の状態（FINISHED / STOPPED）
        termination: 終了理由
        num_steps: 積分ステップ数
        num_degenerate_samples: 残留組成が定義できなかった出力数
    """
    results: SimulationResults
    final_time: float
    final_state: np.ndarray
    final_profiles: Dict[Species, np.ndarray] = field(default_factory=dict)
    status: SimulationStatus = SimulationStatus.FINISHED
    termination: Optional[TerminationConditionType] = None
    num_steps: int = 0
    num_degenerate_samples: int = 0

    @property
    def success(self) -> bool:
        return self.status == SimulationStatus.FINISHED


class SimulationRunner:
    """シミュレーション実行クラス

    状態遷移: INITIALIZING → RUNNING → FINISHED（外部停止要求時のみ STOPPED、積分失敗時は FAILED）
    """

    def __init__(
        self,
        sim_conds: SimulationConditions,
        feed_pressure_source: Optional[Callable[[float], float]] = None,
    ):
        """
        初期化

        Args:
            sim_conds: シミュレーション条件（検証済み）
            feed_pressure_source: 時刻 [s] → 供給全圧 [Pa]（省略時は条件のステップ入力）
        """
        self.logger = log.logger.getChild(__name__)

        self.sim_conds = sim_conds
        self.model = SystemModel(sim_conds, feed_pressure_source)
        self.status = SimulationStatus.INITIALIZING
        self._stop_requested = False

        # 直前の有効な残留組成 (O2, N2)
        self._last_valid_composition: Optional[Tuple[float, float]] = None
        self._num_degenerate_samples = 0

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested

    def request_stop(self) -> None:
        """外部から停止を要求する（次のステップ間で停止）"""
        self._stop_requested = True

    def sample_times(self) -> np.ndarray:
        """出力時刻 [s]（0から終了時刻まで一定間隔、終了時刻を必ず含む）"""
        end_time = self.sim_conds.common.end_time
        interval = self.sim_conds.common.output_interval
        num_intervals = int(np.floor(end_time / interval + 1e-9))
        times = interval * np.arange(num_intervals + 1, dtype=np.float64)
        if end_time - times[-1] > 1e-9 * end_time:
            times = np.append(times, end_time)
        else:
            times[-1] = end_time
        return times

    def run(self, step_callback: Optional[Callable[[float, np.ndarray], None]] = None) -> SimulationOutput:
        """
        シミュレーションを実行

        Args:
            step_callback: 各積分ステップ後に (時刻, 状態ベクトル) で呼ばれる関数。
                ここから request_stop() を呼ぶと次のステップ前に停止する。

        Returns:
            SimulationOutput: シミュレーション出力

        Raises:
            NumericalInstabilityError: 積分が発散した場合
        """
        conds = self.sim_conds
        solver_conds = conds.solver
        condition = TerminationCondition(end_time=conds.common.end_time)

        results = SimulationResults()
        sample_times = self.sample_times()

        y0 = self.model.initial_state()
        self.model.check_state(0.0, y0)

        solver_class = getattr(integrate, solver_conds.method)
        solver = solver_class(
            self.model.derivatives,
            0.0,
            y0,
            condition.end_time,
            rtol=solver_conds.rtol,
            atol=solver_conds.atol,
            max_step=solver_conds.max_step,
        )

        # 前回の実行状態を持ち越さない
        self._stop_requested = False
        self._last_valid_composition = None
        self._num_degenerate_samples = 0

        self.logger.info(
            f"シミュレーション開始 cond = {conds.cond_id}, method = {solver_conds.method}, "
            f"N = {conds.num_nodes}, end_time = {condition.end_time} s"
        )
        self.status = SimulationStatus.RUNNING

        self._record(results, 0.0, y0)
        next_sample = 1
        num_steps = 0

        while should_continue(condition, solver.t, self._stop_requested):
            t_old = solver.t
            message = solver.step()
            num_steps += 1

            if solver.status == "failed":
                self.status = SimulationStatus.FAILED
                error_msg = f"t = {t_old:.6g} s で積分に失敗しました: {message}"
                self.logger.error(error_msg)
                raise NumericalInstabilityError(error_msg)

            try:
                self.model.check_state(solver.t, solver.y)
            except NumericalInstabilityError as e:
                self.status = SimulationStatus.FAILED
                self.logger.error(str(e))
                raise

            # 出力時刻の補間
            if next_sample < len(sample_times) and sample_times[next_sample] <= solver.t:
                dense = solver.dense_output()
                while next_sample < len(sample_times) and sample_times[next_sample] <= solver.t:
                    t_sample = sample_times[next_sample]
                    y_sample = solver.y.copy() if t_sample == solver.t else dense(t_sample)
                    self._record(results, t_sample, y_sample)
                    next_sample += 1

            if num_steps % PROGRESS_LOG_INTERVAL == 0:
                self.logger.debug(f"step = {num_steps}, t = {solver.t:.6g} s")

            if step_callback is not None:
                step_callback(solver.t, solver.y)

        termination = determine_termination(condition, solver.t, self._stop_requested)
        if termination == TerminationConditionType.STOP_REQUESTED:
            self.status = SimulationStatus.STOPPED
            self.logger.warning(f"停止要求によりシミュレーションを中断しました t = {solver.t:.6g} s")
        else:
            self.status = SimulationStatus.FINISHED
            self.logger.info(f"シミュレーション完了 t = {solver.t:.6g} s, steps = {num_steps}")

        final_state = solver.y.copy()
        final_boundary = self.model.boundary_state(solver.t)
        return SimulationOutput(
            results=results,
            final_time=float(solver.t),
            final_state=final_state,
            final_profiles=self.model.profiles(final_state, final_boundary),
            status=self.status,
            termination=termination,
            num_steps=num_steps,
            num_degenerate_samples=self._num_degenerate_samples,
        )

    def _record(self, results: SimulationResults, time: float, y: np.ndarray) -> SystemSnapshot:
        """出力時刻の導出量を計算して記録"""
        snapshot = self.model.evaluate(float(time), y, self._last_valid_composition)
        flows = snapshot.flows
        if flows.is_degenerate:
            self._num_degenerate_samples += 1
            if self._num_degenerate_samples == 1:
                message = (
                    f"t = {time:.6g} s で残留側合計流量がほぼ0です "
                    f"(retentate_flow = {flows.retentate_flow:.3g} mol/s)。直前の有効な組成を出力します"
                )
                self.logger.warning(message)
                warnings.warn(message, SingularityWarning)
        else:
            self._last_valid_composition = (
                flows.o2_retentate_mole_fraction,
                flows.n2_retentate_mole_fraction,
            )
        results.add_result(snapshot)
        return snapshot
