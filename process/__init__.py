"""プロセス制御モジュール

結合モデルを組み立て、時間積分を進行させる部分です。

使用例:
    # 簡単な使い方
    from process import MembraneTankSimulator

    simulator = MembraneTankSimulator("default")
    output = simulator.execute_simulation()

    # 責務分離した使い方
    from process import SimulationIO, SimulationRunner

    io = SimulationIO()
    sim_conds = io.load_conditions("default")
    runner = SimulationRunner(sim_conds)
    output = runner.run()
    df = output.results.to_dataframe()

モジュール構成:
- simulator.py: シミュレーター（ファサード）
- simulation_io.py: 入力（実行条件/条件ファイルの読み込み）
- system_model.py: 結合モデル（状態ベクトルの時間微分）
- simulation_runner.py: シミュレーション実行（時間積分）
- termination_conditions.py: 終了条件判定
- simulation_results.py: シミュレーション結果データクラス
"""

# シミュレーター（ファサード）
from .simulator import MembraneTankSimulator

# 入出力
from .simulation_io import SimulationIO

# 結合モデル
from .system_model import SystemModel

# シミュレーション実行
from .simulation_runner import SimulationRunner, SimulationOutput

# シミュレーション結果
from .simulation_results import SimulationResults, TimeSeriesData

# 終了条件
from .termination_conditions import (
    TerminationConditionType,
    TerminationCondition,
    determine_termination,
    should_continue,
)

__all__ = [
    # シミュレーター（ファサード）
    "MembraneTankSimulator",
    # 入出力
    "SimulationIO",
    # 結合モデル
    "SystemModel",
    # シミュレーション実行
    "SimulationRunner",
    "SimulationOutput",
    # シミュレーション結果
    "SimulationResults",
    "TimeSeriesData",
    # 終了条件
    "TerminationConditionType",
    "TerminationCondition",
    "determine_termination",
    "should_continue",
]
