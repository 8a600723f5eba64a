"""シミュレーション動作確認テスト

結合モデルを時間積分し、物理的な性質とシナリオの結果を確認します。

- 供給圧力一定で窒素が濃縮される（O2の方が透過しやすい）
- 供給圧力のステップ後、透過流量が単調に増加して新しい定常値に近づく
- タンク圧力が弁流出と流入の釣り合う圧力に落ち着く
- 同じ条件なら同じ結果（決定論的）
"""

import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import numpy as np
import pytest

from common.constants import PERMEATE_FLOW_CEILING_RATIO
from common.enums import SimulationStatus, Species
from common.exceptions import NumericalInstabilityError, SingularityWarning
from config.sim_conditions import SimulationConditions
from physics.membrane import calculate_linear_steady_profile
from physics.valve import calculate_balance_pressure
from process import MembraneTankSimulator, SimulationRunner, SystemModel, TerminationConditionType
from process.termination_conditions import TerminationCondition, should_continue


CONSTANT_FEED = {
    "common": {"end_time": 20.0},
    "feed_pressure_step": {"start_time": 0.0, "offset": 1e5, "height": 0.0},
}


def run(overrides=None, **kwargs):
    conds = SimulationConditions.from_dict(overrides)
    runner = SimulationRunner(conds)
    return conds, runner.run(**kwargs)


def test_constant_feed_enriches_nitrogen():
    """供給圧力1e5 Pa一定、N=10: 残留側のN2モル分率が供給の0.79より高くなる"""
    conds, output = run(CONSTANT_FEED)
    assert output.success
    assert output.termination == TerminationConditionType.TIME_REACHED
    assert output.final_time == pytest.approx(20.0)

    final = output.results.final_snapshot
    assert final.flows.n2_retentate_mole_fraction > 0.79
    # 定常（直線分布）での値: O2 1.25e-4 mol/s、N2 7.17e-4 mol/s が残留
    assert final.flows.o2_permeate_flow == pytest.approx(8.5e-5, rel=1e-4)
    assert final.flows.n2_permeate_flow == pytest.approx(7.3e-5, rel=1e-4)
    assert final.flows.n2_retentate_mole_fraction == pytest.approx(7.17e-4 / 8.42e-4, rel=1e-4)


def test_profile_converges_to_linear_steady_state():
    """供給圧力一定では内部節点が境界値間の直線分布に収束する"""
    conds, output = run(CONSTANT_FEED)
    model = SystemModel(conds)
    boundary = model.boundary_state(output.final_time)

    for species in Species:
        expected = calculate_linear_steady_profile(
            boundary.feed_concentration(species),
            boundary.permeate_concentration(species),
            conds.num_nodes,
        )
        assert output.final_profiles[species] == pytest.approx(expected, rel=1e-4)

    # 内部節点の dC/dt はほぼ0
    initial_norm = model.interior_derivative_norm(0.0, model.initial_state())
    final_norm = model.interior_derivative_norm(output.final_time, output.final_state)
    assert final_norm < 1e-4 * initial_norm


def test_invariants_hold_at_every_sample():
    """全出力時刻で透過流量の上下限・物質収支・タンク圧力の非負性が成り立つ"""
    conds, output = run()
    feed_gas = conds.feed_gas
    assert len(output.results) == len(SimulationRunner(conds).sample_times())

    for snapshot in output.results.snapshots:
        flows = snapshot.flows
        for species in Species:
            supply = feed_gas.molar_flow_rate * feed_gas.mole_fraction(species)
            permeate = flows.permeate_flow(species)
            assert 0.0 <= permeate <= PERMEATE_FLOW_CEILING_RATIO * supply
            assert flows.retentate_flow_of(species) + permeate == pytest.approx(supply, rel=1e-14)
        assert snapshot.tank.moles >= 0.0
        assert snapshot.tank.pressure >= 0.0
        assert snapshot.valve_outflow >= 0.0
        assert not flows.is_degenerate


def test_step_increases_permeate_flows_monotonically():
    """供給圧力を5 sで1e5 → 1.5e5 Paにステップ: 透過流量は単調増加し新しい定常値に近づく

    厳密解は単調だが、RK45 の積分誤差で定常値の1e-9程度の揺らぎが出るため、
    定常値の1e-4までの減少は許容する。
    """
    conds, output = run()
    df = output.results.to_dataframe()

    after_step = df[df.index >= conds.feed_pressure_step.start_time]
    for column, steady in [("o2_permeate_flow", 1.375e-4), ("n2_permeate_flow", 1.125e-4)]:
        flows = after_step[column].to_numpy()
        assert np.all(np.diff(flows) >= -1e-4 * steady)
        assert flows[-1] > flows[0]
        assert flows[-1] == pytest.approx(steady, rel=1e-4)

    before_step = df[df.index < conds.feed_pressure_step.start_time]
    assert before_step["o2_permeate_flow"].iloc[-1] == pytest.approx(8.5e-5, rel=1e-3)
    assert (df["feed_pressure"][df.index >= 5.0] == 1.5e5).all()


def test_tank_pressure_reaches_valve_balance():
    """タンク圧力は流入量と弁流出量が釣り合う圧力に落ち着き、再現性がある"""
    overrides = {"common": {"end_time": 60.0, "output_interval": 0.5}}
    conds, output = run(overrides)
    df = output.results.to_dataframe()

    # 流入開始直後は圧力が上昇する
    early = df[df.index <= 4.0]["tank_pressure"].to_numpy()
    assert np.all(np.diff(early) > 0)

    final = output.results.final_snapshot
    inflow = final.flows.n2_retentate_flow
    assert inflow == pytest.approx(7.9e-4 - 1.125e-4, rel=1e-4)
    assert final.tank.pressure == pytest.approx(calculate_balance_pressure(inflow, conds.valve), rel=1e-5)
    assert final.valve_outflow == pytest.approx(inflow, rel=1e-3)

    _, repeated = run(overrides)
    assert repeated.results.final_snapshot.tank.pressure == final.tank.pressure


def test_runs_are_deterministic():
    """同じ条件・同じ積分法なら出力は完全に一致する"""
    _, first = run(CONSTANT_FEED)
    _, second = run(CONSTANT_FEED)
    df_first = first.results.to_dataframe()
    df_second = second.results.to_dataframe()
    assert df_first.shape == df_second.shape
    assert np.array_equal(df_first.to_numpy(dtype=float), df_second.to_numpy(dtype=float))
    assert np.array_equal(first.final_state, second.final_state)


def test_output_columns():
    _, output = run({"common": {"end_time": 1.0}})
    df = output.results.to_dataframe()
    for column in [
        "o2_retentate_mole_fraction",
        "n2_retentate_mole_fraction",
        "retentate_flow",
        "o2_permeate_flow",
        "n2_permeate_flow",
        "tank_pressure",
        "tank_moles",
        "feed_pressure",
        "valve_outflow",
        "stage_cut",
    ]:
        assert column in df.columns
    assert df.index[0] == 0.0
    assert df.index[-1] == pytest.approx(1.0)


def test_both_species_saturated_in_simulation():
    """膜面積が極端に大きいと両成分が上限で頭打ちになり、残留組成は供給組成に一致する"""
    overrides = dict(CONSTANT_FEED, membrane={"area": 1e3})
    _, output = run(overrides)
    final = output.results.final_snapshot.flows
    assert final.o2_saturated and final.n2_saturated
    assert not final.is_degenerate
    assert final.retentate_flow == pytest.approx(1e-5)
    assert final.o2_retentate_mole_fraction == pytest.approx(0.21)
    assert final.n2_retentate_mole_fraction == pytest.approx(0.79)


def test_zero_feed_flow_is_degenerate():
    """供給流量0では組成が定義できず、警告を出して供給組成を出力する"""
    overrides = dict(CONSTANT_FEED, feed_gas={"molar_flow_rate": 0.0}, common={"end_time": 1.0})
    with pytest.warns(SingularityWarning):
        _, output = run(overrides)

    assert output.num_degenerate_samples == len(output.results)
    df = output.results.to_dataframe()
    assert np.all(np.isfinite(df["o2_retentate_mole_fraction"]))
    assert (df["o2_retentate_mole_fraction"] == 0.21).all()
    assert (df["tank_moles"] == 0.0).all()


def test_external_stop_between_steps():
    """ステップ間の停止要求で中断し、STOPPED で終了する"""
    conds = SimulationConditions.from_dict()
    runner = SimulationRunner(conds)

    def stop_after_one_second(t, y):
        if t >= 1.0:
            runner.request_stop()

    output = runner.run(step_callback=stop_after_one_second)
    assert output.status == SimulationStatus.STOPPED
    assert not output.success
    assert output.termination == TerminationConditionType.STOP_REQUESTED
    assert 1.0 <= output.final_time < conds.common.end_time
    assert len(output.results) < len(runner.sample_times())


def test_should_continue():
    condition = TerminationCondition(end_time=10.0)
    assert should_continue(condition, 5.0, stop_requested=False)
    assert not should_continue(condition, 10.0, stop_requested=False)
    assert not should_continue(condition, 5.0, stop_requested=True)


def test_check_state_detects_instability():
    conds = SimulationConditions.from_dict()
    model = SystemModel(conds)
    y = model.initial_state()

    y_nan = y.copy()
    y_nan[0] = np.nan
    with pytest.raises(NumericalInstabilityError):
        model.check_state(0.0, y_nan)

    y_negative = y.copy()
    y_negative[model.layout.interior_slice(Species.N2)][0] = -1.0
    with pytest.raises(NumericalInstabilityError):
        model.check_state(0.0, y_negative)

    y_tank = y.copy()
    y_tank[model.layout.tank_index] = -1.0
    with pytest.raises(NumericalInstabilityError):
        model.check_state(0.0, y_tank)

    model.check_state(0.0, y)


@pytest.mark.parametrize("method", ["RK23", "LSODA", "BDF"])
def test_other_solver_methods(method):
    """積分法を変えても定常値は同じ"""
    overrides = dict(CONSTANT_FEED, solver={"method": method, "rtol": 1e-7, "atol": 1e-12, "max_step": 0.05})
    _, output = run(overrides)
    final = output.results.final_snapshot
    assert final.flows.n2_retentate_mole_fraction == pytest.approx(7.17e-4 / 8.42e-4, rel=1e-3)


def test_custom_feed_pressure_source():
    """任意の供給圧力源を与えられる"""
    conds = SimulationConditions.from_dict({"common": {"end_time": 2.0}})
    output = SimulationRunner(conds, feed_pressure_source=lambda t: 2e5).run()
    df = output.results.to_dataframe()
    assert (df["feed_pressure"] == 2e5).all()


def test_simulator_facade(monkeypatch):
    """条件IDから条件ファイルを読み込んで実行する"""
    monkeypatch.chdir(project_root)
    simulator = MembraneTankSimulator("constant_feed")
    assert simulator.sim_conds.cond_id == "constant_feed"
    output = simulator.execute_simulation()
    assert output.success
    assert output.results.final_snapshot.flows.n2_retentate_mole_fraction > 0.79


def test_runner_can_be_run_again():
    """同じランナーで再実行しても前回の状態（停止要求・縮退カウント・直前組成）を持ち越さない"""
    overrides = dict(CONSTANT_FEED, feed_gas={"molar_flow_rate": 0.0}, common={"end_time": 1.0})
    runner = SimulationRunner(SimulationConditions.from_dict(overrides))

    with pytest.warns(SingularityWarning):
        first = runner.run()
    with pytest.warns(SingularityWarning):
        second = runner.run()

    assert first.num_degenerate_samples == len(first.results)
    assert second.num_degenerate_samples == len(second.results)
    assert first.results.to_dataframe().equals(second.results.to_dataframe())


def test_runner_resumes_after_external_stop():
    """停止要求で中断した後の再実行は終了時刻まで進む"""
    conds = SimulationConditions.from_dict({"common": {"end_time": 2.0}})
    runner = SimulationRunner(conds)

    def stop_after_half_second(t, y):
        if t >= 0.5:
            runner.request_stop()

    stopped = runner.run(step_callback=stop_after_half_second)
    assert stopped.status == SimulationStatus.STOPPED

    resumed = runner.run()
    assert resumed.status == SimulationStatus.FINISHED
    assert resumed.final_time == pytest.approx(2.0)
    assert len(resumed.results) == len(runner.sample_times())

    fresh = SimulationRunner(conds).run()
    assert np.array_equal(resumed.final_state, fresh.final_state)


def test_small_feed_flow_composition_is_defined():
    """供給流量が小さくても正であれば残留組成は実際の値（縮退扱いしない）"""
    overrides = dict(CONSTANT_FEED, feed_gas={"molar_flow_rate": 1e-11}, common={"end_time": 5.0})
    _, output = run(overrides)

    assert output.num_degenerate_samples == 0
    final = output.results.final_snapshot.flows
    assert final.o2_saturated and final.n2_saturated
    assert not final.is_degenerate
    assert final.retentate_flow == pytest.approx(1e-13, rel=1e-9, abs=0.0)
    assert final.n2_retentate_mole_fraction == pytest.approx(0.79)
    assert final.o2_retentate_mole_fraction == pytest.approx(0.21)


def test_run_aborts_when_integration_fails():
    """供給圧力が非有限になると積分が失敗し、run() は NumericalInstabilityError で中断する"""
    conds = SimulationConditions.from_dict({"common": {"end_time": 5.0}})

    def broken_feed_pressure(t):
        return 1e5 if t <= 1.0 else float("nan")

    runner = SimulationRunner(conds, feed_pressure_source=broken_feed_pressure)
    with pytest.raises(NumericalInstabilityError):
        runner.run()
    assert runner.status == SimulationStatus.FAILED
