"""透過流束・流量分配

膜内濃度分布から透過側界面の流束を求め、透過流量と残留流量・組成を計算します。

計算内容:
- 流束: J = -D × (C[N-1] - C[N-2]) / dx （1次後退差分、正: 透過側へ）
- 透過流量: J × 膜面積 を [0, 0.99 × 供給流量 × 供給モル分率] に制限
- 残留流量: 供給流量 × 供給モル分率 - 透過流量（成分ごと）
- 残留組成: 成分流量 / 残留合計流量

逆透過はモデル化していないため、透過流量は負になりません。
上限は残留側に最低1%を残し、下流でのゼロ除算を避けます。
"""

from typing import Dict, Optional, Tuple

import numpy as np

from common.bounded import BoundedRange
from common.constants import MINIMUM_RETENTATE_FLOW_RATIO, PERMEATE_FLOW_CEILING_RATIO
from common.enums import Species
from config.sim_conditions import FeedGasConditions, MembraneConditions
from state.results import FlowSplit, FluxSample


def calculate_permeate_flux(profile: np.ndarray, diffusivity: float, dx: float) -> float:
    """
    透過側界面の流束 [mol/(m^2·s)]

    Args:
        profile: 全節点の濃度分布 [mol/m^3]
        diffusivity: 拡散係数 [m^2/s]
        dx: 節点間隔 [m]
    """
    return -diffusivity * (profile[-1] - profile[-2]) / dx


def calculate_flux_sample(
    profiles: Dict[Species, np.ndarray],
    membrane: MembraneConditions,
    dx: float,
) -> FluxSample:
    """全成分の透過側流束"""
    return FluxSample(
        o2_flux=calculate_permeate_flux(profiles[Species.O2], membrane.diffusivity(Species.O2), dx),
        n2_flux=calculate_permeate_flux(profiles[Species.N2], membrane.diffusivity(Species.N2), dx),
    )


def permeate_flow_limit(feed_gas: FeedGasConditions, species: Species) -> BoundedRange:
    """透過流量の許容範囲 [0, 0.99 × 成分供給流量] [mol/s]"""
    return BoundedRange(lower=0.0, upper=PERMEATE_FLOW_CEILING_RATIO * feed_gas.component_flow(species))


def calculate_flow_split(
    flux: FluxSample,
    membrane_area: float,
    feed_gas: FeedGasConditions,
    fallback_composition: Optional[Tuple[float, float]] = None,
) -> FlowSplit:
    """
    透過・残留の流量分配を計算

    残留合計流量が 0、または 供給流量 × MINIMUM_RETENTATE_FLOW_RATIO 以下の場合は
    組成が定義できないため、
    fallback_composition（直前の有効な (O2, N2) 組成。未指定なら供給組成）を
    そのまま返し、is_degenerate を立てます。

    Args:
        flux: 透過側流束
        membrane_area: 膜面積 [m^2]
        feed_gas: 供給ガス条件
        fallback_composition: 組成が定義できない場合に使う (O2, N2) モル分率

    Returns:
        FlowSplit: 流量分配結果
    """
    values = {}
    for species in Species:
        raw_flow = flux.flux(species) * membrane_area
        limit = permeate_flow_limit(feed_gas, species)
        permeate_flow = limit.clamp(raw_flow)
        values[f"{species.value}_raw_permeate_flow"] = raw_flow
        values[f"{species.value}_permeate_flow"] = permeate_flow
        values[f"{species.value}_retentate_flow"] = feed_gas.component_flow(species) - permeate_flow
        values[f"{species.value}_saturated"] = limit.is_saturated(raw_flow)

    retentate_flow = values["o2_retentate_flow"] + values["n2_retentate_flow"]
    minimum_flow = MINIMUM_RETENTATE_FLOW_RATIO * feed_gas.molar_flow_rate

    if retentate_flow > 0 and retentate_flow > minimum_flow:
        y_o2 = values["o2_retentate_flow"] / retentate_flow
        y_n2 = values["n2_retentate_flow"] / retentate_flow
        is_degenerate = False
    else:
        if fallback_composition is None:
            fallback_composition = (
                feed_gas.mole_fraction(Species.O2),
                feed_gas.mole_fraction(Species.N2),
            )
        y_o2, y_n2 = fallback_composition
        is_degenerate = True

    return FlowSplit(
        retentate_flow=retentate_flow,
        o2_retentate_mole_fraction=y_o2,
        n2_retentate_mole_fraction=y_n2,
        is_degenerate=is_degenerate,
        **values,
    )


def calculate_stage_cut(flows: FlowSplit, feed_gas: FeedGasConditions) -> float:
    """ステージカット（透過流量 / 供給流量）[-]"""
    if feed_gas.molar_flow_rate <= 0:
        return 0.0
    return flows.permeate_total_flow / feed_gas.molar_flow_rate
