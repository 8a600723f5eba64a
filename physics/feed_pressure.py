"""供給圧力の時間変化

開始時刻で一段だけ変化するステップ入力です。

    P_feed(t) = offset            (t < start_time)
    P_feed(t) = offset + height   (t >= start_time)
"""

from config.sim_conditions import FeedPressureStepConditions


def calculate_step_pressure(time: float, start_time: float, offset: float, height: float) -> float:
    """ステップ入力の値 [Pa]"""
    if time >= start_time:
        return offset + height
    return offset


class FeedPressureStep:
    """供給圧力源（時刻 [s] → 供給全圧 [Pa] の呼び出し可能オブジェクト）"""

    def __init__(self, step_conds: FeedPressureStepConditions):
        self.start_time = step_conds.start_time
        self.offset = step_conds.offset
        self.height = step_conds.height

    def __call__(self, time: float) -> float:
        return calculate_step_pressure(time, self.start_time, self.offset, self.height)

    def __repr__(self) -> str:
        return f"FeedPressureStep(start_time={self.start_time}, offset={self.offset}, height={self.height})"
