"""終了条件判定

積分ループの各ステップ間で、ループを継続するか判定するモジュールです。

終了条件の種類:
- 時間到達: シミュレーション終了時刻に到達
- 停止要求: 外部から停止が要求された（ステップ間でのみ受け付ける）

計算モデル自体に途中終了の経路はなく、停止要求はループ側でのみ扱います。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TerminationConditionType(Enum):
    """終了条件の種類"""
    TIME_REACHED = "時間到達"
    STOP_REQUESTED = "停止要求"


@dataclass
class TerminationCondition:
    """
    終了条件のデータクラス

    Attributes:
        end_time: シミュレーション終了時刻 [s]
    """
    end_time: float


def determine_termination(
    condition: TerminationCondition,
    current_time: float,
    stop_requested: bool,
) -> Optional[TerminationConditionType]:
    """
    終了理由を判定

    Args:
        condition: 終了条件
        current_time: 現在時刻 [s]
        stop_requested: 外部停止要求の有無

    Returns:
        終了理由（継続する場合はNone）
    """
    if current_time >= condition.end_time:
        return TerminationConditionType.TIME_REACHED
    if stop_requested:
        return TerminationConditionType.STOP_REQUESTED
    return None


def should_continue(
    condition: TerminationCondition,
    current_time: float,
    stop_requested: bool,
) -> bool:
    """
    ループを継続すべきか判定

    Returns:
        bool: True=継続、False=終了

    使用例:
        while should_continue(condition, solver.t, runner.stop_requested):
            solver.step()
    """
    return determine_termination(condition, current_time, stop_requested) is None
