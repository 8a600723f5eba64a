"""有界量ヘルパー

物理的な飽和限界（非負制約、物質収支上の上限など）を
min/max の合成で表現するためのクラスを提供します。

min/max による制限は連続ですが、上下限の位置で微分不可能です。
剛性ソルバーを使う場合、飽和付近で精度が落ちることがあります。

使用例:
    from common.bounded import BoundedRange

    limit = BoundedRange(lower=0.0, upper=0.99 * supply)
    clamped_flow = limit.clamp(raw_flow)
    if limit.is_saturated(raw_flow):
        ...
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class BoundedRange:
    """
    閉区間 [lower, upper]

    Attributes:
        lower: 下限
        upper: 上限（lower 以上）
    """

    lower: float
    upper: float

    def __post_init__(self):
        if self.upper < self.lower:
            raise ValueError(f"上限が下限より小さい区間です: [{self.lower}, {self.upper}]")

    def clamp(self, value: float) -> float:
        """値を区間内に制限する（max(lower, min(value, upper))）"""
        return max(self.lower, min(value, self.upper))

    def is_saturated(self, value: float) -> bool:
        """値が上限以上（上限で頭打ち）か"""
        return value >= self.upper
