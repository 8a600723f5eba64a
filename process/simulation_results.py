"""シミュレーション結果を管理するデータクラス"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pandas as pd

from state import SystemSnapshot


@dataclass
class TimeSeriesData:
    """時系列データを格納するクラス"""

    timestamps: List[float] = field(default_factory=list)
    snapshots: List[SystemSnapshot] = field(default_factory=list)

    def append_record(self, snapshot: SystemSnapshot):
        """1つの計算結果を時系列データに追加"""
        self.timestamps.append(snapshot.time)
        self.snapshots.append(snapshot)


@dataclass
class SimulationResults:
    """全体のシミュレーション結果を管理するクラス

    出力量（時刻ごと）:
        残留O2/N2モル分率、残留合計流量、O2/N2透過流量、タンク圧力、タンク物質量
        ほか供給圧力、制限前の透過流量、弁流出量、飽和フラグなど
    """

    time_series_data: TimeSeriesData = field(default_factory=TimeSeriesData)

    def add_result(self, snapshot: SystemSnapshot):
        """計算結果を追加"""
        self.time_series_data.append_record(snapshot)

    def __len__(self) -> int:
        return len(self.time_series_data.timestamps)

    @property
    def timestamps(self) -> List[float]:
        return self.time_series_data.timestamps

    @property
    def snapshots(self) -> List[SystemSnapshot]:
        return self.time_series_data.snapshots

    @property
    def final_snapshot(self) -> Optional[SystemSnapshot]:
        """最終時刻の結果（記録がなければNone）"""
        if not self.snapshots:
            return None
        return self.snapshots[-1]

    def records(self) -> List[Dict[str, Any]]:
        return [snapshot.to_dict() for snapshot in self.snapshots]

    def to_dataframe(self) -> pd.DataFrame:
        """
        時系列をDataFrameに変換

        Returns:
            pd.DataFrame: 時刻 [s] をインデックスに持つ時系列
        """
        df = pd.DataFrame.from_records(self.records())
        if df.empty:
            return df
        return df.set_index("time")
