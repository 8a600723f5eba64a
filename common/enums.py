"""共通Enum定義

循環インポートを避けるため、複数モジュールで共有するEnumをここに定義します。
"""

from enum import Enum


class Species(Enum):
    """
    膜を透過する成分

    設定ファイルのキー接頭辞（o2_diffusivity など）をvalueとして持ちます。
    """
    O2 = "o2"
    N2 = "n2"


class InitialProfile(Enum):
    """膜内濃度分布の初期条件"""
    ZERO = "zero"       # 内部節点を全て0とする
    LINEAR = "linear"   # 初期境界値間の直線分布


class SimulationStatus(Enum):
    """
    シミュレーションの状態

    INITIALIZING → RUNNING → FINISHED の順に遷移します。
    外部から停止要求があった場合のみ STOPPED で終了します。
    積分の失敗・発散で中断した場合は FAILED になります。
    """
    INITIALIZING = "initializing"
    RUNNING = "running"
    FINISHED = "finished"
    STOPPED = "stopped"
    FAILED = "failed"
