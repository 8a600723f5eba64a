"""共通ユーティリティ

シミュレーション全体で使用する定数、パス設定、例外、有界量ヘルパーなどを提供します。

主要なエクスポート:
- 物理定数: GAS_CONSTANT, STANDARD_PRESSURE など
- パス設定: CONDITIONS_DIR, get_sim_conditions_path など
- 例外: ConfigurationError, NumericalInstabilityError, SingularityWarning
- 有界量: BoundedRange
"""

from .constants import (
    # 物理定数
    GAS_CONSTANT,
    STANDARD_PRESSURE,

    # 膜透過の物理制約
    PERMEATE_FLOW_CEILING_RATIO,

    # 計算用下限値
    MINIMUM_RETENTATE_FLOW_RATIO,
    MINIMUM_NODE_COUNT,
    NEGATIVE_CONCENTRATION_TOLERANCE,
    MOLE_FRACTION_SUM_TOLERANCE,
)

from .paths import (
    SETTINGS_FILENAME,
    CONDITIONS_DIR,
    SIM_CONDITIONS_FILENAME,
    LOG_DIR,
    get_condition_dir,
    get_sim_conditions_path,
)

from .enums import Species, InitialProfile, SimulationStatus

from .exceptions import (
    ConfigurationError,
    NumericalInstabilityError,
    SingularityWarning,
)

from .bounded import BoundedRange

__all__ = [
    # 物理定数
    "GAS_CONSTANT",
    "STANDARD_PRESSURE",

    # 膜透過の物理制約
    "PERMEATE_FLOW_CEILING_RATIO",

    # 計算用下限値
    "MINIMUM_RETENTATE_FLOW_RATIO",
    "MINIMUM_NODE_COUNT",
    "NEGATIVE_CONCENTRATION_TOLERANCE",
    "MOLE_FRACTION_SUM_TOLERANCE",

    # パス設定
    "SETTINGS_FILENAME",
    "CONDITIONS_DIR",
    "SIM_CONDITIONS_FILENAME",
    "LOG_DIR",
    "get_condition_dir",
    "get_sim_conditions_path",

    # Enum
    "Species",
    "InitialProfile",
    "SimulationStatus",

    # 例外
    "ConfigurationError",
    "NumericalInstabilityError",
    "SingularityWarning",

    # 有界量
    "BoundedRange",
]
