"""シミュレーション入出力モジュール

シミュレーションに必要なファイルの読み込み処理を提供します。

- 実行条件 (settings.yml) の読み込み
- 条件ファイル (conditions/{cond_id}/sim_conds.yml) の読み込み

使用例:
    from process.simulation_io import SimulationIO

    io = SimulationIO()
    settings = io.load_settings()
    sim_conds = io.load_conditions("default")
"""

from typing import Any, Dict

import yaml

from common.exceptions import ConfigurationError
from common.paths import SETTINGS_FILENAME
from config.sim_conditions import SimulationConditions
import logger as log


class SimulationIO:
    """シミュレーション入出力クラス"""

    def __init__(self):
        """初期化"""
        self.logger = log.logger.getChild(__name__)

    def load_settings(self, filepath: str = SETTINGS_FILENAME) -> Dict[str, Any]:
        """
        実行条件を読み込む

        Args:
            filepath: 実行条件ファイルのパス

        Returns:
            dict: 実行条件（cond_list を含む）
        """
        try:
            with open(filepath, encoding="utf-8") as f:
                settings = yaml.safe_load(f) or {}
        except FileNotFoundError as e:
            raise ConfigurationError(f"設定ファイル({filepath})の読み込み時にエラーが発生: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"設定ファイル({filepath})の解析時にエラーが発生: {e}") from e

        if not isinstance(settings.get("cond_list"), list):
            raise ConfigurationError(f"設定ファイル({filepath})に cond_list（条件IDのリスト）がありません")
        return settings

    def load_conditions(self, cond_id: str) -> SimulationConditions:
        """
        条件ファイルを読み込む

        Args:
            cond_id: 条件ID (例: "default")

        Returns:
            SimulationConditions: シミュレーション条件
        """
        return SimulationConditions.from_cond_id(cond_id)
