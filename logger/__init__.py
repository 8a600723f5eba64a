"""ログ設定モジュール

シミュレーションのログ出力設定を提供します。

主要なエクスポート:
- logger: 設定済みのロガーインスタンス
- setup_logger: ログの初期設定・再設定
- resolve_log_level: ログレベル名の変換
"""

from .log_config import setup_logger, resolve_log_level

# デフォルトロガーを初期化
logger = setup_logger()

__all__ = [
    "logger",
    "setup_logger",
    "resolve_log_level",
]
