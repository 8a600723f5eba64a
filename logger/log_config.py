"""ログ設定

シミュレーション実行時のログ出力を設定します。
ログは標準出力とファイルの両方に出力されます（ファイル出力は無効化可能）。

ログファイルの出力先: output/logs/{prefix}_YYYYMMDD-HHMMSS.log

ログレベルは settings.yml の log_level セクションから文字列で指定できます:
    log_level:
      console: INFO
      file: DEBUG

使用例:
    import logger as log

    logger = log.logger.getChild(__name__)
    logger.info("シミュレーション開始")
    logger.warning("警告メッセージ")
"""

import logging
import os
import time
from logging.handlers import TimedRotatingFileHandler
from typing import Optional, Union

from common.paths import LOG_DIR


# ============================================================
# 設定値
# ============================================================

# プロジェクト識別子（ログの名前空間）
PROJECT_ID = "MEMBRANE_TANK"

# デフォルトのログレベル（積分ステップ毎の進捗はDEBUG）
DEFAULT_CONSOLE_LOG_LEVEL = logging.INFO
DEFAULT_FILE_LOG_LEVEL = logging.DEBUG

# ログファイル名の接頭辞
DEFAULT_LOG_PREFIX = "membrane_tank"

# ログ出力フォーマット
LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"

# ログファイルの保持日数
LOG_BACKUP_DAYS = 31


# ============================================================
# ログ設定関数
# ============================================================

def resolve_log_level(level: Union[int, str]) -> int:
    """
    ログレベルを数値に変換

    Args:
        level: logging のレベル値、または "DEBUG" / "info" などの名前

    Returns:
        logging のレベル値

    Raises:
        ValueError: 未知のレベル名
    """
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"未知のログレベルです: {level}")
    return value


def setup_logger(
    console_log_level: Union[int, str] = DEFAULT_CONSOLE_LOG_LEVEL,
    file_log_level: Union[int, str] = DEFAULT_FILE_LOG_LEVEL,
    log_dir: Optional[str] = LOG_DIR,
    log_prefix: str = DEFAULT_LOG_PREFIX,
) -> logging.Logger:
    """
    プロジェクトロガーを設定して返す

    再設定時は既存のハンドラを閉じてから付け替えます。

    Args:
        console_log_level: コンソール出力の最小ログレベル
        file_log_level: ファイル出力の最小ログレベル
        log_dir: ログファイルの出力先（None の場合はファイルに出力しない）
        log_prefix: ログファイル名の接頭辞

    Returns:
        設定済みのロガー
    """
    console_level = resolve_log_level(console_log_level)
    file_level = resolve_log_level(file_log_level)

    logger = logging.getLogger(PROJECT_ID)
    logger.propagate = False

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)
    logger.addHandler(_create_console_handler(console_level, formatter))

    if log_dir is None:
        logger.setLevel(console_level)
        return logger

    logger.addHandler(_create_file_handler(log_dir, log_prefix, file_level, formatter))
    logger.setLevel(min(console_level, file_level))
    return logger


def _create_console_handler(level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _create_file_handler(
    log_dir: str,
    log_prefix: str,
    level: int,
    formatter: logging.Formatter,
) -> logging.Handler:
    """実行毎に新しいファイルを作り、日付が変わったらローテーションする"""
    os.makedirs(log_dir, exist_ok=True)
    log_filename = f"{log_prefix}_{time.strftime('%Y%m%d-%H%M%S')}.log"

    handler = TimedRotatingFileHandler(
        filename=os.path.join(log_dir, log_filename),
        when="midnight",
        backupCount=LOG_BACKUP_DAYS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler
