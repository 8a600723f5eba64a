"""ログ設定のテスト"""

import logging
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

import logger as log
from logger.log_config import PROJECT_ID, resolve_log_level, setup_logger


@pytest.fixture
def restore_logger():
    yield
    setup_logger()


def test_resolve_log_level():
    assert resolve_log_level("debug") == logging.DEBUG
    assert resolve_log_level("WARNING") == logging.WARNING
    assert resolve_log_level(logging.ERROR) == logging.ERROR
    with pytest.raises(ValueError):
        resolve_log_level("VERBOSE")


def test_file_log_written_with_prefix(tmp_path, restore_logger):
    """ログファイルは接頭辞付きで作成され、子ロガーの出力が書き込まれる"""
    logger = setup_logger(console_log_level="WARNING", file_log_level="DEBUG", log_dir=str(tmp_path), log_prefix="run")
    assert logger is log.logger
    assert logger.level == logging.DEBUG

    log.logger.getChild("tests").debug("節点数 = 10")
    for handler in logger.handlers:
        handler.flush()

    log_files = list(tmp_path.glob("run_*.log"))
    assert len(log_files) == 1
    assert "節点数 = 10" in log_files[0].read_text(encoding="utf-8")


def test_reconfigure_replaces_handlers(restore_logger):
    """再設定してもハンドラは重複しない。log_dir=None ならコンソールのみ"""
    setup_logger(log_dir=None)
    logger = setup_logger(console_log_level="ERROR", log_dir=None)
    assert logger.name == PROJECT_ID
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], logging.StreamHandler)
    assert logger.level == logging.ERROR
