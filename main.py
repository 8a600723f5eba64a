import time

from process import MembraneTankSimulator, SimulationIO
import logger as log

logger = log.logger


def execute_simulation_mode(cond_list):
    """
    シミュレーションモードの実行

    Args:
        cond_list (list): 実行条件リスト
    """
    for cond_id in cond_list:
        logger.info(f"シミュレーション実施中... cond = {cond_id}")
        try:
            instance = MembraneTankSimulator(cond_id)
            output = instance.execute_simulation()
            logger.info(f"シミュレーション完了: cond = {cond_id}, status = {output.status.value}")
        except Exception as e:
            raise Exception(f"シミュレーション実行時にエラーが発生 (cond_id: {cond_id}): {str(e)}") from e


def configure_logging(log_levels):
    """
    settings.yml の log_level セクションでロガーを再設定

    Args:
        log_levels (dict): console / file のログレベル名（None の場合は既定のまま）
    """
    if not log_levels:
        return
    log.setup_logger(
        console_log_level=log_levels.get("console", log.log_config.DEFAULT_CONSOLE_LOG_LEVEL),
        file_log_level=log_levels.get("file", log.log_config.DEFAULT_FILE_LOG_LEVEL),
    )


def main():
    """
    メインルーチン
    """
    try:
        logger.info("処理開始")
        settings = SimulationIO().load_settings()
        configure_logging(settings.get("log_level"))
        start = time.time()
        execute_simulation_mode(settings["cond_list"])
        elapsed = time.time() - start
        elapsed_min = int(elapsed // 60)
        elapsed_s = elapsed % 60
        logger.info(f"実行時間: {elapsed_min} m {elapsed_s:.1f} s")
        logger.info("処理完了")

    except Exception as e:
        logger.exception(str(e))
        raise


if __name__ == "__main__":
    main()
