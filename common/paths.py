"""パス設定

入力ファイルのパスを定義しています。
環境に応じて変更が必要な場合はこのファイルを修正してください。

ディレクトリ構成:
    settings.yml              # 実行条件（対象の条件IDリスト）
    conditions/{cond_id}/     # 条件ファイル
        sim_conds.yml         # シミュレーション条件

    output/logs/              # ログファイル
"""

import os

# ============================================================
# 入力ディレクトリ・ファイル
# ============================================================

# 実行条件ファイル
SETTINGS_FILENAME = "settings.yml"

# 条件ファイルのディレクトリ
# 各条件ID (cond_id) ごとにサブディレクトリが作成される
CONDITIONS_DIR = "conditions/"

# シミュレーション条件ファイル名
SIM_CONDITIONS_FILENAME = "sim_conds.yml"


# ============================================================
# 出力ディレクトリ
# ============================================================

# ログファイルの出力先
LOG_DIR = "output/logs/"


# ============================================================
# パス生成ヘルパー関数
# ============================================================

def get_condition_dir(cond_id: str) -> str:
    """
    条件IDに対応するディレクトリパスを取得

    Args:
        cond_id: 条件ID（例: "default"）

    Returns:
        条件ディレクトリのパス
    """
    return os.path.join(CONDITIONS_DIR, cond_id)


def get_sim_conditions_path(cond_id: str) -> str:
    """
    シミュレーション条件ファイルのパスを取得

    Args:
        cond_id: 条件ID

    Returns:
        sim_conds.yml のパス
    """
    return os.path.join(get_condition_dir(cond_id), SIM_CONDITIONS_FILENAME)
