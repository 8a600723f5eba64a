"""例外・警告の定義

シミュレーション全体で使用する例外クラスです。
いずれも自動リトライは行いません（モデルは決定論的なため、
条件を変えずに再実行しても結果は変わりません）。
"""


class ConfigurationError(Exception):
    """条件設定の不備（積分開始前に検出）"""


class NumericalInstabilityError(Exception):
    """積分中の発散（非有限値・負濃度・負の物質量）"""


class SingularityWarning(UserWarning):
    """残留側合計流量がほぼ0で組成が定義できない状態"""
