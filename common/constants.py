"""物理定数

シミュレーションで使用する物理定数と計算用の閾値を定義しています。
単位は全てSI単位系です（圧力 [Pa]、時間 [s]、物質量 [mol]）。

使用例:
    from common.constants import GAS_CONSTANT

    # 理想気体の状態方程式: PV = nRT
    pressure = moles * GAS_CONSTANT * temperature / volume
"""

# ============================================================
# 基本物理定数
# ============================================================

# 気体定数 [J/(mol·K)]
GAS_CONSTANT = 8.314

# 標準大気圧 [Pa]
STANDARD_PRESSURE = 101325.0


# ============================================================
# 膜透過の物理制約
# ============================================================

# 透過流量の上限（供給量に対する比率）[-]
# 残留側に最低1%を残す
PERMEATE_FLOW_CEILING_RATIO = 0.99


# ============================================================
# 計算用の下限値（ゼロ除算防止など）
# ============================================================

# 残留側合計流量の下限（供給流量に対する比率）[-]
# これ以下の場合は組成を計算せず直前の有効値を使用
MINIMUM_RETENTATE_FLOW_RATIO = 1e-12

# 膜内最小節点数 [-]（境界2点 + 内部1点）
MINIMUM_NODE_COUNT = 3

# 負濃度の許容幅（境界濃度スケールに対する比率）[-]
NEGATIVE_CONCENTRATION_TOLERANCE = 1e-6

# モル分率の合計の許容誤差 [-]
MOLE_FRACTION_SUM_TOLERANCE = 1e-6
