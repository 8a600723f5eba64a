"""膜内拡散場

膜厚方向の1次元拡散方程式（Fickの第2法則）を線の方法で離散化します。

    dC_j/dt = D × (C[j+1] - 2·C[j] + C[j-1]) / dx^2,   j = 1..N-2
    dx = 膜厚 / (N - 1)

境界節点（0: 供給側、N-1: 透過側）はDirichlet条件として
評価のたびに平衡濃度で上書きし、積分しません。
成分間の相互作用はなく、成分ごとに独立に評価します。
時間発展は process/ 側の積分器が担当します。
"""

import numpy as np

from common.constants import MINIMUM_NODE_COUNT
from common.enums import InitialProfile


def calculate_interior_derivatives(profile: np.ndarray, diffusivity: float, dx: float) -> np.ndarray:
    """
    内部節点の濃度時間微分（2次中心差分）

    Args:
        profile: 境界値を含む全節点の濃度分布 [mol/m^3]（長さ N）
        diffusivity: 拡散係数 [m^2/s]
        dx: 節点間隔 [m]

    Returns:
        内部節点 1..N-2 の dC/dt [mol/(m^3·s)]（長さ N-2）
    """
    return diffusivity * (profile[2:] - 2.0 * profile[1:-1] + profile[:-2]) / dx**2


def calculate_linear_steady_profile(feed_concentration: float, permeate_concentration: float, num_nodes: int) -> np.ndarray:
    """
    定常解（両端Dirichlet条件下の直線分布）

    Returns:
        長さ N の濃度分布 [mol/m^3]
    """
    return np.linspace(feed_concentration, permeate_concentration, num_nodes)


def create_initial_interior(
    mode: InitialProfile,
    feed_concentration: float,
    permeate_concentration: float,
    num_nodes: int,
) -> np.ndarray:
    """
    内部節点の初期濃度を作成

    Args:
        mode: ZERO（全て0）/ LINEAR（初期境界値間の直線分布）
        feed_concentration: 初期時刻の供給側平衡濃度 [mol/m^3]
        permeate_concentration: 透過側平衡濃度 [mol/m^3]
        num_nodes: 節点数 N

    Returns:
        長さ N-2 の初期濃度
    """
    if num_nodes < MINIMUM_NODE_COUNT:
        raise ValueError(f"節点数は{MINIMUM_NODE_COUNT}以上である必要があります: {num_nodes}")
    if mode == InitialProfile.LINEAR:
        return calculate_linear_steady_profile(feed_concentration, permeate_concentration, num_nodes)[1:-1]
    return np.zeros(num_nodes - 2, dtype=np.float64)
