"""シミュレーション条件の設定モジュール

YAMLファイル（conditions/{cond_id}/sim_conds.yml）から膜・タンク・弁の条件を読み込み、
シミュレーションで使用するデータクラスに変換します。

主なクラス:
    SimulationConditions: 全条件を管理（生成時に値を検証）
    MembraneConditions: 膜の形状・輸送物性
    TankConditions / ValveConditions: 下流のバッファタンクと放圧弁
"""
