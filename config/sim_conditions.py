from copy import deepcopy
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

import yaml

from common.constants import (
    MINIMUM_NODE_COUNT,
    MOLE_FRACTION_SUM_TOLERANCE,
    STANDARD_PRESSURE,
)
from common.enums import InitialProfile, Species
from common.exceptions import ConfigurationError
from common.paths import get_sim_conditions_path
import logger as log

logger = log.logger.getChild(__name__)


# 利用可能な積分法（scipy.integrate の OdeSolver 名）
SUPPORTED_SOLVER_METHODS = ("RK45", "RK23", "DOP853", "Radau", "BDF", "LSODA")


# 既定条件（sim_conds.yml で省略された項目に使用）
DEFAULT_CONDITIONS: Dict[str, Dict[str, Any]] = {
    "common": {
        "num_nodes": 10,
        "end_time": 30.0,
        "output_interval": 0.1,
        "initial_profile": InitialProfile.ZERO.value,
        "initial_tank_moles": 0.0,
    },
    "feed_gas": {
        "molar_flow_rate": 1e-3,
        "o2_mole_fraction": 0.21,
        "n2_mole_fraction": 0.79,
    },
    "permeate": {
        "pressure": 1e4,
        "o2_mole_fraction": 0.4,
        "n2_mole_fraction": 0.6,
    },
    "membrane": {
        "area": 1.0,
        "thickness": 1e-5,
        "o2_diffusivity": 5e-11,
        "n2_diffusivity": 2e-11,
        "o2_solubility": 1e-3,
        "n2_solubility": 5e-4,
    },
    "tank": {
        "volume": 1e-4,
        "temperature": 298.15,
    },
    "valve": {
        "coefficient": 1e-8,
        "atmospheric_pressure": STANDARD_PRESSURE,
    },
    "feed_pressure_step": {
        "start_time": 5.0,
        "offset": 1e5,
        "height": 5e4,
    },
    "solver": {
        "method": "RK45",
        "rtol": 1e-6,
        "atol": 1e-12,
        "max_step": 0.05,
    },
}


# sim_conds.yml記載の各条件
@dataclass
class CommonConditions:
    """共通条件"""

    num_nodes: int  # - 膜厚方向の節点数（境界2点を含む）
    end_time: float  # s
    output_interval: float  # s
    initial_profile: str = InitialProfile.ZERO.value  # zero / linear
    initial_tank_moles: float = 0.0  # mol

    def __post_init__(self):
        self.num_nodes = int(self.num_nodes)
        self.end_time = float(self.end_time)
        self.output_interval = float(self.output_interval)
        self.initial_profile = str(self.initial_profile)
        self.initial_tank_moles = float(self.initial_tank_moles)

    @property
    def initial_profile_mode(self) -> InitialProfile:
        """初期濃度分布のEnum表現"""
        return InitialProfile(self.initial_profile)


@dataclass
class FeedGasConditions:
    """供給ガス条件"""

    molar_flow_rate: float  # mol/s
    o2_mole_fraction: float  # -
    n2_mole_fraction: float  # -

    def __post_init__(self):
        for f in fields(self):
            setattr(self, f.name, float(getattr(self, f.name)))

    def mole_fraction(self, species: Species) -> float:
        return getattr(self, f"{species.value}_mole_fraction")

    def component_flow(self, species: Species) -> float:
        """成分供給流量 [mol/s]"""
        return self.molar_flow_rate * self.mole_fraction(species)


@dataclass
class PermeateConditions:
    """透過側条件（運転中一定）"""

    pressure: float  # Pa
    o2_mole_fraction: float  # -
    n2_mole_fraction: float  # -

    def __post_init__(self):
        for f in fields(self):
            setattr(self, f.name, float(getattr(self, f.name)))

    def mole_fraction(self, species: Species) -> float:
        return getattr(self, f"{species.value}_mole_fraction")


@dataclass
class MembraneConditions:
    """膜条件"""

    area: float  # m^2
    thickness: float  # m
    o2_diffusivity: float  # m^2/s
    n2_diffusivity: float  # m^2/s
    o2_solubility: float  # mol/(m^3·Pa)
    n2_solubility: float  # mol/(m^3·Pa)

    def __post_init__(self):
        for f in fields(self):
            setattr(self, f.name, float(getattr(self, f.name)))

    def diffusivity(self, species: Species) -> float:
        return getattr(self, f"{species.value}_diffusivity")

    def solubility(self, species: Species) -> float:
        return getattr(self, f"{species.value}_solubility")


@dataclass
class TankConditions:
    """バッファタンク条件"""

    volume: float  # m^3
    temperature: float  # K

    def __post_init__(self):
        for f in fields(self):
            setattr(self, f.name, float(getattr(self, f.name)))


@dataclass
class ValveConditions:
    """放圧弁条件"""

    coefficient: float  # mol/(s·Pa)
    atmospheric_pressure: float  # Pa

    def __post_init__(self):
        for f in fields(self):
            setattr(self, f.name, float(getattr(self, f.name)))


@dataclass
class FeedPressureStepConditions:
    """供給圧力ステップ入力条件"""

    start_time: float  # s
    offset: float  # Pa ステップ前の供給圧力
    height: float  # Pa ステップ高さ

    def __post_init__(self):
        for f in fields(self):
            setattr(self, f.name, float(getattr(self, f.name)))


@dataclass
class SolverConditions:
    """時間積分条件"""

    method: str = "RK45"  # scipy.integrate の OdeSolver 名
    rtol: float = 1e-6  # -
    atol: float = 1e-12  # 状態量の単位（mol/m^3, mol）
    max_step: float = 0.05  # s

    def __post_init__(self):
        self.method = str(self.method)
        self.rtol = float(self.rtol)
        self.atol = float(self.atol)
        self.max_step = float(self.max_step)


# セクション名とデータクラスの対応
SECTION_DATACLASSES = {
    "common": CommonConditions,
    "feed_gas": FeedGasConditions,
    "permeate": PermeateConditions,
    "membrane": MembraneConditions,
    "tank": TankConditions,
    "valve": ValveConditions,
    "feed_pressure_step": FeedPressureStepConditions,
    "solver": SolverConditions,
}


@dataclass
class SimulationConditions:
    """シミュレーション条件全体を管理するクラス

    全ての値はSI単位系（Pa, s, mol, m, K）で保持します。
    生成時に値の検証を行い、不正な場合は ConfigurationError を送出します。
    """

    common: CommonConditions
    feed_gas: FeedGasConditions
    permeate: PermeateConditions
    membrane: MembraneConditions
    tank: TankConditions
    valve: ValveConditions
    feed_pressure_step: FeedPressureStepConditions
    solver: SolverConditions
    cond_id: str = "custom"

    def __post_init__(self):
        self._validate()

    # ============================================================
    # 生成
    # ============================================================

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]] = None, cond_id: str = "custom") -> "SimulationConditions":
        """
        辞書から条件を生成

        省略されたセクション・項目は DEFAULT_CONDITIONS の値で補完します。

        Args:
            data: セクション名をキーとする条件辞書
            cond_id: 条件ID

        Returns:
            SimulationConditions: シミュレーション条件

        Raises:
            ConfigurationError: 未知のセクション・項目、または値が不正な場合
        """
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"条件はセクション名をキーとする辞書である必要があります: {type(data).__name__}")

        extra_sections = set(data) - set(SECTION_DATACLASSES)
        if extra_sections:
            error_msg = f"予期しないセクションがあります: {sorted(extra_sections)}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg)

        sections = {}
        for section_name, dataclass_type in SECTION_DATACLASSES.items():
            params = deepcopy(DEFAULT_CONDITIONS[section_name])
            overrides = data.get(section_name) or {}
            _validate_section_keys(dataclass_type, section_name, overrides)
            params.update(overrides)
            try:
                sections[section_name] = dataclass_type(**params)
            except (TypeError, ValueError) as e:
                error_msg = f"セクション'{section_name}'の値が不正です: {e}"
                logger.error(error_msg)
                raise ConfigurationError(error_msg) from e

        return cls(cond_id=cond_id, **sections)

    @classmethod
    def from_yaml(cls, filepath: str, cond_id: str = "custom") -> "SimulationConditions":
        """
        YAMLファイルから条件を読み込む

        Args:
            filepath: 条件ファイルのパス
            cond_id: 条件ID

        Returns:
            SimulationConditions: シミュレーション条件
        """
        logger.info(f"条件ファイル({filepath})読み込み開始")
        try:
            with open(filepath, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError as e:
            error_msg = f"条件ファイルが見つかりません: {filepath}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg) from e
        except yaml.YAMLError as e:
            error_msg = f"条件ファイル({filepath})の解析時にエラーが発生: {e}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg) from e

        conditions = cls.from_dict(data, cond_id=cond_id)
        logger.info(f"条件ファイル({filepath})の読み込み完了")
        return conditions

    @classmethod
    def from_cond_id(cls, cond_id: str) -> "SimulationConditions":
        """条件IDに対応する conditions/{cond_id}/sim_conds.yml を読み込む"""
        return cls.from_yaml(get_sim_conditions_path(cond_id), cond_id=cond_id)

    # ============================================================
    # 派生量
    # ============================================================

    @property
    def num_nodes(self) -> int:
        return self.common.num_nodes

    @property
    def node_spacing(self) -> float:
        """節点間隔 dx = 膜厚 / (N - 1) [m]"""
        return self.membrane.thickness / (self.common.num_nodes - 1)

    # ============================================================
    # バリデーション
    # ============================================================

    def _validate(self) -> None:
        """値の範囲チェック（積分開始前に全て検出する）"""
        common = self.common
        if common.num_nodes < MINIMUM_NODE_COUNT:
            self._fail(f"num_nodes: {common.num_nodes} ({MINIMUM_NODE_COUNT}以上である必要があります)")
        _require_positive("common.end_time", common.end_time, self._fail)
        _require_positive("common.output_interval", common.output_interval, self._fail)
        _require_non_negative("common.initial_tank_moles", common.initial_tank_moles, self._fail)
        try:
            common.initial_profile_mode
        except ValueError:
            allowed = [mode.value for mode in InitialProfile]
            self._fail(f"common.initial_profile: {common.initial_profile} ({allowed} のいずれかである必要があります)")

        _require_non_negative("feed_gas.molar_flow_rate", self.feed_gas.molar_flow_rate, self._fail)
        _validate_mole_fractions("feed_gas", self.feed_gas, self._fail)

        _require_non_negative("permeate.pressure", self.permeate.pressure, self._fail)
        _validate_mole_fractions("permeate", self.permeate, self._fail)

        membrane = self.membrane
        _require_positive("membrane.area", membrane.area, self._fail)
        _require_positive("membrane.thickness", membrane.thickness, self._fail)
        for species in Species:
            _require_positive(f"membrane.{species.value}_diffusivity", membrane.diffusivity(species), self._fail)
            _require_positive(f"membrane.{species.value}_solubility", membrane.solubility(species), self._fail)

        _require_positive("tank.volume", self.tank.volume, self._fail)
        _require_positive("tank.temperature", self.tank.temperature, self._fail)

        _require_non_negative("valve.coefficient", self.valve.coefficient, self._fail)
        _require_non_negative("valve.atmospheric_pressure", self.valve.atmospheric_pressure, self._fail)

        step = self.feed_pressure_step
        _require_non_negative("feed_pressure_step.start_time", step.start_time, self._fail)
        _require_non_negative("feed_pressure_step.offset", step.offset, self._fail)
        if step.offset + step.height < 0:
            self._fail(
                f"feed_pressure_step: offset + height = {step.offset + step.height} (ステップ後の供給圧力が負になります)"
            )

        solver = self.solver
        if solver.method not in SUPPORTED_SOLVER_METHODS:
            self._fail(f"solver.method: {solver.method} ({list(SUPPORTED_SOLVER_METHODS)} のいずれかである必要があります)")
        _require_positive("solver.rtol", solver.rtol, self._fail)
        _require_positive("solver.atol", solver.atol, self._fail)
        _require_positive("solver.max_step", solver.max_step, self._fail)

        logger.debug(f"条件({self.cond_id})のバリデーションが成功しました")

    def _fail(self, detail: str) -> None:
        error_msg = f"条件({self.cond_id})が不正です: {detail}"
        logger.error(error_msg)
        raise ConfigurationError(error_msg)


def _validate_section_keys(dataclass_type, section_name: str, params: Dict[str, Any]) -> None:
    """セクション内の指定外の変数をチェック"""
    if not isinstance(params, dict):
        error_msg = f"セクション'{section_name}'は辞書である必要があります: {params!r}"
        logger.error(error_msg)
        raise ConfigurationError(error_msg)

    expected_fields = {f.name for f in fields(dataclass_type)}
    extra_fields = set(params) - expected_fields
    if extra_fields:
        error_msg = f"セクション'{section_name}'に予期しない変数（指定外の変数）があります: {sorted(extra_fields)}"
        logger.error(error_msg)
        raise ConfigurationError(error_msg)


def _require_positive(name: str, value: float, fail) -> None:
    if not value > 0:
        fail(f"{name}: {value} (正の値である必要があります)")


def _require_non_negative(name: str, value: float, fail) -> None:
    if not value >= 0:
        fail(f"{name}: {value} (0以上である必要があります)")


def _validate_mole_fractions(section_name: str, section, fail) -> None:
    """モル分率が0〜1の範囲にあり、合計が1であることをチェック"""
    total = 0.0
    for species in Species:
        value = section.mole_fraction(species)
        if not (0 <= value <= 1):
            fail(f"{section_name}.{species.value}_mole_fraction: {value} (分率は0〜1の範囲である必要があります)")
        total += value
    if abs(total - 1.0) > MOLE_FRACTION_SUM_TOLERANCE:
        fail(f"{section_name}: モル分率の合計が1ではありません ({total})")
