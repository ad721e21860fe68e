"""YAML設定の読み込み。"""

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from backend.interfaces.errors import ConfigError

CONFIG_ENV_VAR = "COST_TREE_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.yaml"


@dataclass(frozen=True)
class LedgerSettings:
    """config.yaml から読み込むアプリケーション設定。"""

    # 台帳
    level_keys: tuple[str, ...]
    amount_key: str
    root_name: str

    # 分類オプション
    option_max_depth: int
    path_separator: str
    root_option_label: str

    # パス
    database_file: str

    @classmethod
    def load(cls, config_path: Path | None = None) -> "LedgerSettings":
        """YAMLファイルから設定を読み込む.

        パス省略時は環境変数 COST_TREE_CONFIG、なければリポジトリ直下の
        config.yaml を使う。

        Raises:
            FileNotFoundError: 設定ファイルが存在しない場合
            ConfigError: 階層キーが空、または最大深さが1未満の場合
        """
        if config_path is None:
            env_path = os.getenv(CONFIG_ENV_VAR)
            config_path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH

        if not config_path.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {config_path}"
            )

        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}

        ledger = config.get("ledger", {})
        categories = config.get("categories", {})
        paths = config.get("paths", {})

        level_keys = tuple(str(k) for k in ledger.get("level_keys") or ())
        if not level_keys:
            raise ConfigError("ledger.level_keys must not be empty")

        max_depth = int(categories.get("max_depth", 3))
        if max_depth < 1:
            raise ConfigError("categories.max_depth must be at least 1")

        return cls(
            level_keys=level_keys,
            amount_key=str(ledger.get("amount_key", "成本")),
            root_name=str(ledger.get("root_name", "Total")),
            option_max_depth=max_depth,
            path_separator=str(categories.get("path_separator", " > ")),
            root_option_label=str(
                categories.get("root_option_label", "全部（根节点）")
            ),
            database_file=str(paths.get("database_file", "data/ledger.db")),
        )
