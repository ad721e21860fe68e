"""DI用ファクトリ関数。

backend/ 直下に配置することで、ingestion/ から store/ への
直接依存を避けつつ、FastAPI の Depends() で注入できる。
"""

from backend.aggregation.service import CostTreeService
from backend.aggregation.tree_builder import TreeBuilder
from backend.config import LedgerSettings
from backend.interfaces.ledger_store import LedgerStoreInterface

_settings: LedgerSettings | None = None
_ledger_store: LedgerStoreInterface | None = None
_cost_tree_service: CostTreeService | None = None


def get_settings() -> LedgerSettings:
    """設定のシングルトンインスタンスを返す。"""
    global _settings
    if _settings is None:
        _settings = LedgerSettings.load()
    return _settings


def get_ledger_store() -> LedgerStoreInterface:
    """LedgerStoreのシングルトンインスタンスを返す。"""
    global _ledger_store
    if _ledger_store is None:
        from backend.store.sqlite import SqliteLedgerStore

        _ledger_store = SqliteLedgerStore(get_settings().database_file)
    return _ledger_store


def get_cost_tree_service() -> CostTreeService:
    """CostTreeServiceのシングルトンインスタンスを返す。"""
    global _cost_tree_service
    if _cost_tree_service is None:
        settings = get_settings()
        builder = TreeBuilder(
            settings.level_keys,
            settings.amount_key,
            root_name=settings.root_name,
        )
        _cost_tree_service = CostTreeService(
            get_ledger_store(),
            builder,
            max_depth=settings.option_max_depth,
            separator=settings.path_separator,
            root_label=settings.root_option_label,
        )
    return _cost_tree_service


def _reset_all() -> None:
    """全シングルトンをリセットする（テスト用）。"""
    global _settings, _ledger_store, _cost_tree_service
    _settings = None
    _ledger_store = None
    _cost_tree_service = None
