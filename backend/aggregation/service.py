"""集計サービス: データセット保存・ツリー構築・分類索引のオーケストレーター."""

import math
from dataclasses import dataclass

from backend.aggregation.category_index import (
    MAX_OPTION_DEPTH,
    PATH_SEPARATOR,
    ROOT_OPTION_LABEL,
    build_category_options,
)
from backend.aggregation.tree_builder import TreeBuilder
from backend.interfaces.cost_tree import CategoryOption, CostNode, RowRecord
from backend.interfaces.errors import LedgerRejectedError, TreeNotBuiltError
from backend.interfaces.ledger_store import LedgerStoreInterface
from backend.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class LedgerSnapshot:
    """1データセット分の構築結果。

    options の先頭は全体オプション。再構築のたびに新しいスナップショットを
    作り、既存のものは変更しない。
    """

    root: CostNode
    options: tuple[CategoryOption, ...]
    row_count: int


class CostTreeService:
    """集計サービス.

    LedgerStore に行を保存し、TreeBuilder でツリーを構築して
    分類オプションと合わせたスナップショットを保持する。
    """

    def __init__(
        self,
        store: LedgerStoreInterface,
        builder: TreeBuilder,
        max_depth: int = MAX_OPTION_DEPTH,
        separator: str = PATH_SEPARATOR,
        root_label: str = ROOT_OPTION_LABEL,
    ) -> None:
        self._store = store
        self._builder = builder
        self._max_depth = max_depth
        self._separator = separator
        self._root_label = root_label
        self._snapshot: LedgerSnapshot | None = None

    def load(self, rows: list[RowRecord]) -> LedgerSnapshot:
        """データセットを置き換えてツリーを再構築する.

        保存前にツリーを構築し、合計が有限値でなければ拒否する。
        拒否した場合、既存のデータセットとスナップショットはそのまま残る。

        Raises:
            LedgerRejectedError: 合計が inf または NaN になる場合
        """
        root = self._builder.build(rows)
        if not math.isfinite(root.total_cost):
            logger.warning(
                f"Ledger rejected: total cost is {root.total_cost}"
            )
            raise LedgerRejectedError(
                f"Total cost is not finite: {root.total_cost}"
            )
        saved = self._store.replace_rows(rows)
        logger.info(f"Stored {saved} ledger rows")
        return self._index(root, saved)

    def reload(self) -> LedgerSnapshot:
        """ストアの行からツリーを再構築する.

        1. Store から全行を取得
        2. ツリーを構築（取り込み→集計）
        3. 分類オプションを索引化し、スナップショットを差し替える
        """
        rows = self._store.get_rows()
        return self._index(self._builder.build(rows), len(rows))

    def _index(self, root: CostNode, row_count: int) -> LedgerSnapshot:
        options = build_category_options(
            root,
            max_depth=self._max_depth,
            separator=self._separator,
            root_label=self._root_label,
        )
        self._snapshot = LedgerSnapshot(
            root=root, options=tuple(options), row_count=row_count
        )
        logger.info(f"Indexed {len(options) - 1} category options")
        return self._snapshot

    def snapshot(self) -> LedgerSnapshot:
        """現在のスナップショットを返す.

        未構築で、ストアに行があればその場で構築する。

        Raises:
            TreeNotBuiltError: データセットが投入されていない場合
        """
        if self._snapshot is None:
            if self._store.count_rows() == 0:
                raise TreeNotBuiltError("No ledger has been loaded")
            return self.reload()
        return self._snapshot

    def clear(self) -> None:
        """データセットとスナップショットを破棄する."""
        self._store.delete_all_data()
        self._snapshot = None
