"""Store層の抽象インターフェース。

Store層は最新データセット（台帳の行）の永続化を担う。
行の順序は子ノードの出現順を決めるため、必ず保持すること。
"""

from abc import ABC, abstractmethod

from backend.interfaces.cost_tree import RowRecord


class LedgerStoreInterface(ABC):
    """台帳ストアの抽象インターフェース。

    新しいデータセットは常に既存データを丸ごと置き換える。
    """

    @abstractmethod
    def replace_rows(self, rows: list[RowRecord]) -> int:
        """データセットを置き換える。

        Returns:
            保存された行数
        """
        ...

    @abstractmethod
    def get_rows(self) -> list[dict]:
        """保存済みの行を投入順で取得する。"""
        ...

    @abstractmethod
    def count_rows(self) -> int:
        """保存済みの行数を返す。"""
        ...

    @abstractmethod
    def delete_all_data(self) -> None:
        """全データを削除する（デバッグ用）。"""
        ...
