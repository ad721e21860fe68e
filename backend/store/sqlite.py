"""Store層のSQLite実装。

LedgerStoreInterfaceに準拠したSQLite実装を提供する。
"""

import json
import sqlite3
from pathlib import Path

from backend.interfaces.cost_tree import RowRecord
from backend.interfaces.ledger_store import LedgerStoreInterface

# スキーマ定義
SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS ledger_rows (
    position    INTEGER PRIMARY KEY,
    payload     TEXT NOT NULL
);
"""


class SqliteLedgerStore(LedgerStoreInterface):
    """SQLiteによるStore層実装。"""

    def __init__(self, db_path: str):
        """初期化。

        Args:
            db_path: SQLiteデータベースファイルのパス
        """
        self._db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _init_schema(self):
        """スキーマを初期化する。"""
        with self._connect() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self._db_path)

    def replace_rows(self, rows: list[RowRecord]) -> int:
        """データセットを置き換える。

        行は投入順の連番とともにJSONで保存する。置き換えは
        1トランザクションで行い、途中で失敗した場合は旧データが残る。

        Args:
            rows: 保存する行のリスト

        Returns:
            保存された行数
        """
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM ledger_rows")
            cursor.executemany(
                "INSERT INTO ledger_rows (position, payload) VALUES (?, ?)",
                (
                    (i, json.dumps(dict(row), ensure_ascii=False))
                    for i, row in enumerate(rows)
                ),
            )
            conn.commit()
            return len(rows)

    def get_rows(self) -> list[dict]:
        """保存済みの行を投入順で取得する。"""
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT payload FROM ledger_rows ORDER BY position ASC"
            )
            return [json.loads(row[0]) for row in cursor.fetchall()]

    def count_rows(self) -> int:
        """保存済みの行数を返す。"""
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) FROM ledger_rows")
            return cursor.fetchone()[0]

    def delete_all_data(self) -> None:
        """全データを削除する（デバッグ用）。"""
        with self._connect() as conn:
            conn.execute("DELETE FROM ledger_rows")
            conn.commit()
