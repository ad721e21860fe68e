"""Store層の契約テスト。

このテストは LedgerStoreInterface の契約を検証する。
どの実装であっても、このテストが通ることを保証する。
"""

import pytest

from backend.interfaces.ledger_store import LedgerStoreInterface


@pytest.fixture
def ledger_store(tmp_path):
    """Store層の実装インスタンスを返す。"""
    from backend.store.sqlite import SqliteLedgerStore

    db_path = tmp_path / "data" / "ledger.db"
    return SqliteLedgerStore(str(db_path))


class TestReplaceRows:
    """データセット置き換えの契約テスト。"""

    def test_stores_rows(self, ledger_store: LedgerStoreInterface):
        """投入した行がそのまま取得できる。"""
        rows = [
            {"一级类目": "研发", "二级类目": "云服务", "成本": "1200"},
            {"一级类目": "行政", "成本": 300.5},
        ]
        count = ledger_store.replace_rows(rows)
        assert count == 2
        assert ledger_store.get_rows() == rows

    def test_preserves_order(self, ledger_store: LedgerStoreInterface):
        """取得順は投入順。"""
        rows = [{"L1": name, "amount": "1"} for name in ["C", "A", "B"]]
        ledger_store.replace_rows(rows)
        assert [r["L1"] for r in ledger_store.get_rows()] == ["C", "A", "B"]

    def test_replaces_previous_dataset(self, ledger_store: LedgerStoreInterface):
        """新しいデータセットは旧データを丸ごと置き換える。"""
        ledger_store.replace_rows([{"L1": "Old", "amount": "1"}] * 3)
        ledger_store.replace_rows([{"L1": "New", "amount": "2"}])

        rows = ledger_store.get_rows()
        assert rows == [{"L1": "New", "amount": "2"}]
        assert ledger_store.count_rows() == 1

    def test_empty_dataset(self, ledger_store: LedgerStoreInterface):
        ledger_store.replace_rows([{"L1": "A"}])
        assert ledger_store.replace_rows([]) == 0
        assert ledger_store.get_rows() == []

    def test_none_values_round_trip(self, ledger_store: LedgerStoreInterface):
        ledger_store.replace_rows([{"L1": "A", "L2": None, "amount": None}])
        assert ledger_store.get_rows()[0]["L2"] is None


class TestDeleteAll:
    def test_delete_all_data(self, ledger_store: LedgerStoreInterface):
        ledger_store.replace_rows([{"L1": "A", "amount": "1"}])
        ledger_store.delete_all_data()
        assert ledger_store.count_rows() == 0
        assert ledger_store.get_rows() == []

    def test_persists_across_instances(self, tmp_path):
        """同じDBファイルを開き直しても行が残る。"""
        from backend.store.sqlite import SqliteLedgerStore

        db_path = str(tmp_path / "ledger.db")
        SqliteLedgerStore(db_path).replace_rows([{"L1": "A", "amount": "1"}])
        assert SqliteLedgerStore(db_path).count_rows() == 1
