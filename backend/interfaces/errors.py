"""コスト集計の例外定義。

データ品質の問題（数値でない金額、空の分類名）は例外にしない。
ここに定義するのは設定ミス・呼び出し順序の誤り・集計不能なデータセットだけ。
"""


class CostTreeError(Exception):
    """コスト集計の基底例外。"""

    pass


class ConfigError(CostTreeError, ValueError):
    """設定の誤り（階層キーが空など）。"""

    pass


class TreeNotBuiltError(CostTreeError):
    """ツリー未構築のまま参照しようとした。"""

    pass


class LedgerRejectedError(CostTreeError, ValueError):
    """集計結果が有限値にならず、データセットを受け付けられない。"""

    pass
