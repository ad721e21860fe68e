"""台帳の行から階層コスト集計ツリーを構築する.

取り込みと集計は2つの独立したフェーズで行う。

1. 取り込み: 各行の階層キーを順に辿り、ノードを取得または作成して
   到達したノードの direct_cost に金額を加算する。
2. 集計: 全行の取り込み後に1回だけ後順走査し、total_cost を確定させる。
"""

import math
import re
from collections.abc import Iterable, Sequence
from typing import Any

from backend.interfaces.cost_tree import CostNode, RowRecord
from backend.interfaces.errors import ConfigError
from backend.logging_config import get_logger

logger = get_logger(__name__)

ROOT_NAME = "Total"

_NUMERIC_PREFIX = re.compile(
    r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)


def _coerce_amount(value: Any) -> float | None:
    """金額セルを数値化する。解釈できなければ None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _NUMERIC_PREFIX.match(str(value).lstrip())
        if match is None:
            return None
        number = float(match.group())
    if math.isnan(number):
        return None
    return number


def parse_amount(value: Any) -> float:
    """金額セルを寛容に数値化する.

    文字列は先頭の数値部分だけを読む（"12.5元" → 12.5）。
    数値として解釈できない値・空値・NaN は常に 0 として扱う。
    """
    number = _coerce_amount(value)
    return 0.0 if number is None else number


def normalize_name(value: Any) -> str | None:
    """分類セルを前後空白除去した名前にする。空なら None."""
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    name = str(value).strip()
    return name or None


class _DraftNode:
    """取り込みフェーズ中だけ使う可変ノード."""

    __slots__ = ("name", "depth", "direct_cost", "children")

    def __init__(self, name: str, depth: int) -> None:
        self.name = name
        self.depth = depth
        self.direct_cost = 0.0
        # dict は挿入順を保つので初出順がそのまま子の順序になる
        self.children: dict[str, _DraftNode] = {}

    def child(self, name: str) -> "_DraftNode":
        node = self.children.get(name)
        if node is None:
            node = _DraftNode(name, self.depth + 1)
            self.children[name] = node
        return node

    def freeze(self) -> CostNode:
        """後順で total_cost を確定させ、不変ノードに変換する."""
        children = tuple(c.freeze() for c in self.children.values())
        children_sum = sum(c.total_cost for c in children)
        return CostNode(
            name=self.name,
            depth=self.depth,
            direct_cost=self.direct_cost,
            total_cost=self.direct_cost + children_sum,
            children=children,
        )


class TreeBuilder:
    """台帳の行からコスト集計ツリーを構築する.

    level_keys の順序が階層の深さを決める。level_keys にないキー
    （7階層目など）は参照しない。
    """

    def __init__(
        self,
        level_keys: Sequence[str],
        amount_key: str,
        root_name: str = ROOT_NAME,
    ) -> None:
        if not level_keys:
            raise ConfigError("level_keys must not be empty")
        self._level_keys = tuple(level_keys)
        self._amount_key = amount_key
        self._root_name = root_name

    @property
    def level_keys(self) -> tuple[str, ...]:
        return self._level_keys

    @property
    def amount_key(self) -> str:
        return self._amount_key

    def build(self, rows: Iterable[RowRecord]) -> CostNode:
        """行の列からツリーを構築する.

        空の階層に出会った時点でその行の走査を打ち切り、金額は
        それまでに到達したノードに計上する（それより深い列は無視）。
        1階層目が空の行はルートに計上される。

        Args:
            rows: 階層キーと金額キーを持つマッピングの列

        Returns:
            total_cost 確定済みのルートノード
        """
        root = _DraftNode(self._root_name, 0)
        row_count = 0
        node_count = 0
        unparsable = 0

        for row in rows:
            row_count += 1
            raw_amount = row.get(self._amount_key)
            amount = _coerce_amount(raw_amount)
            if amount is None:
                if normalize_name(raw_amount) is not None:
                    unparsable += 1
                amount = 0.0

            current = root
            for key in self._level_keys:
                name = normalize_name(row.get(key))
                if name is None:
                    break
                if name not in current.children:
                    node_count += 1
                current = current.child(name)

            current.direct_cost += amount

        tree = root.freeze()

        if unparsable:
            logger.debug(f"{unparsable} unparsable amounts treated as 0")
        logger.info(
            f"Built cost tree from {row_count} rows: "
            f"{node_count} categories, total {tree.total_cost}"
        )
        return tree
