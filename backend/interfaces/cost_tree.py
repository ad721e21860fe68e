"""コスト集計ツリーのデータモデル。

ツリーは構築完了後は不変値として扱う。子は親が所有し、
親への逆参照は持たない。
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

RowRecord = Mapping[str, Any]
"""入力の1行。階層キー（1〜6階層）と金額キーを持つ。値は未検証。"""


@dataclass(frozen=True)
class CostNode:
    """集計ツリーのノード。

    name は兄弟間でのみ一意。depth 0 は合成ルート専用。
    total_cost = direct_cost + Σ child.total_cost が常に成り立つ。
    """

    name: str
    depth: int
    direct_cost: float
    total_cost: float
    children: tuple["CostNode", ...] = field(default_factory=tuple)

    @property
    def level(self) -> int:
        """描画層向けの depth の別名。"""
        return self.depth

    @property
    def is_leaf(self) -> bool:
        return not self.children


@dataclass(frozen=True)
class CategoryOption:
    """選択UI向けに平坦化した分類エントリ。

    node はツリー内ノードへの参照でありコピーではない。
    """

    depth: int
    label: str
    path: tuple[str, ...]
    node: CostNode

    @property
    def level(self) -> int:
        return self.depth


def walk(node: CostNode) -> Iterator[CostNode]:
    """node 以下の全ノードを前順で返す。"""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))
