"""選択中の分類に応じた表示用ビューとノード指標."""

from collections.abc import Sequence

from backend.interfaces.cost_tree import CategoryOption, CostNode

FOCUS_ROOT_NAME = "Root"


def focus_view(root: CostNode, option: CategoryOption | None) -> CostNode:
    """選択オプションに絞ったツリーを返す.

    全体オプション（depth 0）または None ならルートそのもの。
    それ以外は選択ノードを唯一の子に持つ合成ルートを新たに作る。
    選択ノードはコピーせず参照する。
    """
    if option is None or option.depth == 0:
        return root
    return CostNode(
        name=FOCUS_ROOT_NAME,
        depth=0,
        direct_cost=0.0,
        total_cost=option.node.total_cost,
        children=(option.node,),
    )


def cost_share(part: float, whole: float) -> float:
    """whole に対する part の比率。whole が 0 以下なら 0."""
    if whole <= 0:
        return 0.0
    return part / whole


def ranked_children(node: CostNode) -> list[CostNode]:
    """total_cost > 0 の子を total_cost 降順で返す（同額は出現順）."""
    visible = [c for c in node.children if c.total_cost > 0]
    return sorted(visible, key=lambda c: c.total_cost, reverse=True)


def find_node(root: CostNode, path: Sequence[str]) -> CostNode | None:
    """ルート直下からの名前パスでノードを探す。空パスはルート."""
    node = root
    for name in path:
        node = next((c for c in node.children if c.name == name), None)
        if node is None:
            return None
    return node
