"""集計ツリーを選択用の分類オプション列に平坦化する."""

from backend.interfaces.cost_tree import CategoryOption, CostNode
from backend.interfaces.errors import TreeNotBuiltError

MAX_OPTION_DEPTH: int = 3
"""これより深い階層はオプションにしない（件数が多くなりすぎるため）."""

PATH_SEPARATOR = " > "
ROOT_OPTION_LABEL = "全部（根节点）"


def _require_tree(root: CostNode | None) -> CostNode:
    if not isinstance(root, CostNode):
        raise TreeNotBuiltError("Cost tree has not been built")
    return root


def index_categories(
    root: CostNode | None,
    max_depth: int = MAX_OPTION_DEPTH,
    separator: str = PATH_SEPARATOR,
) -> list[CategoryOption]:
    """ルート直下から前順走査し、分類オプションを列挙する.

    1 <= depth <= max_depth かつ total_cost > 0 のノードだけを返す。
    depth が max_depth に達したノードの子は走査しない。ルート自身は
    含まない。

    Raises:
        TreeNotBuiltError: root が構築済みツリーでない場合
    """
    root = _require_tree(root)
    options: list[CategoryOption] = []

    def visit(node: CostNode, parent_path: tuple[str, ...]) -> None:
        path = parent_path + (node.name,)
        if 1 <= node.depth <= max_depth and node.total_cost > 0:
            options.append(
                CategoryOption(
                    depth=node.depth,
                    label=separator.join(path),
                    path=path,
                    node=node,
                )
            )
        if node.depth < max_depth:
            for child in node.children:
                visit(child, path)

    for child in root.children:
        visit(child, ())
    return options


def root_option(
    root: CostNode | None, label: str = ROOT_OPTION_LABEL
) -> CategoryOption:
    """ツリー全体を表す合成オプション（depth 0, 空パス）."""
    root = _require_tree(root)
    return CategoryOption(depth=0, label=label, path=(), node=root)


def build_category_options(
    root: CostNode | None,
    max_depth: int = MAX_OPTION_DEPTH,
    separator: str = PATH_SEPARATOR,
    root_label: str = ROOT_OPTION_LABEL,
) -> list[CategoryOption]:
    """全体オプションを先頭に付けた選択肢一覧."""
    return [root_option(root, root_label)] + index_categories(
        root, max_depth=max_depth, separator=separator
    )


def find_option(
    options: list[CategoryOption], label: str
) -> CategoryOption | None:
    """ラベルが一致する最初のオプションを返す."""
    return next((opt for opt in options if opt.label == label), None)
