"""FastAPIアプリケーション。

台帳取り込みAPI + 集計ツリー・分類オプション提供APIを統合。
"""

import io
from typing import Annotated, Any

import pandas as pd
from fastapi import Depends, FastAPI, HTTPException, Query, UploadFile
from pydantic import BaseModel

from backend.aggregation.category_index import find_option
from backend.aggregation.node_view import (
    cost_share,
    find_node,
    focus_view,
    ranked_children,
)
from backend.aggregation.service import CostTreeService, LedgerSnapshot
from backend.config import LedgerSettings
from backend.dependencies import get_cost_tree_service, get_settings
from backend.interfaces.cost_tree import CostNode
from backend.interfaces.errors import LedgerRejectedError, TreeNotBuiltError
from backend.logging_config import get_logger

logger = get_logger(__name__)

ServiceDep = Annotated[CostTreeService, Depends(get_cost_tree_service)]
SettingsDep = Annotated[LedgerSettings, Depends(get_settings)]

app = FastAPI(
    title="コスト階層集計 API",
    version="0.1.0",
)


# ---------- Pydantic モデル ----------


class LedgerBatchRequest(BaseModel):
    """POST /api/ledger のリクエストボディ。値は未検証のまま受け取る。"""

    rows: list[dict[str, Any]]


class CostNodeResponse(BaseModel):
    """集計ノードのレスポンス（再帰構造）。"""

    name: str
    depth: int
    direct_cost: float
    total_cost: float
    children: list["CostNodeResponse"]


class TreeResponse(BaseModel):
    """GET /api/tree のレスポンス。"""

    category: str
    root_total_cost: float
    tree: CostNodeResponse


class CategoryOptionResponse(BaseModel):
    """分類オプションのレスポンス。"""

    level: int
    label: str
    path: list[str]
    total_cost: float


class ChildSummaryResponse(BaseModel):
    """ノード詳細内の子ノード要約。"""

    name: str
    total_cost: float
    share_of_parent: float


class NodeDetailResponse(BaseModel):
    """ノード詳細のレスポンス。"""

    name: str
    depth: int
    direct_cost: float
    total_cost: float
    share_of_parent: float
    share_of_root: float
    children: list[ChildSummaryResponse]


# ---------- ヘルパー ----------


def _to_cost_node_response(node: CostNode) -> CostNodeResponse:
    """CostNode → CostNodeResponse の再帰変換。"""
    return CostNodeResponse(
        name=node.name,
        depth=node.depth,
        direct_cost=node.direct_cost,
        total_cost=node.total_cost,
        children=[_to_cost_node_response(c) for c in node.children],
    )


def _require_snapshot(service: CostTreeService) -> LedgerSnapshot:
    """スナップショットを取得する。未投入なら 404。"""
    try:
        return service.snapshot()
    except TreeNotBuiltError:
        raise HTTPException(status_code=404, detail="Ledger not loaded")


def _load_rows(service: CostTreeService, rows: list[dict]) -> dict:
    """データセットを投入する。合計が有限値にならなければ 400。"""
    try:
        snapshot = service.load(rows)
    except LedgerRejectedError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "rows": snapshot.row_count,
        "categories": len(snapshot.options) - 1,
        "total_cost": snapshot.root.total_cost,
    }


# ---------- エンドポイント ----------


@app.get("/api/health")
async def health_check():
    """ヘルスチェック。"""
    return {"status": "ok"}


@app.post("/api/ledger")
async def post_ledger(body: LedgerBatchRequest, service: ServiceDep):
    """台帳の行を投入し、データセットを置き換える。"""
    return _load_rows(service, body.rows)


@app.post("/api/ledger/csv")
async def post_ledger_csv(
    file: UploadFile,
    service: ServiceDep,
    settings: SettingsDep,
):
    """CSVファイルから台帳を投入する。

    全セルを文字列として読み、空セルは空文字のまま渡す。
    """
    content = await file.read()
    try:
        df = pd.read_csv(
            io.BytesIO(content),
            dtype=str,
            keep_default_na=False,
            encoding="utf-8-sig",
        )
    except pd.errors.EmptyDataError:
        raise HTTPException(status_code=400, detail="CSV file is empty")
    except UnicodeDecodeError:
        raise HTTPException(
            status_code=400, detail="CSV file must be UTF-8 encoded"
        )

    if settings.amount_key not in df.columns:
        logger.warning(
            f"CSV upload rejected: missing column {settings.amount_key}"
        )
        raise HTTPException(
            status_code=400,
            detail=f"{settings.amount_key} column is required",
        )

    logger.info(f"Parsed {len(df)} rows from {file.filename}")
    return _load_rows(service, df.to_dict(orient="records"))


@app.get("/api/tree")
async def get_tree(
    service: ServiceDep,
    category: str | None = None,
) -> TreeResponse:
    """集計ツリーを取得する。

    category 指定時はその分類に絞ったビューを返す。
    未知のラベルはツリー全体として扱う。
    """
    snapshot = _require_snapshot(service)
    option = None
    if category is not None:
        option = find_option(list(snapshot.options), category)
    if option is None:
        option = snapshot.options[0]
    view = focus_view(snapshot.root, option)
    return TreeResponse(
        category=option.label,
        root_total_cost=snapshot.root.total_cost,
        tree=_to_cost_node_response(view),
    )


@app.get("/api/categories")
async def get_categories(service: ServiceDep):
    """分類オプション一覧を取得する。先頭は全体オプション。"""
    snapshot = _require_snapshot(service)
    return {
        "categories": [
            CategoryOptionResponse(
                level=opt.level,
                label=opt.label,
                path=list(opt.path),
                total_cost=opt.node.total_cost,
            )
            for opt in snapshot.options
        ]
    }


@app.get("/api/nodes")
async def get_node_detail(
    service: ServiceDep,
    path: Annotated[list[str], Query()] = [],
) -> NodeDetailResponse:
    """名前パスで指定したノードの詳細を取得する。未知のパスは 404。"""
    snapshot = _require_snapshot(service)
    root = snapshot.root
    node = find_node(root, path)
    if node is None:
        raise HTTPException(status_code=404, detail="Category not found")
    parent = find_node(root, path[:-1]) if path else node

    return NodeDetailResponse(
        name=node.name,
        depth=node.depth,
        direct_cost=node.direct_cost,
        total_cost=node.total_cost,
        share_of_parent=cost_share(node.total_cost, parent.total_cost),
        share_of_root=cost_share(node.total_cost, root.total_cost),
        children=[
            ChildSummaryResponse(
                name=c.name,
                total_cost=c.total_cost,
                share_of_parent=cost_share(c.total_cost, node.total_cost),
            )
            for c in ranked_children(node)
        ],
    )


# ---------- デバッグ用エンドポイント ----------


@app.delete("/api/debug/data", tags=["debug"])
async def delete_all_data(service: ServiceDep):
    """【デバッグ用】台帳データを全削除する。"""
    service.clear()
    return {"deleted": "data"}
