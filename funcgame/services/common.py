from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel

from funcgame.errors import NotFound
from funcgame.store import QueryResult


DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def page_bounds(page: int = DEFAULT_PAGE, page_size: int = DEFAULT_PAGE_SIZE) -> Tuple[int, int]:
    """Inclusive (start, end) row range for a 1-based page.

    pageSize is not clamped; whatever the client sends goes to the store as-is.
    """
    start = (int(page) - 1) * int(page_size)
    end = start + int(page_size) - 1
    return start, end


def build_patch(body: BaseModel, *, drop_falsy: bool = True) -> Dict[str, Any]:
    """Patch dict from the fields the client actually sent.

    Absent fields never enter the patch. With drop_falsy (the behavior of the
    users/games/functions/steps update endpoints) an explicit falsy value such
    as 0, "" or null is also dropped, so it cannot be written.
    """
    sent = body.model_dump(include=body.model_fields_set)
    if not drop_falsy:
        return sent
    return {k: v for k, v in sent.items() if v}


def one_or_404(result: QueryResult, entity: str) -> Dict[str, Any]:
    row = result.first()
    if row is None:
        raise NotFound.entity(entity)
    return row


def rows_or_404(result: QueryResult, entity: str) -> List[Dict[str, Any]]:
    if not result.rows:
        raise NotFound.entity(entity)
    return result.rows


def page_payload(result: QueryResult) -> Dict[str, Any]:
    return {"data": result.rows, "total": result.count}


def strip_keys(row: Optional[Dict[str, Any]], keys: Tuple[str, ...]) -> Optional[Dict[str, Any]]:
    if row is None:
        return None
    return {k: v for k, v in row.items() if k not in keys}
