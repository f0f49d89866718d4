"""Search API routes. GET takes query parameters, POST a JSON body."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from app.auth import get_current_user_id
from app.database import get_db
from app.schemas.search import SearchHit, SearchRequest
from app.services import search_service

logger = logging.getLogger(__name__)
router = APIRouter()


def search_query_params(
    keyword: str = Query(""),
    start_date: str = Query(""),
    end_date: str = Query(""),
    role: str = Query(""),
    type: str = Query(""),
) -> SearchRequest:
    return SearchRequest(keyword=keyword, start_date=start_date, end_date=end_date, role=role, type=type)


async def search_body(request: Request) -> Optional[SearchRequest]:
    """The JSON body as a SearchRequest, or None when absent or unreadable."""
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return SearchRequest.model_validate_json(raw)
    except PydanticValidationError as exc:
        logger.info("Ignoring search body, using query parameters: %s", exc.errors()[0]["msg"])
        return None


@router.get("/", response_model=list[SearchHit])
def search_get(
    params: SearchRequest = Depends(search_query_params),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Search events and/or tasks by keyword, date range and the caller's role."""
    return search_service.search(db, user_id, params)


@router.post("/", response_model=list[SearchHit])
def search_post(
    payload: Optional[SearchRequest] = Depends(search_body),
    params: SearchRequest = Depends(search_query_params),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Same as GET; without a usable JSON body the query parameters are used."""
    return search_service.search(db, user_id, payload or params)
