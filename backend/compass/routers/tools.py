from fastapi import APIRouter, Depends, Query, HTTPException, status
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import or_
from typing import Optional, List
from uuid import UUID
import logging

from compass.database import get_db
from compass.models import Tool, Category, ToolStatus
from compass.schemas.tool import ToolResponse, CategoryResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tools"])


@router.get("/tools", response_model=List[ToolResponse])
def list_tools(
    q: Optional[str] = Query(None, description="Search in name or description"),
    category: Optional[str] = Query(None, description="Filter by category name"),
    status_filter: Optional[ToolStatus] = Query(ToolStatus.ACTIVE, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """Browse the tool catalog."""
    query = db.query(Tool).options(joinedload(Tool.category))

    if q:
        qq = f"%{q.strip()}%"
        query = query.filter(or_(Tool.name.ilike(qq), Tool.description.ilike(qq)))

    if category:
        query = query.join(Category, Tool.category_id == Category.id).filter(Category.name == category)

    if status_filter is not None:
        query = query.filter(Tool.status == status_filter.value)

    tools = query.order_by(Tool.name.asc(), Tool.id.asc()).offset(offset).limit(limit).all()
    logger.info("Fetched %d tools (q=%s, category=%s, status=%s)", len(tools), q, category, status_filter)
    return tools


@router.get("/tools/{tool_id}", response_model=ToolResponse)
def get_tool(tool_id: UUID, db: Session = Depends(get_db)):
    tool = db.query(Tool).options(joinedload(Tool.category)).filter(Tool.id == tool_id).first()
    if not tool:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tool not found",
        )
    return tool


@router.get("/categories", response_model=List[CategoryResponse])
def list_categories(db: Session = Depends(get_db)):
    return db.query(Category).order_by(Category.name.asc()).all()
