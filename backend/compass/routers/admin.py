"""
Admin catalog management and platform overview. Every route requires an
allowlisted admin email.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import distinct, func
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError
from typing import List
from uuid import UUID
import logging

from compass.database import get_db
from compass.models import (
    AIAnalysis,
    Assessment,
    AssessmentType,
    Category,
    ImplementationProgress,
    Profile,
    Tool,
    ToolRecommendationRecord,
    ToolStatus,
    User,
)
from compass.core.supabase_auth import get_admin_user
from compass.core.errors import internal_error
from compass.schemas.tool import (
    ToolCreate,
    ToolUpdate,
    ToolResponse,
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
)
from compass.schemas.profile import ProfilePayload
from compass.schemas.user import AdminStatsResponse, AdminUserItem, AdminUsersResponse
from compass.services.profiles import to_scoring_profile
from compass.services.scoring import score_breakdown, calculate_relevance_score
from compass.utils.timing import time_operation

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin"], dependencies=[Depends(get_admin_user)])


def _get_tool_or_404(db: Session, tool_id: UUID) -> Tool:
    tool = db.query(Tool).options(joinedload(Tool.category)).filter(Tool.id == tool_id).first()
    if not tool:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tool not found")
    return tool


def _get_category_or_404(db: Session, category_id: UUID) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


def _ensure_category_exists(db: Session, category_id) -> None:
    if category_id is not None:
        _get_category_or_404(db, category_id)


def _ensure_category_name_free(db: Session, name: str, exclude_id: UUID = None) -> None:
    query = db.query(Category).filter(Category.name == name)
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Category '{name}' already exists",
        )


# ----------------------------
# Tools
# ----------------------------
@router.get("/tools", response_model=List[ToolResponse])
def admin_list_tools(
    limit: int = Query(200, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """All tools, including inactive ones."""
    return (
        db.query(Tool)
        .options(joinedload(Tool.category))
        .order_by(Tool.name.asc(), Tool.id.asc())
        .offset(offset)
        .limit(limit)
        .all()
    )


@router.get("/tools/{tool_id}", response_model=ToolResponse)
def admin_get_tool(tool_id: UUID, db: Session = Depends(get_db)):
    return _get_tool_or_404(db, tool_id)


@router.post("/tools", response_model=ToolResponse, status_code=status.HTTP_201_CREATED)
def admin_create_tool(payload: ToolCreate, db: Session = Depends(get_db)):
    try:
        _ensure_category_exists(db, payload.category_id)
        tool = Tool(**payload.model_dump())
        db.add(tool)
        db.commit()
        db.refresh(tool)
        logger.info("Admin created tool %s (%s)", tool.id, tool.name)
        return tool
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Admin create tool failed")
        raise internal_error(e)


@router.put("/tools/{tool_id}", response_model=ToolResponse)
def admin_update_tool(tool_id: UUID, payload: ToolUpdate, db: Session = Depends(get_db)):
    try:
        tool = _get_tool_or_404(db, tool_id)
        updates = payload.model_dump(exclude_unset=True)
        if "category_id" in updates:
            _ensure_category_exists(db, updates["category_id"])
        for key, value in updates.items():
            setattr(tool, key, value)
        db.commit()
        db.refresh(tool)
        logger.info("Admin updated tool %s fields=%s", tool.id, sorted(updates))
        return tool
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Admin update tool %s failed", tool_id)
        raise internal_error(e)


@router.delete("/tools/{tool_id}", status_code=status.HTTP_204_NO_CONTENT)
def admin_delete_tool(tool_id: UUID, db: Session = Depends(get_db)):
    """Delete a tool along with the recommendation and progress rows pointing at it."""
    try:
        tool = _get_tool_or_404(db, tool_id)
        recs = db.query(ToolRecommendationRecord).filter(
            ToolRecommendationRecord.tool_id == tool_id
        ).delete(synchronize_session=False)
        progress = db.query(ImplementationProgress).filter(
            ImplementationProgress.tool_id == tool_id
        ).delete(synchronize_session=False)
        db.delete(tool)
        db.commit()
        logger.info("Admin deleted tool %s (recommendations=%d, progress=%d)", tool_id, recs, progress)
        return None
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Admin delete tool %s failed", tool_id)
        raise internal_error(e)


# ----------------------------
# Categories
# ----------------------------
@router.get("/categories", response_model=List[CategoryResponse])
def admin_list_categories(db: Session = Depends(get_db)):
    return db.query(Category).order_by(Category.name.asc()).all()


@router.get("/categories/{category_id}", response_model=CategoryResponse)
def admin_get_category(category_id: UUID, db: Session = Depends(get_db)):
    return _get_category_or_404(db, category_id)


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def admin_create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    try:
        _ensure_category_name_free(db, payload.name)
        category = Category(**payload.model_dump())
        db.add(category)
        db.commit()
        db.refresh(category)
        return category
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        # Lost a race with a concurrent insert of the same name
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Category '{payload.name}' already exists",
        )
    except Exception as e:
        db.rollback()
        logger.exception("Admin create category failed")
        raise internal_error(e)


@router.put("/categories/{category_id}", response_model=CategoryResponse)
def admin_update_category(category_id: UUID, payload: CategoryUpdate, db: Session = Depends(get_db)):
    try:
        category = _get_category_or_404(db, category_id)
        updates = payload.model_dump(exclude_unset=True)
        if updates.get("name"):
            _ensure_category_name_free(db, updates["name"], exclude_id=category_id)
        for key, value in updates.items():
            setattr(category, key, value)
        db.commit()
        db.refresh(category)
        return category
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Admin update category %s failed", category_id)
        raise internal_error(e)


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def admin_delete_category(category_id: UUID, db: Session = Depends(get_db)):
    """Delete a category. Its tools stay in the catalog, uncategorized."""
    try:
        category = _get_category_or_404(db, category_id)
        db.query(Tool).filter(Tool.category_id == category_id).update(
            {Tool.category_id: None}, synchronize_session=False
        )
        db.delete(category)
        db.commit()
        return None
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Admin delete category %s failed", category_id)
        raise internal_error(e)


# ----------------------------
# Scoring review
# ----------------------------
@router.post("/score-preview")
def score_preview(payload: ProfilePayload, db: Session = Depends(get_db)):
    """
    Per-factor score breakdown of every active tool for an ad-hoc profile.
    Nothing is persisted.
    """
    profile = to_scoring_profile(Profile(**payload.model_dump()))
    tools = (
        db.query(Tool)
        .filter(Tool.status == ToolStatus.ACTIVE.value)
        .order_by(Tool.name.asc(), Tool.id.asc())
        .all()
    )
    with time_operation(f"score_preview over {len(tools)} tools", logger.debug):
        rows = [
            {
                "tool_id": str(tool.id),
                "name": tool.name,
                "score": calculate_relevance_score(tool, profile),
                "factors": score_breakdown(tool, profile).as_dict(),
            }
            for tool in tools
        ]
    rows.sort(key=lambda row: row["score"], reverse=True)
    return {"profile": payload.model_dump(), "tools": rows}


# ----------------------------
# Platform overview
# ----------------------------
@router.get("/stats", response_model=AdminStatsResponse)
def admin_stats(db: Session = Depends(get_db)):
    """Platform-wide counts for the admin dashboard."""
    by_type = dict(
        db.query(Assessment.assessment_type, func.count(Assessment.id))
        .group_by(Assessment.assessment_type)
        .all()
    )
    return AdminStatsResponse(
        total_users=db.query(User).count(),
        users_with_profile=db.query(Profile).count(),
        active_users=db.query(func.count(distinct(ImplementationProgress.user_id))).scalar() or 0,
        total_tools=db.query(Tool).count(),
        active_tools=db.query(Tool).filter(Tool.status == ToolStatus.ACTIVE.value).count(),
        total_categories=db.query(Category).count(),
        assessments={kind.value: by_type.get(kind, 0) for kind in AssessmentType},
        recommendations=db.query(ToolRecommendationRecord).count(),
        ai_analyses=db.query(AIAnalysis).count(),
    )


@router.get("/users", response_model=AdminUsersResponse)
def admin_list_users(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """Users with their profile basics, newest first."""
    assessment_counts = (
        db.query(Assessment.user_id, func.count(Assessment.id).label("assessment_count"))
        .group_by(Assessment.user_id)
        .subquery()
    )
    rows = (
        db.query(User, Profile, assessment_counts.c.assessment_count)
        .outerjoin(Profile, Profile.user_id == User.id)
        .outerjoin(assessment_counts, assessment_counts.c.user_id == User.id)
        .order_by(User.created_at.desc(), User.id.asc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    items = [
        AdminUserItem(
            id=user.id,
            email=user.email,
            created_at=user.created_at,
            display_name=profile.display_name if profile else None,
            role=profile.role if profile else None,
            industry=profile.industry if profile else None,
            company_size=profile.company_size if profile else None,
            ai_experience=profile.ai_experience if profile else None,
            assessment_count=count or 0,
        )
        for user, profile, count in rows
    ]
    return AdminUsersResponse(items=items, total=db.query(User).count())
