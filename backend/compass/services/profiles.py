from typing import Optional, Dict, Any
from uuid import UUID
from datetime import datetime
import logging

from sqlalchemy.orm import Session

from compass.models import Profile
from compass.services.scoring import UserProfile

logger = logging.getLogger(__name__)


def get_profile(db: Session, user_id: UUID) -> Optional[Profile]:
    return db.query(Profile).filter(Profile.user_id == user_id).first()


def upsert_profile(db: Session, user_id: UUID, fields: Dict[str, Any]) -> Profile:
    """Create or update the user's profile. Flushes; the caller commits."""
    profile = get_profile(db, user_id)
    if profile:
        for key, value in fields.items():
            setattr(profile, key, value)
        profile.updated_at = datetime.utcnow()
    else:
        profile = Profile(user_id=user_id, **fields)
        db.add(profile)
    db.flush()
    return profile


def to_scoring_profile(profile: Profile) -> UserProfile:
    return UserProfile(
        role=profile.role or "",
        industry=profile.industry or "",
        company_size=profile.company_size or "",
        ai_experience=profile.ai_experience or "",
        goals=list(profile.goals or []),
        time_availability=profile.time_availability or "",
        implementation_timeline=profile.implementation_timeline or "",
    )
