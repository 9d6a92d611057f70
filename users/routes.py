from fastapi import APIRouter , Depends
from sqlalchemy.orm import Session
from sqlalchemy import func
from datetime import timedelta
from database import get_db
from database_models import Prompt , utcnow
from auth.utils import get_current_user
from users.schemas import OnboardingRequest , ProfileResponse , UsageStatsResponse
from users.plans import plan_summary
from prompts.engine import DEFAULT_ROLE
from core.logger import logger


router = APIRouter(prefix="/users" , tags=["Users"])


def _profile(user) -> dict:
    summary = plan_summary(user)
    return {
        "id": user.id,
        "email": user.email,
        "role": user.role or DEFAULT_ROLE,
        **summary,
    }


@router.post("/onboarding" , response_model=ProfileResponse)
def onboarding(
    data : OnboardingRequest,
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    current_user.role = data.role
    db.commit()
    db.refresh(current_user)

    logger.info(f"Role set to {data.role} user_id={current_user.id}")
    return _profile(current_user)


@router.get("/me" , response_model=ProfileResponse)
def get_profile(
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    profile = _profile(current_user)
    db.commit()   # persists a day rollover reset, if any
    return profile


@router.post("/upgrade" , response_model=ProfileResponse)
def upgrade_user(
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    current_user.plan = "pro"
    db.commit()
    db.refresh(current_user)

    logger.info(f"User upgraded to pro user_id={current_user.id}")
    return _profile(current_user)


@router.post("/downgrade" , response_model=ProfileResponse)
def downgrade_user(
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    current_user.plan = "free"
    db.commit()
    db.refresh(current_user)

    logger.warning(f"User downgraded to free user_id={current_user.id}")
    return _profile(current_user)


@router.get("/usage" , response_model=UsageStatsResponse)
def usage_stats(
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    base = db.query(Prompt).filter(Prompt.user_id == current_user.id)

    total_prompts = base.count()
    last_week_prompts = base.filter(
        Prompt.created_at >= utcnow() - timedelta(days=7)
    ).count()

    rows = db.query(Prompt.role , func.count(Prompt.id)).filter(
        Prompt.user_id == current_user.id
    ).group_by(Prompt.role).all()

    role_breakdown = {(role or "unknown"): count for role, count in rows}

    summary = plan_summary(current_user)
    db.commit()

    return {
        "total_prompts": total_prompts,
        "last_week_prompts": last_week_prompts,
        "role_breakdown": role_breakdown,
        "plan": summary["plan"],
        "daily_limit": summary["daily_limit"],
        "prompts_used_today": summary["prompts_used_today"],
    }
