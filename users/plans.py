from datetime import datetime
from typing import Dict, Optional

from fastapi import HTTPException, status

from core.config import FREE_TIER_DAILY_LIMIT, FREE_HISTORY_DAYS
from database_models import utcnow


DEFAULT_PLAN = "free"

PLAN_DEFINITIONS: Dict[str, Dict] = {
    "free": {
        "plan": "free",
        "label": "Free",
        "daily_limit": FREE_TIER_DAILY_LIMIT,
        "history_days": FREE_HISTORY_DAYS,
        "enhanced_algorithm": False,
    },
    "pro": {
        "plan": "pro",
        "label": "Pro",
        "daily_limit": None,
        "history_days": None,
        "enhanced_algorithm": True,
    },
}


class QuotaExceededError(Exception):
    """Raised when a free user has no enhancements left today."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__("Free tier daily limit reached")


def normalize_plan(plan: str) -> str:
    value = str(plan or "").strip().lower()
    return value if value in PLAN_DEFINITIONS else DEFAULT_PLAN


def get_plan_definition(plan: str) -> Dict:
    return PLAN_DEFINITIONS[normalize_plan(plan)]


def get_daily_limit(plan: str) -> Optional[int]:
    return get_plan_definition(plan)["daily_limit"]


def get_history_days(plan: str) -> Optional[int]:
    return get_plan_definition(plan)["history_days"]


def maybe_reset_daily_usage(user, now: datetime = None) -> bool:
    """Zero the counter when the last prompt was on an earlier calendar day."""
    now = now or utcnow()
    last = getattr(user, "last_prompt_date", None)
    if last is not None and last.date() == now.date():
        return False
    user.prompts_used_today = 0
    user.last_prompt_date = now
    return True


def remaining_prompts(user, now: datetime = None) -> Optional[int]:
    maybe_reset_daily_usage(user, now)
    limit = get_daily_limit(user.plan)
    if limit is None:
        return None
    return max(0, limit - (user.prompts_used_today or 0))


def ensure_quota_available(user, now: datetime = None) -> None:
    remaining = remaining_prompts(user, now)
    if remaining is not None and remaining <= 0:
        raise QuotaExceededError(get_daily_limit(user.plan))


def consume_prompt_usage(user, now: datetime = None) -> None:
    now = now or utcnow()
    maybe_reset_daily_usage(user, now)
    user.prompts_used_today = (user.prompts_used_today or 0) + 1
    user.last_prompt_date = now


def require_enhanced_algorithm(user) -> None:
    if not get_plan_definition(user.plan)["enhanced_algorithm"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Enhanced prompt generation features require a Pro subscription"
        )


def plan_summary(user, now: datetime = None) -> Dict:
    remaining = remaining_prompts(user, now)
    plan = get_plan_definition(user.plan)
    return {
        "plan": plan["plan"],
        "daily_limit": plan["daily_limit"],
        "prompts_used_today": user.prompts_used_today or 0,
        "prompts_remaining_today": remaining,
    }
