from pydantic import BaseModel
from typing import Dict, Optional
from prompts.engine import UserRole


class OnboardingRequest(BaseModel):
    role : UserRole


class ProfileResponse(BaseModel):
    id : int
    email : str
    role : str
    plan : str
    prompts_used_today : int
    prompts_remaining_today : Optional[int] = None
    daily_limit : Optional[int] = None


class UsageStatsResponse(BaseModel):
    total_prompts : int
    last_week_prompts : int
    role_breakdown : Dict[str, int]
    plan : str
    daily_limit : Optional[int] = None
    prompts_used_today : int
