from datetime import datetime, timedelta

import pytest
from fastapi import HTTPException

from users.plans import (
    QuotaExceededError,
    consume_prompt_usage,
    ensure_quota_available,
    get_daily_limit,
    plan_summary,
    remaining_prompts,
    require_enhanced_algorithm,
)


class DummyUser:
    def __init__(self, plan="free"):
        self.plan = plan
        self.prompts_used_today = 0
        self.last_prompt_date = None


NOW = datetime(2024, 5, 10, 15, 30)


def test_free_user_blocked_after_limit():
    user = DummyUser()
    limit = get_daily_limit("free")

    for _ in range(limit):
        ensure_quota_available(user, NOW)
        consume_prompt_usage(user, NOW)

    with pytest.raises(QuotaExceededError) as exc:
        ensure_quota_available(user, NOW)
    assert exc.value.limit == limit


def test_counter_resets_on_next_calendar_day():
    user = DummyUser()
    user.prompts_used_today = get_daily_limit("free")
    user.last_prompt_date = NOW

    next_morning = NOW.replace(hour=0, minute=1) + timedelta(days=1)
    ensure_quota_available(user, next_morning)
    assert user.prompts_used_today == 0


def test_pro_is_unlimited():
    user = DummyUser("pro")
    user.prompts_used_today = 500
    user.last_prompt_date = NOW

    assert remaining_prompts(user, NOW) is None
    ensure_quota_available(user, NOW)
    require_enhanced_algorithm(user)


def test_enhanced_algorithm_requires_pro():
    with pytest.raises(HTTPException) as exc:
        require_enhanced_algorithm(DummyUser())
    assert exc.value.status_code == 403


def test_plan_summary():
    user = DummyUser()
    consume_prompt_usage(user, NOW)
    summary = plan_summary(user, NOW)

    assert summary["plan"] == "free"
    assert summary["prompts_used_today"] == 1
    assert summary["prompts_remaining_today"] == get_daily_limit("free") - 1
