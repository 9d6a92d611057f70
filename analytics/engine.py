"""
Usage analytics.

Every function takes a list of usage records (plain dicts shaped like
``UsageEvent`` rows), narrows it to a date range and tallies counts.
Results can be memoised with ``get_cached_analytics`` for a fixed TTL.
"""
import math
import time
from collections import Counter
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional

from core.config import ANALYTICS_CACHE_TTL_SECONDS
from database_models import utcnow

DATE_RANGES = ("today", "yesterday", "last7days", "last30days", "thisMonth", "lastMonth", "thisYear", "custom")
DEFAULT_RANGE = "last30days"
GROUP_BY_OPTIONS = ("day", "week", "month")
BREAKDOWN_OPTIONS = ("role", "prompt_type", "category", "tags")

WORD_COUNT_BUCKETS = [
    (0, 10, "0-10 words"),
    (11, 25, "11-25 words"),
    (26, 50, "26-50 words"),
    (51, 100, "51-100 words"),
    (101, 200, "101-200 words"),
    (201, 500, "201-500 words"),
    (501, math.inf, "500+ words"),
]

FAVORITES_LIMIT = 5


def resolve_date_range(
    range_name: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    now: Optional[datetime] = None,
):
    """Return the half-open ``[start, end)`` datetime window for a named range."""
    now = now or utcnow()
    today = datetime(now.year, now.month, now.day)
    day = timedelta(days=1)
    end = today + day

    if range_name == "today":
        start = today
    elif range_name == "yesterday":
        start, end = today - day, today
    elif range_name == "last7days":
        start = today - 7 * day
    elif range_name == "last30days":
        start = today - 30 * day
    elif range_name == "thisMonth":
        start = datetime(today.year, today.month, 1)
    elif range_name == "lastMonth":
        end = datetime(today.year, today.month, 1)
        start = datetime(end.year - 1, 12, 1) if end.month == 1 else datetime(end.year, end.month - 1, 1)
    elif range_name == "thisYear":
        start = datetime(today.year, 1, 1)
    elif range_name == "custom":
        if start_date is None or end_date is None:
            raise ValueError("Custom date range requires start_date and end_date")
        start = datetime(start_date.year, start_date.month, start_date.day)
        end = datetime(end_date.year, end_date.month, end_date.day) + day
    else:
        start = today - 30 * day

    return start, end


def filter_by_date_range(
    data: Iterable[Dict],
    range_name: str = DEFAULT_RANGE,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    now: Optional[datetime] = None,
) -> List[Dict]:
    start, end = resolve_date_range(range_name, start_date, end_date, now)
    return [point for point in data if start <= point["timestamp"] < end]


def _unique(values: Iterable) -> List:
    seen = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def _time_key(moment: datetime, group_by: str) -> str:
    if group_by == "week":
        # whole days only, so one calendar date always lands in one week
        days_into_year = (moment.date() - date(moment.year, 1, 1)).days
        week = days_into_year // 7 + 1
        return f"{moment.year}-W{week:02d}"
    if group_by == "month":
        return moment.strftime("%Y-%m")
    return moment.strftime("%Y-%m-%d")


def generate_role_prompt_heatmap(data: List[Dict], range_name: str = DEFAULT_RANGE, **range_kwargs) -> Dict:
    points = filter_by_date_range(data, range_name, **range_kwargs)
    roles = _unique(point["role"] for point in points)
    prompt_types = _unique(point["prompt_type"] for point in points if point.get("prompt_type"))

    values = [[0] * len(prompt_types) for _ in roles]
    for point in points:
        if point.get("prompt_type"):
            values[roles.index(point["role"])][prompt_types.index(point["prompt_type"])] += 1

    return {
        "categories": roles,
        "time_periods": prompt_types,
        "values": values,
    }


def generate_usage_trends(
    data: List[Dict],
    range_name: str = DEFAULT_RANGE,
    group_by: str = "day",
    **range_kwargs
) -> Dict:
    points = filter_by_date_range(data, range_name, **range_kwargs)
    roles = _unique(point["role"] for point in points)

    groups: Dict[str, Counter] = {}
    for point in points:
        key = _time_key(point["timestamp"], group_by)
        groups.setdefault(key, Counter())[point["role"]] += 1

    labels = sorted(groups)
    return {
        "time_labels": labels,
        "datasets": [
            {"label": role, "data": [groups[label][role] for label in labels]}
            for role in roles
        ],
    }


def generate_usage_breakdown(
    data: List[Dict],
    breakdown_by: str = "role",
    range_name: str = DEFAULT_RANGE,
    **range_kwargs
) -> Dict:
    points = filter_by_date_range(data, range_name, **range_kwargs)
    counts: Counter = Counter()

    for point in points:
        if breakdown_by == "role":
            counts[point["role"]] += 1
        elif breakdown_by == "prompt_type":
            counts[point.get("prompt_type") or "unknown"] += 1
        elif breakdown_by == "category":
            counts[point.get("category") or "uncategorized"] += 1
        elif breakdown_by == "tags":
            tags = point.get("tags") or []
            if tags:
                counts.update(tags)
            else:
                counts["untagged"] += 1
        else:
            raise ValueError(f"Unknown breakdown: {breakdown_by}")

    # most_common keeps first-seen order between equal counts
    ordered = counts.most_common()
    return {
        "labels": [label for label, _ in ordered],
        "values": [value for _, value in ordered],
    }


def generate_word_count_stats(data: List[Dict], range_name: str = DEFAULT_RANGE, **range_kwargs) -> Dict:
    points = [
        point for point in filter_by_date_range(data, range_name, **range_kwargs)
        if point.get("word_count_before") is not None and point.get("word_count_after") is not None
    ]

    if not points:
        return {
            "average_before": 0,
            "average_after": 0,
            "percentage_increase": 0,
            "distribution": [],
        }

    average_before = sum(point["word_count_before"] for point in points) / len(points)
    average_after = sum(point["word_count_after"] for point in points) / len(points)
    increase = ((average_after - average_before) / average_before) * 100 if average_before > 0 else 0

    distribution = [
        {
            "range": label,
            "count": sum(1 for point in points if low <= point["word_count_after"] <= high),
        }
        for low, high, label in WORD_COUNT_BUCKETS
    ]

    return {
        "average_before": average_before,
        "average_after": average_after,
        "percentage_increase": increase,
        "distribution": distribution,
    }


def generate_user_insights(data: List[Dict], user_id: int, range_name: str = DEFAULT_RANGE, **range_kwargs) -> Dict:
    points = [
        point for point in filter_by_date_range(data, range_name, **range_kwargs)
        if point["user_id"] == user_id
    ]

    tag_counts: Counter = Counter()
    type_counts: Counter = Counter()
    for point in points:
        tag_counts.update(point.get("tags") or [])
        if point.get("prompt_type"):
            type_counts[point["prompt_type"]] += 1

    scores = [point["enhancement_score"] for point in points if point.get("enhancement_score") is not None]

    return {
        "total_usage": len(points),
        "favorite_tags": [{"tag": tag, "count": count} for tag, count in tag_counts.most_common(FAVORITES_LIMIT)],
        "favorite_prompt_types": [
            {"type": kind, "count": count} for kind, count in type_counts.most_common(FAVORITES_LIMIT)
        ],
        "average_enhancement_score": sum(scores) / len(scores) if scores else 0,
        "engagement_trend": generate_usage_trends(points, range_name, "day", **range_kwargs),
    }


# in-process cache: key -> (stored_at, value)
_analytics_cache: Dict[str, tuple] = {}


def _evict_expired(now: float, max_age: float) -> None:
    for key in [key for key, (stored_at, _) in _analytics_cache.items() if now - stored_at >= max_age]:
        del _analytics_cache[key]


def get_cached_analytics(key: str, compute: Callable[[], Any], max_age: float = ANALYTICS_CACHE_TTL_SECONDS) -> Any:
    now = time.monotonic()
    _evict_expired(now, max_age)

    cached = _analytics_cache.get(key)
    if cached is not None:
        return cached[1]

    value = compute()
    _analytics_cache[key] = (now, value)
    return value


def clear_analytics_cache() -> None:
    _analytics_cache.clear()
