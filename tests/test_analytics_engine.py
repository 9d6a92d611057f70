from datetime import date, datetime

import pytest

from analytics import engine

NOW = datetime(2024, 3, 15, 12, 0)


def _event(day, role="writer", prompt_type="blog", tags=None, before=5, after=40, score=60.0, user_id=1, month=3):
    return {
        "timestamp": datetime(2024, month, day, 10, 0),
        "user_id": user_id,
        "role": role,
        "prompt_type": prompt_type,
        "category": None,
        "tags": tags or [],
        "enhancement_score": score,
        "word_count_before": before,
        "word_count_after": after,
    }


EVENTS = [
    _event(15, "writer", "blog", ["seo"]),
    _event(14, "designer", "social", ["seo", "brand"]),
    _event(14, "writer", "social"),
    _event(10, "writer", "email", before=10, after=120),
    _event(20, "marketer", "blog", month=2),
]


def test_named_ranges():
    assert len(engine.filter_by_date_range(EVENTS, "today", now=NOW)) == 1
    assert len(engine.filter_by_date_range(EVENTS, "yesterday", now=NOW)) == 2
    assert len(engine.filter_by_date_range(EVENTS, "last7days", now=NOW)) == 4
    assert len(engine.filter_by_date_range(EVENTS, "thisMonth", now=NOW)) == 4
    assert len(engine.filter_by_date_range(EVENTS, "lastMonth", now=NOW)) == 1
    assert len(engine.filter_by_date_range(EVENTS, "thisYear", now=NOW)) == 5


def test_custom_range_needs_both_dates():
    with pytest.raises(ValueError):
        engine.filter_by_date_range(EVENTS, "custom", start_date=date(2024, 3, 1), now=NOW)

    points = engine.filter_by_date_range(
        EVENTS, "custom", start_date=date(2024, 3, 10), end_date=date(2024, 3, 14), now=NOW
    )
    assert len(points) == 3


def test_last_month_in_january_wraps_year():
    start, end = engine.resolve_date_range("lastMonth", now=datetime(2024, 1, 5))
    assert start == datetime(2023, 12, 1)
    assert end == datetime(2024, 1, 1)


def test_heatmap_counts():
    heatmap = engine.generate_role_prompt_heatmap(EVENTS, "thisMonth", now=NOW)

    assert heatmap["categories"] == ["writer", "designer"]
    assert heatmap["time_periods"] == ["blog", "social", "email"]
    assert heatmap["values"] == [[1, 1, 1], [0, 1, 0]]


def test_trends_group_by_day_and_month():
    daily = engine.generate_usage_trends(EVENTS, "thisMonth", "day", now=NOW)
    assert daily["time_labels"] == ["2024-03-10", "2024-03-14", "2024-03-15"]
    writer = next(d for d in daily["datasets"] if d["label"] == "writer")
    assert writer["data"] == [1, 1, 1]

    monthly = engine.generate_usage_trends(EVENTS, "thisYear", "month", now=NOW)
    assert monthly["time_labels"] == ["2024-02", "2024-03"]


def test_trends_group_by_week_keeps_a_day_in_one_bucket():
    events = [
        {**_event(7, month=1), "timestamp": datetime(2024, 1, 7, 0, 0)},
        {**_event(7, month=1), "timestamp": datetime(2024, 1, 7, 12, 0)},
        {**_event(8, month=1), "timestamp": datetime(2024, 1, 8, 9, 0)},
    ]

    weekly = engine.generate_usage_trends(
        events, "custom", "week", start_date=date(2024, 1, 1), end_date=date(2024, 1, 31)
    )

    assert weekly["time_labels"] == ["2024-W01", "2024-W02"]
    assert weekly["datasets"] == [{"label": "writer", "data": [2, 1]}]


def test_breakdown_by_tags_and_role():
    tags = engine.generate_usage_breakdown(EVENTS, "tags", "thisMonth", now=NOW)
    assert dict(zip(tags["labels"], tags["values"])) == {"seo": 2, "brand": 1, "untagged": 2}

    roles = engine.generate_usage_breakdown(EVENTS, "role", "thisYear", now=NOW)
    assert roles["labels"][0] == "writer"
    assert roles["values"][0] == 3


def test_word_count_stats():
    stats = engine.generate_word_count_stats(EVENTS, "thisMonth", now=NOW)

    assert stats["average_before"] == pytest.approx(6.25)
    assert stats["average_after"] == pytest.approx(60.0)
    by_range = {bucket["range"]: bucket["count"] for bucket in stats["distribution"]}
    assert by_range["26-50 words"] == 3
    assert by_range["101-200 words"] == 1


def test_word_count_stats_empty():
    stats = engine.generate_word_count_stats([], "today", now=NOW)
    assert stats["distribution"] == []
    assert stats["percentage_increase"] == 0


def test_user_insights():
    events = EVENTS + [_event(15, user_id=2, tags=["other"])]
    insights = engine.generate_user_insights(events, 1, "thisMonth", now=NOW)

    assert insights["total_usage"] == 4
    assert insights["favorite_tags"][0] == {"tag": "seo", "count": 2}
    assert insights["favorite_prompt_types"][0] == {"type": "social", "count": 2}
    assert insights["average_enhancement_score"] == pytest.approx(60.0)
    assert len(insights["engagement_trend"]["time_labels"]) == 3


def test_cache_reuses_value_until_cleared():
    engine.clear_analytics_cache()
    calls = []

    def compute():
        calls.append(1)
        return len(calls)

    assert engine.get_cached_analytics("k", compute) == 1
    assert engine.get_cached_analytics("k", compute) == 1
    assert engine.get_cached_analytics("k", compute, max_age=0) == 2

    engine.clear_analytics_cache()
    assert engine.get_cached_analytics("k", compute) == 3


def test_cache_drops_expired_entries():
    engine.clear_analytics_cache()
    engine.get_cached_analytics("old", lambda: 1)

    engine.get_cached_analytics("new", lambda: 2, max_age=0)

    assert "old" not in engine._analytics_cache
