from datetime import timedelta

from database_models import utcnow


def _track(client, headers, **fields):
    payload = {"prompt_type": "blog", "tags": ["seo"], "word_count_before": 4, "word_count_after": 30}
    payload.update(fields)
    response = client.post("/api/analytics/track", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_analytics_requires_auth(client):
    assert client.get("/api/analytics/heatmap").status_code == 401


def test_heatmap_and_breakdown(client, auth_headers):
    _track(client, auth_headers)
    _track(client, auth_headers, prompt_type="email", role="marketer")

    heatmap = client.get("/api/analytics/heatmap", headers=auth_headers).json()
    assert heatmap["categories"] == ["writer", "marketer"]
    assert heatmap["time_periods"] == ["blog", "email"]

    breakdown = client.get(
        "/api/analytics/breakdown", params={"breakdown_by": "tags"}, headers=auth_headers
    ).json()
    assert breakdown == {"labels": ["seo"], "values": [2]}


def test_tracking_clears_cached_results(client, auth_headers):
    _track(client, auth_headers)
    first = client.get("/api/analytics/wordstats", headers=auth_headers).json()

    _track(client, auth_headers, word_count_before=10, word_count_after=100)
    second = client.get("/api/analytics/wordstats", headers=auth_headers).json()

    assert first["average_after"] == 30
    assert second["average_after"] == 65


def test_trends_range_filtering(client, auth_headers):
    _track(client, auth_headers)
    _track(client, auth_headers, timestamp=(utcnow() - timedelta(days=40)).isoformat())

    recent = client.get("/api/analytics/trends", params={"range": "last7days"}, headers=auth_headers).json()
    assert sum(recent["datasets"][0]["data"]) == 1

    monthly = client.get(
        "/api/analytics/trends", params={"range": "thisYear", "group_by": "month"}, headers=auth_headers
    ).json()
    assert len(monthly["time_labels"]) >= 1


def test_custom_range_needs_dates(client, auth_headers):
    response = client.get("/api/analytics/heatmap", params={"range": "custom"}, headers=auth_headers)
    assert response.status_code == 400

    today = utcnow().date().isoformat()
    response = client.get(
        "/api/analytics/heatmap",
        params={"range": "custom", "start_date": today, "end_date": today},
        headers=auth_headers,
    )
    assert response.status_code == 200


def test_invalid_range_is_400(client, auth_headers):
    response = client.get("/api/analytics/heatmap", params={"range": "forever"}, headers=auth_headers)
    assert response.status_code == 400


def test_user_insights_access(client, auth_headers, other_headers):
    me = client.get("/api/users/me", headers=auth_headers).json()
    other = client.get("/api/users/me", headers=other_headers).json()

    client.post("/api/prompts/enhance", json={"prompt": "design a logo"}, headers=auth_headers)
    _track(client, auth_headers, enhancement_score=80)

    insights = client.get(f"/api/analytics/user/{me['id']}", headers=auth_headers)
    assert insights.status_code == 200
    assert insights.json()["total_usage"] == 2

    assert client.get(f"/api/analytics/user/{other['id']}", headers=auth_headers).status_code == 403
    assert client.get("/api/analytics/user/9999", headers=auth_headers).status_code == 404
