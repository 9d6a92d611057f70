from datetime import timedelta

from auth.models import User
from database_models import Prompt, UsageEvent
from users.plans import get_daily_limit


def _enhance(client, headers=None, prompt="write a blog post about tea"):
    return client.post("/api/prompts/enhance", json={"prompt": prompt}, headers=headers or {})


def test_anonymous_enhance_is_not_saved(client, db):
    response = _enhance(client)

    assert response.status_code == 200
    body = response.json()
    assert body["saved"] is False
    assert body["prompt_id"] is None
    assert db.query(Prompt).count() == 0


def test_enhance_uses_the_declared_role(client, auth_headers):
    body = _enhance(client, auth_headers, prompt="story").json()

    assert body["saved"] is True
    assert "Include character development guidelines" in body["enhanced"]


def test_enhance_is_deterministic(client, auth_headers):
    first = _enhance(client, auth_headers).json()
    second = _enhance(client, auth_headers).json()
    assert first["enhanced"] == second["enhanced"]


def test_free_quota_blocks_then_resets_next_day(client, db, auth_headers):
    limit = get_daily_limit("free")
    for _ in range(limit):
        assert _enhance(client, auth_headers).status_code == 200

    blocked = _enhance(client, auth_headers)
    assert blocked.status_code == 402
    assert blocked.json()["limit"] == limit

    user = db.query(User).filter(User.email == "writer@example.com").first()
    assert user.prompts_used_today == limit
    user.last_prompt_date = user.last_prompt_date - timedelta(days=1)
    db.commit()

    assert _enhance(client, auth_headers).status_code == 200


def test_pro_has_no_quota(client, pro_headers):
    for _ in range(get_daily_limit("free") + 1):
        assert _enhance(client, pro_headers).status_code == 200


def test_blank_prompt_is_rejected_without_spending_quota(client, db, auth_headers):
    response = _enhance(client, auth_headers, prompt="   ")

    assert response.status_code == 400
    assert "errors" in response.json()

    user = db.query(User).filter(User.email == "writer@example.com").first()
    assert not user.prompts_used_today
    assert db.query(Prompt).count() == 0
    assert db.query(UsageEvent).count() == 0


def test_blank_generate_topic_is_rejected(client, auth_headers):
    response = client.post("/api/prompts/generate", json={"topic": " \n\t "}, headers=auth_headers)
    assert response.status_code == 400


def test_enhance_tracks_usage_event(client, db, auth_headers):
    prompt_id = _enhance(client, auth_headers).json()["prompt_id"]

    event = db.query(UsageEvent).first()
    assert event.prompt_id == prompt_id
    assert event.word_count_before == 6
    assert 0 <= event.enhancement_score <= 100


def test_history_and_delete(client, auth_headers):
    save = client.post(
        "/api/prompts/save",
        json={"original_prompt": "a", "enhanced_prompt": "b", "role": "writer"},
        headers=auth_headers,
    )
    assert save.status_code == 201
    saved_id = save.json()["prompt_id"]
    enhanced_id = _enhance(client, auth_headers).json()["prompt_id"]

    history = client.get("/api/prompts/history", headers=auth_headers).json()
    assert [item["id"] for item in history] == [enhanced_id, saved_id]

    assert client.delete(f"/api/prompts/{saved_id}", headers=auth_headers).status_code == 200

    history = client.get("/api/prompts/history", headers=auth_headers).json()
    assert [item["id"] for item in history] == [enhanced_id]
    assert client.get(f"/api/prompts/{saved_id}", headers=auth_headers).status_code == 404


def test_free_history_window(client, db, auth_headers):
    prompt_id = _enhance(client, auth_headers).json()["prompt_id"]

    prompt = db.query(Prompt).filter(Prompt.id == prompt_id).first()
    prompt.created_at = prompt.created_at - timedelta(days=30)
    db.commit()

    assert client.get("/api/prompts/history", headers=auth_headers).json() == []


def test_other_users_prompt_is_not_found(client, auth_headers, other_headers):
    prompt_id = _enhance(client, auth_headers).json()["prompt_id"]

    assert client.get(f"/api/prompts/{prompt_id}", headers=other_headers).status_code == 404
    assert client.delete(f"/api/prompts/{prompt_id}", headers=other_headers).status_code == 404


def test_generate_rules(client, auth_headers, pro_headers):
    payload = {"topic": "coffee marketing", "template_type": "social"}

    anonymous = client.post("/api/prompts/generate", json=payload)
    assert anonymous.status_code == 200
    assert anonymous.json()["is_enhanced"] is False

    assert client.post("/api/prompts/generate", json={**payload, "save": True}).status_code == 401

    free = client.post(
        "/api/prompts/generate", json={**payload, "use_enhanced_algorithm": True}, headers=auth_headers
    )
    assert free.status_code == 403

    pro = client.post(
        "/api/prompts/generate",
        json={**payload, "use_enhanced_algorithm": True, "save": True},
        headers=pro_headers,
    )
    assert pro.status_code == 200
    body = pro.json()
    assert body["is_enhanced"] is True
    assert body["saved"] is True
    assert "Advanced Optimization Guidelines:" in body["enhanced_prompt"]["enhanced"]
    assert len(body["additional_suggestions"]) == 3


def test_engine_status_and_quality(client):
    status = client.get("/api/prompts/engine-status").json()
    assert "blog" in status["template_types"]

    quality = client.post("/api/prompts/analyze-quality", json={"prompt": "make something nice"})
    assert quality.status_code == 200
    assert 0 <= quality.json()["score"] <= 100


def test_block_builder_flow(client):
    assert "goal" in client.get("/api/prompts/block-templates").json()

    structure = client.post("/api/prompts/create-structure", json={}).json()
    tone = next(block for block in structure["blocks"] if block["type"] == "tone")

    updated = client.post(
        "/api/prompts/update-block",
        json={"structure": structure, "block_id": tone["id"], "content": "Playful"},
    ).json()
    assert "Tone:\nPlayful" in updated["combined_prompt"]

    added = client.post(
        "/api/prompts/add-block", json={"structure": updated, "block_type": "examples"}
    ).json()
    assert added["blocks"][-1]["type"] == "examples"

    removed = client.post(
        "/api/prompts/remove-block", json={"structure": added, "block_id": tone["id"]}
    ).json()
    assert all(block["id"] != tone["id"] for block in removed["blocks"])

    invalid = client.post("/api/prompts/add-block", json={"structure": added, "block_type": "nope"})
    assert invalid.status_code == 400

    extracted = client.post("/api/prompts/extract-blocks", json={"prompt": "Goal: ship it"}).json()
    assert extracted["combined_prompt"] == "Goal: ship it"
