import re
from datetime import datetime

from prompt_templates.manager import (
    apply_template,
    compare_template_versions,
    create_template,
    create_template_version,
    extract_variables,
    get_popular_templates,
    get_recent_templates,
    get_recommended_templates,
    group_templates_by_category,
    search_templates,
    validate_template,
    version_chain,
)

CONTENT = "Write a {{tone}} post about {{topic}} for {{ audience }}. Keep the {{tone}} voice."


def _stored(template_id, **overrides):
    template = create_template("Post", CONTENT, user_id=1, role="writer", category="blog", tags=["social"])
    template.update(id=template_id, created_at=datetime(2024, 1, 1), updated_at=datetime(2024, 1, template_id))
    template.update(overrides)
    return template


def test_extract_variables_dedupes_and_trims():
    names = [variable["name"] for variable in extract_variables(CONTENT)]
    assert names == ["tone", "topic", "audience"]
    assert all(variable["required"] for variable in extract_variables(CONTENT))


def test_apply_with_all_values_leaves_no_placeholders():
    result = apply_template(_stored(1), {"tone": "playful", "topic": "tea", "audience": "students"})

    assert not re.search(r"\{\{.*?\}\}", result["prompt"])
    assert result["prompt"] == "Write a playful post about tea for students. Keep the playful voice."
    assert result["missing_variables"] == []
    assert result["unknown_variables"] == []


def test_apply_reports_missing_and_unknown():
    template = _stored(1)
    template["variables"][1]["default_value"] = "coffee"

    result = apply_template(template, {"tone": "calm", "colour": "blue"})

    assert "coffee" in result["prompt"]
    assert result["missing_variables"] == ["audience"]
    assert result["unknown_variables"] == ["colour"]


def test_new_version_links_to_previous():
    original = _stored(7, usage_count=12)
    version = create_template_version(original, {"content": "Summarise {{topic}}", "name": ""})

    assert version["version"] == 2
    assert version["previous_version_id"] == 7
    assert version["usage_count"] == 0
    assert version["name"] == "Post"
    assert [v["name"] for v in version["variables"]] == ["topic"]


def test_new_version_keeps_variables_when_content_unchanged():
    original = _stored(7)
    original["variables"][0]["default_value"] = "formal"

    version = create_template_version(original, {"is_public": True})

    assert version["is_public"] is True
    assert version["variables"][0]["default_value"] == "formal"


def test_compare_versions():
    first = _stored(1)
    second = _stored(2, name="Post v2", content="Write about {{topic}} for {{region}}.")
    second["variables"] = extract_variables(second["content"])

    diff = compare_template_versions(first, second)

    assert diff["name_changed"] is True
    assert diff["description_changed"] is False
    assert diff["content_diff"]["added"] == ["Write about {{topic}} for {{region}}."]
    assert diff["content_diff"]["removed"] == [CONTENT]
    assert [v["name"] for v in diff["variables_added"]] == ["region"]
    assert [v["name"] for v in diff["variables_removed"]] == ["tone", "audience"]


def test_validate_template():
    ok = validate_template(CONTENT)
    assert ok["is_valid"] is True

    result = validate_template(
        "Hello {{name}}",
        [{"name": "greeting"}, {"name": "greeting"}, {"name": " "}],
    )
    assert result["is_valid"] is False
    assert "Variable {{name}} is used in the template but not defined" in result["errors"]
    assert "Duplicate variable name: greeting" in result["errors"]
    assert "Empty variable names are not allowed" in result["errors"]
    assert "Variable 'greeting' is defined but not used in the template" in result["warnings"]


def test_group_and_search():
    templates = [_stored(1), _stored(2, category="", name="Launch email", tags=["email"])]

    grouped = group_templates_by_category(templates)
    assert set(grouped) == {"blog", "Uncategorized"}

    assert [t["id"] for t in search_templates(templates, "launch")] == [2]
    assert [t["id"] for t in search_templates(templates, "audience")] == [1, 2]
    assert len(search_templates(templates, "   ")) == 2


def test_popular_recent_recommended():
    templates = [
        _stored(1, usage_count=3, role="writer"),
        _stored(2, usage_count=9, role="designer"),
        _stored(3, usage_count=5, role="writer"),
    ]

    assert [t["id"] for t in get_popular_templates(templates, 2)] == [2, 3]
    assert [t["id"] for t in get_recent_templates(templates, 1)] == [3]
    assert [t["id"] for t in get_recommended_templates(templates, "writer", used_template_ids=[3])] == [1, 2]


def test_version_chain_walks_both_directions():
    v1 = _stored(1)
    v2 = _stored(2, version=2, previous_version_id=1)
    v3 = _stored(3, version=3, previous_version_id=2)
    unrelated = _stored(4)

    chain = version_chain(v2, [v1, v2, v3, unrelated])
    assert [t["id"] for t in chain] == [3, 2, 1]
