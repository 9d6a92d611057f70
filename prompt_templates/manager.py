"""
Prompt template management.

Templates are plain dicts shaped like ``PromptTemplate`` rows. Content holds
``{{name}}`` placeholders; the variable list is derived from it on create and
whenever a new version changes the content.
"""
import re
from typing import Dict, Iterable, List, Optional

VARIABLE_PATTERN = re.compile(r"\{\{([^}]+)\}\}")

UNCATEGORIZED = "Uncategorized"
DEFAULT_LIST_LIMIT = 5

TEMPLATE_FIELDS = (
    "id", "user_id", "name", "description", "role", "category", "tags", "content",
    "variables", "usage_count", "is_public", "version", "previous_version_id",
    "created_at", "updated_at",
)

# fields a new version may override
VERSIONED_FIELDS = ("name", "description", "role", "category", "tags", "content", "is_public")


def template_to_dict(template) -> Dict:
    return {field: getattr(template, field) for field in TEMPLATE_FIELDS}


def extract_variables(content: str) -> List[Dict]:
    variables = []
    seen = set()
    for match in VARIABLE_PATTERN.finditer(content):
        name = match.group(1).strip()
        if name in seen:
            continue
        seen.add(name)
        variables.append({
            "name": name,
            "description": f"Value for {name}",
            "default_value": "",
            "required": True,
        })
    return variables


def create_template(
    name: str,
    content: str,
    user_id: int,
    role: str,
    description: str = "",
    category: str = "",
    tags: Optional[List[str]] = None,
    is_public: bool = False,
) -> Dict:
    return {
        "user_id": user_id,
        "name": name,
        "description": description,
        "role": role,
        "category": category,
        "tags": list(tags or []),
        "content": content,
        "variables": extract_variables(content),
        "usage_count": 0,
        "is_public": is_public,
        "version": 1,
        "previous_version_id": None,
    }


def create_template_version(existing: Dict, updates: Dict) -> Dict:
    """
    Build the next version of a template.

    Empty or missing updates keep the existing value. ``is_public`` is taken
    from the updates whenever it is present. Variables are re-derived only
    when the content actually changes, so edited defaults survive otherwise.
    """
    merged = {}
    for field in VERSIONED_FIELDS:
        value = updates.get(field)
        if field == "is_public":
            merged[field] = existing[field] if value is None else value
        else:
            merged[field] = value or existing[field]

    content_changed = merged["content"] != existing["content"]

    return {
        **merged,
        "user_id": existing["user_id"],
        "variables": extract_variables(merged["content"]) if content_changed else list(existing["variables"]),
        "usage_count": 0,
        "version": existing["version"] + 1,
        "previous_version_id": existing["id"],
        "created_at": existing.get("created_at"),
    }


def apply_template(template: Dict, values: Dict[str, str]) -> Dict:
    """Substitute values, falling back to defaults, and report mismatches."""
    result = template["content"]
    missing = []
    defined = set()

    for variable in template["variables"]:
        name = variable["name"]
        defined.add(name)
        value = values.get(name) or variable.get("default_value") or ""
        if not value and variable.get("required"):
            missing.append(name)
        result = re.sub(r"\{\{\s*" + re.escape(name) + r"\s*\}\}", lambda _: value, result)

    return {
        "prompt": result,
        "missing_variables": missing,
        "unknown_variables": [name for name in values if name not in defined],
    }


def compare_template_versions(first: Dict, second: Dict) -> Dict:
    lines_first = first["content"].split("\n")
    lines_second = second["content"].split("\n")
    names_first = {variable["name"] for variable in first["variables"]}
    names_second = {variable["name"] for variable in second["variables"]}

    return {
        "name_changed": first["name"] != second["name"],
        "description_changed": first["description"] != second["description"],
        "content_diff": {
            "added": [line for line in lines_second if line not in lines_first],
            "removed": [line for line in lines_first if line not in lines_second],
        },
        "variables_added": [v for v in second["variables"] if v["name"] not in names_first],
        "variables_removed": [v for v in first["variables"] if v["name"] not in names_second],
    }


def validate_template(content: str, variables: Optional[List[Dict]] = None) -> Dict:
    if variables is None:
        variables = extract_variables(content)

    errors = []
    warnings = []
    referenced = [variable["name"] for variable in extract_variables(content)]
    defined = [variable["name"] for variable in variables]

    for name in referenced:
        if name not in defined:
            errors.append(f"Variable {{{{{name}}}}} is used in the template but not defined")

    for name in defined:
        if name not in referenced:
            warnings.append(f"Variable '{name}' is defined but not used in the template")

    if any(not name.strip() for name in defined):
        errors.append("Empty variable names are not allowed")

    for index, name in enumerate(defined):
        if name in defined[:index]:
            errors.append(f"Duplicate variable name: {name}")

    return {
        "is_valid": not errors,
        "errors": errors,
        "warnings": warnings,
    }


def group_templates_by_category(templates: Iterable[Dict]) -> Dict[str, List[Dict]]:
    grouped: Dict[str, List[Dict]] = {}
    for template in templates:
        grouped.setdefault(template.get("category") or UNCATEGORIZED, []).append(template)
    return grouped


def search_templates(templates: List[Dict], query: str) -> List[Dict]:
    terms = query.lower().split()
    if not terms:
        return list(templates)

    def matches(template: Dict) -> bool:
        haystacks = [template["name"], template.get("description") or "", template["content"]]
        haystacks += template.get("tags") or []
        haystacks += [variable["name"] for variable in template["variables"]]
        return any(term in text.lower() for text in haystacks for term in terms)

    return [template for template in templates if matches(template)]


def _usage(template: Dict) -> int:
    return template["usage_count"] or 0


def get_popular_templates(templates: List[Dict], limit: int = DEFAULT_LIST_LIMIT) -> List[Dict]:
    return sorted(templates, key=_usage, reverse=True)[:limit]


def get_recent_templates(templates: List[Dict], limit: int = DEFAULT_LIST_LIMIT) -> List[Dict]:
    return sorted(templates, key=lambda t: t["updated_at"], reverse=True)[:limit]


def get_recommended_templates(
    templates: List[Dict],
    role: str,
    used_template_ids: Iterable[int] = (),
    limit: int = DEFAULT_LIST_LIMIT,
) -> List[Dict]:
    used = set(used_template_ids)
    unused = [template for template in templates if template["id"] not in used]

    same_role = sorted((t for t in unused if t["role"] == role), key=_usage, reverse=True)
    if len(same_role) >= limit:
        return same_role[:limit]

    others = sorted((t for t in unused if t["role"] != role), key=_usage, reverse=True)
    return same_role + others[:limit - len(same_role)]


def version_chain(start: Dict, templates: List[Dict]) -> List[Dict]:
    """Every version linked to ``start``, newest first."""
    by_id = {template["id"]: template for template in templates}
    chain = [start]

    current = start
    while current.get("previous_version_id") in by_id:
        current = by_id[current["previous_version_id"]]
        if current in chain:
            break
        chain.append(current)

    pending = [start["id"]]
    while pending:
        parent_id = pending.pop()
        for template in templates:
            if template.get("previous_version_id") == parent_id and template not in chain:
                chain.append(template)
                pending.append(template["id"])

    return sorted(chain, key=lambda t: t["version"], reverse=True)
