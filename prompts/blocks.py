"""Split prompts into typed, editable blocks and recombine them."""
import re
import uuid
from typing import Dict, List, Optional

BLOCK_TYPES = ("context", "goal", "tone", "audience", "constraints", "format", "examples", "custom")

BLOCK_TEMPLATES: Dict[str, Dict] = {
    "context": {
        "type": "context",
        "label": "Context",
        "description": "Background information and context for the prompt",
        "placeholder": "Provide background information about the project, situation, or problem...",
        "required": True,
        "default_content": "I am working on a project that requires...",
    },
    "goal": {
        "type": "goal",
        "label": "Goal",
        "description": "The main objective or purpose of the prompt",
        "placeholder": "Describe what you want to achieve with this prompt...",
        "required": True,
        "default_content": "The goal is to create...",
    },
    "tone": {
        "type": "tone",
        "label": "Tone",
        "description": "The tone and style of the response",
        "placeholder": "Specify the desired tone (professional, casual, technical, etc.)...",
        "required": False,
        "default_content": "Use a professional tone with...",
    },
    "audience": {
        "type": "audience",
        "label": "Audience",
        "description": "The target audience for the content",
        "placeholder": "Describe who the content is for...",
        "required": False,
        "default_content": "The target audience consists of...",
    },
    "constraints": {
        "type": "constraints",
        "label": "Constraints",
        "description": "Limitations, requirements, or boundaries",
        "placeholder": "List any constraints or limitations...",
        "required": False,
        "default_content": "Must adhere to the following constraints...",
    },
    "format": {
        "type": "format",
        "label": "Format",
        "description": "The desired format or structure of the output",
        "placeholder": "Specify the format (bullet points, paragraphs, table, etc.)...",
        "required": False,
        "default_content": "Format the output as...",
    },
    "examples": {
        "type": "examples",
        "label": "Examples",
        "description": "Examples or references to clarify expectations",
        "placeholder": "Provide examples or references...",
        "required": False,
        "default_content": "For reference, here are some examples...",
    },
    "custom": {
        "type": "custom",
        "label": "Custom",
        "description": "Custom section for additional information",
        "placeholder": "Add any additional information...",
        "required": False,
        "default_content": "",
    },
}

DEFAULT_STRUCTURE = ("context", "goal", "audience", "tone", "format", "constraints")

_BODY = r"(?:\s*:|)\s*([^\n]+(?:\n(?!\n)[^\n]+)*)"

# optional block types, in the order they are looked for
_OPTIONAL_BLOCK_PATTERNS = [
    ("tone", re.compile(r"(?:tone|style|voice)" + _BODY, re.IGNORECASE)),
    ("audience", re.compile(r"(?:audience|reader|user|customer|demographic)" + _BODY, re.IGNORECASE)),
    ("constraints", re.compile(r"(?:constraint|limitation|restriction|requirement|avoid)" + _BODY, re.IGNORECASE)),
    ("format", re.compile(r"(?:format|structure|layout|organize)" + _BODY, re.IGNORECASE)),
    ("examples", re.compile(r"(?:example|reference|sample|instance)" + _BODY, re.IGNORECASE)),
]
_CONTEXT_PATTERN = re.compile(r"(?:context|background|situation)" + _BODY, re.IGNORECASE)
_GOAL_PATTERN = re.compile(r"(?:goal|objective|purpose|aim)" + _BODY, re.IGNORECASE)


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


def get_block_templates() -> Dict[str, Dict]:
    return {key: dict(value) for key, value in BLOCK_TEMPLATES.items()}


def create_block(block_type: str, order: int = 0, content: Optional[str] = None) -> Dict:
    if block_type not in BLOCK_TEMPLATES:
        raise ValueError(f"Invalid block type: {block_type}")
    template = BLOCK_TEMPLATES[block_type]
    return {
        "id": _new_id(),
        "type": block_type,
        "content": content or template["default_content"],
        "order": order,
        "required": template["required"],
        "description": template["description"],
    }


def combine_blocks(blocks: List[Dict]) -> str:
    ordered = sorted(blocks, key=lambda block: block["order"])
    return "\n\n".join(
        f"{BLOCK_TEMPLATES[block['type']]['label']}:\n{block['content']}"
        for block in ordered
        if block["content"].strip()
    )


def _structure(blocks: List[Dict]) -> Dict:
    return {"blocks": blocks, "combined_prompt": combine_blocks(blocks)}


def extract_blocks_from_prompt(prompt: str) -> List[Dict]:
    blocks = []
    order = 0

    context_match = _CONTEXT_PATTERN.search(prompt)
    if context_match:
        blocks.append(create_block("context", order, context_match.group(1).strip()))
    else:
        blocks.append(create_block("context", order))
    order += 1

    goal_match = _GOAL_PATTERN.search(prompt)
    if goal_match:
        blocks.append(create_block("goal", order, goal_match.group(1).strip()))
    else:
        first_paragraph = re.split(r"\n\s*\n", prompt)[0]
        already_context = context_match is not None and first_paragraph in (context_match.group(0), context_match.group(1))
        if first_paragraph and not already_context:
            blocks.append(create_block("goal", order, first_paragraph.strip()))
        else:
            blocks.append(create_block("goal", order))
    order += 1

    for block_type, pattern in _OPTIONAL_BLOCK_PATTERNS:
        match = pattern.search(prompt)
        if match:
            blocks.append(create_block(block_type, order, match.group(1).strip()))
            order += 1

    # little was recognised, keep the leftover text as a custom block
    if len(blocks) <= 2:
        existing = " ".join(block["content"] for block in blocks)
        remaining = prompt.replace(existing, "", 1).strip()
        if remaining:
            blocks.append(create_block("custom", order, remaining))

    return blocks


def create_default_structure() -> Dict:
    return _structure([create_block(block_type, order) for order, block_type in enumerate(DEFAULT_STRUCTURE)])


def structure_from_prompt(prompt: str) -> Dict:
    return {"blocks": extract_blocks_from_prompt(prompt), "combined_prompt": prompt}


def update_block(blocks: List[Dict], block_id: str, content: str) -> Dict:
    updated = [dict(block, content=content) if block["id"] == block_id else block for block in blocks]
    return _structure(updated)


def add_block(blocks: List[Dict], block_type: str) -> Dict:
    max_order = max((block["order"] for block in blocks), default=-1)
    return _structure(list(blocks) + [create_block(block_type, max_order + 1)])


def remove_block(blocks: List[Dict], block_id: str) -> Dict:
    target = next((block for block in blocks if block["id"] == block_id), None)
    if target is not None and target["required"]:
        return _structure(list(blocks))
    return _structure([block for block in blocks if block["id"] != block_id])


def reorder_blocks(blocks: List[Dict], block_id: str, new_order: int) -> Dict:
    target = next((block for block in blocks if block["id"] == block_id), None)
    if target is None:
        return _structure(list(blocks))

    old_order = target["order"]
    updated = []
    for block in blocks:
        if block["id"] == block_id:
            updated.append(dict(block, order=new_order))
        elif old_order < new_order and old_order < block["order"] <= new_order:
            updated.append(dict(block, order=block["order"] - 1))
        elif old_order > new_order and new_order <= block["order"] < old_order:
            updated.append(dict(block, order=block["order"] + 1))
        else:
            updated.append(block)
    return _structure(updated)
