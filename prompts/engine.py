"""Rule-based prompt enhancement.

No external model is involved: an input prompt is bucketed by word count and
extended with fixed suggestion strings for the caller's role. The same role
and text always produce the same output.
"""
import re
from typing import Dict, List, Literal

UserRole = Literal["writer", "designer", "developer", "marketer"]
USER_ROLES = ("writer", "designer", "developer", "marketer")
DEFAULT_ROLE = "writer"

Specificity = Literal["low", "medium", "high"]

SHORT_PROMPT_WORDS = 5
MEDIUM_PROMPT_WORDS = 15

ENHANCEMENT_TEMPLATES: Dict[str, List[str]] = {
    "context": [
        "Provide context about the project/situation where this will be used",
        "Include background information on the topic",
        "Specify the intended audience for this content",
        "Clarify the purpose of this request",
    ],
    "structure": [
        "Break this down into numbered steps",
        "Organize this into sections with headings",
        "Use bullet points to list out key requirements",
        "Include both examples and counter-examples",
    ],
    "details": [
        "Include specific metrics or measurements",
        "Add technical specifications",
        "Describe visual elements in detail",
        "Mention required formats and dimensions",
    ],
    "style": [
        "Specify the desired tone (e.g., professional, casual, technical)",
        "Reference examples of preferred style",
        "Include any branding guidelines to follow",
        "Note any terminology preferences or restrictions",
    ],
    "delivery": [
        "Set expectations for the length/scope of the response",
        "Include formatting requirements",
        "Specify any constraints or limitations",
        "Request specific file formats or deliverables",
    ],
}

ROLE_ENHANCEMENTS: Dict[str, List[str]] = {
    "writer": [
        "Include character development guidelines",
        "Specify narrative style (first-person, third-person, etc.)",
        "Define the pacing and structure of the content",
        "Request specific literary devices or techniques",
    ],
    "developer": [
        "Specify programming language and environment",
        "Include performance requirements",
        "Define API specifications or interfaces",
        "Request code comments and documentation style",
    ],
    "designer": [
        "Specify color schemes and visual styling",
        "Include brand guidelines to follow",
        "Define target devices and screen sizes",
        "Request specific file formats and resolutions",
    ],
    "marketer": [
        "Define target audience demographics",
        "Specify call-to-action requirements",
        "Include brand voice guidelines",
        "Request SEO considerations and keywords",
    ],
}

# insertion order matters: detected topics are joined in this order
TOPIC_KEYWORDS: Dict[str, List[str]] = {
    "technology": ["code", "app", "website", "software", "tech", "program", "develop", "algorithm"],
    "business": ["brand", "market", "company", "startup", "product", "customer", "client", "strategy"],
    "creative": ["design", "story", "write", "art", "create", "content", "visual", "brand"],
    "education": ["learn", "teach", "course", "explain", "student", "concept", "understand"],
}

SHORT_PROMPT_SECTIONS = [
    "1. Clear context and background information",
    "2. Specific details and requirements",
    "3. Desired format and structure",
    "4. Style and tone guidelines",
    "5. Examples or references if applicable",
]

EMPTY_PROMPT_MESSAGE = "Please provide a prompt to enhance."

_SPECIFIC_TERMS = re.compile(r"specific|exactly|precise|detailed", re.IGNORECASE)
_MEASUREMENTS = re.compile(r"\d+\s*(px|em|rem|cm|mm|%|seconds|minutes)", re.IGNORECASE)


def normalize_role(role) -> str:
    value = str(role or "").strip().lower()
    return value if value in ROLE_ENHANCEMENTS else DEFAULT_ROLE


def count_words(text: str) -> int:
    return len(text.split())


def detect_topics(text: str) -> List[str]:
    lowered = text.lower()
    return [
        topic for topic, keywords in TOPIC_KEYWORDS.items()
        if any(keyword in lowered for keyword in keywords)
    ]


def calculate_specificity(text: str) -> str:
    """Label text low/medium/high from its length and measurement-like tokens."""
    word_count = count_words(text)
    has_specific_terms = bool(_SPECIFIC_TERMS.search(text))
    has_measurements = bool(_MEASUREMENTS.search(text))

    if (word_count > 15 and has_specific_terms) or has_measurements:
        return "high"
    if word_count > 8:
        return "medium"
    return "low"


def _bullets(lines: List[str]) -> str:
    return "\n".join(f"- {line}" for line in lines)


def build_result(original: str, enhanced: str, original_words: int = None) -> Dict:
    return {
        "original": original,
        "enhanced": enhanced,
        "word_count": {
            "original": count_words(original) if original_words is None else original_words,
            "enhanced": count_words(enhanced),
        },
        "specificity": calculate_specificity(enhanced),
    }


def enhance_prompt(original_prompt: str, role: str = DEFAULT_ROLE, add_sections: bool = True) -> Dict:
    """
    Expand a short prompt into a structured one.

    Args:
        original_prompt: Text supplied by the user
        role: One of USER_ROLES; anything else falls back to writer
        add_sections: Whether very short prompts get the numbered section list

    Returns:
        Dictionary with original, enhanced, word_count {original, enhanced}
        and specificity
    """
    role = normalize_role(role)
    trimmed = (original_prompt or "").strip()

    if not trimmed:
        return {
            "original": "",
            "enhanced": EMPTY_PROMPT_MESSAGE,
            "word_count": {"original": 0, "enhanced": count_words(EMPTY_PROMPT_MESSAGE)},
            "specificity": "low",
        }

    original_words = count_words(trimmed)
    role_lines = ROLE_ENHANCEMENTS[role]

    if original_words < SHORT_PROMPT_WORDS:
        topics = detect_topics(trimmed)
        topic_prefix = "/".join(topics) + " " if topics else ""
        enhanced = f"Provide a detailed and comprehensive {topic_prefix}{trimmed} that includes:\n\n"

        if add_sections:
            enhanced += "\n".join(SHORT_PROMPT_SECTIONS)

        enhanced += "\n\nAlso include:\n" + _bullets(role_lines[:2])

    elif original_words < MEDIUM_PROMPT_WORDS:
        suggestions = (
            ENHANCEMENT_TEMPLATES["context"][:1]
            + ENHANCEMENT_TEMPLATES["structure"][:1]
            + ENHANCEMENT_TEMPLATES["details"][:2]
            + role_lines[:2]
        )
        enhanced = f"{trimmed}\n\nPlease include:\n" + _bullets(suggestions)

    else:
        enhanced = f"{trimmed}\n\nAdditional requirements:\n" + _bullets(role_lines[:3])
        enhanced += (
            "\n\nEnsure the output is comprehensive, well-structured, and aligned "
            "with professional standards for this type of content."
        )

    return build_result(original_prompt, enhanced, original_words)
