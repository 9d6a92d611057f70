"""
Prompt quality analysis.

A prompt is scored 0-100 from a fixed set of regular expressions grouped by
aspect (clarity, specificity, context, structure, completeness). The same
patterns, plus an unweighted tone group, produce the list of issues, each
with a suggestion, and the list of strengths shown next to the score.
"""
import math
import re
from typing import Dict, List, Pattern

_I = re.IGNORECASE
_IM = re.IGNORECASE | re.MULTILINE

QUALITY_PATTERNS: Dict[str, Dict[str, List[Pattern]]] = {
    "clarity": {
        "vague": [
            re.compile(r"\b(something|somehow|thing|stuff|etc\.?)\b", _I),
            re.compile(r"\b(good|nice|great|better|best|awesome|amazing)\b(?! practice)", _I),
            re.compile(r"\b(many|multiple|various|several|few|some)\b(?! of)", _I),
        ],
        "ambiguous": [
            re.compile(r"\b(it|they|them|those|these|this|that)\b(?! is| are| were| was)", _I),
            re.compile(r"\b(he|she|his|her|their|its)\b(?! is| are| were| was)", _I),
        ],
    },
    "specificity": {
        "lacking": [
            re.compile(r"(?<!\d)\b(large|small|big|tiny|huge|enormous)\b", _I),
            re.compile(r"\b(quickly|slowly|fast|rapid|soon|recent)\b", _I),
            re.compile(r"\b(often|sometimes|frequently|occasionally|rarely)\b", _I),
        ],
        "measures": [
            re.compile(r"\d+\s*(%|percent|px|em|rem|seconds|minutes|hours|days|weeks|months|years)", _I),
            re.compile(r"\$\d+|[₿£€¥]\d+|\d+\s+(dollars|euros|pounds|yen)", _I),
            re.compile(r"\b\d+\s*(kb|mb|gb|tb)\b", _I),
        ],
    },
    "context": {
        "missing": [
            re.compile(r"^(?!.*?\b(for|to use in|context|background|situation|scenario|setting|environment)\b).{0,50}$", _I),
        ],
        "defined": [
            re.compile(r"\b(for|to use in)\s[^.]{5,50}(?=\.|$)", _I),
            re.compile(r"\b(context|background|situation|scenario)\s*:\s*[^.]{5,100}(?=\.|$)", _I),
        ],
    },
    "structure": {
        "sections": [
            re.compile(r"\b(section|part|chapter|segment|module|component|phase|step)\s*\d+\b", _I),
            re.compile(r"\b(\d+)\.\s+\w+", re.MULTILINE),
            re.compile(r"\b(firstly|secondly|thirdly|finally|subsequently|moreover|furthermore)\b", _I),
        ],
        "formatting": [
            re.compile(r"-\s+\w+", re.MULTILINE),
            re.compile(r"\*\s+\w+", re.MULTILINE),
            re.compile(r"\d+\.\s+\w+", re.MULTILINE),
        ],
    },
    "completeness": {
        "goals": [
            re.compile(r"\b(goal|objective|aim|purpose|target|intention|outcome)\b", _I),
        ],
        "constraints": [
            re.compile(r"\b(constraint|limitation|restriction|boundary|requirement|must not|should not|avoid)\b", _I),
        ],
        "audience": [
            re.compile(r"\b(audience|reader|viewer|user|customer|client|target market|demographic)\b", _I),
        ],
    },
    # not weighted, only feeds issues and strengths
    "tone": {
        "formal": [
            re.compile(r"\b(please|kindly|respectfully|formally|professionally|accordingly)\b", _I),
            re.compile(r"\b(would like to|request that|appreciate if|grateful if)\b", _I),
        ],
        "informal": [
            re.compile(r"\b(hey|yo|sup|lol|omg|idk|imo|btw|fyi|wanna|gonna)\b", _I),
        ],
        "instructional": [
            re.compile(r"\b(must|should|need to|have to|required to|necessary to)\b", _I),
        ],
    },
}

# aspect weights for the overall score, they sum to 1
SCORE_WEIGHTS = {
    "clarity": 0.25,
    "specificity": 0.25,
    "context": 0.2,
    "structure": 0.15,
    "completeness": 0.15,
}

POINTS_PER_MATCH = 20


def _count(text: str, patterns: List[Pattern]) -> int:
    return sum(1 for pattern in patterns for _ in pattern.finditer(text))


def _any(text: str, patterns: List[Pattern]) -> bool:
    return any(pattern.search(text) for pattern in patterns)


def _word_count(text: str) -> int:
    return len(text.split())


def aspect_score(text: str, patterns: List[Pattern], positive: bool = True) -> int:
    matches = _count(text, patterns)
    if positive:
        return min(100, matches * POINTS_PER_MATCH)
    return max(0, 100 - matches * POINTS_PER_MATCH)


def aspect_scores(text: str) -> Dict[str, float]:
    p = QUALITY_PATTERNS
    clarity = aspect_score(text, p["clarity"]["vague"] + p["clarity"]["ambiguous"], positive=False)
    specificity = (
        aspect_score(text, p["specificity"]["lacking"], positive=False) * 0.4
        + aspect_score(text, p["specificity"]["measures"]) * 0.6
    )
    context = 80 if _any(text, p["context"]["defined"]) else 40
    structure = (
        aspect_score(text, p["structure"]["sections"]) * 0.5
        + aspect_score(text, p["structure"]["formatting"]) * 0.5
    )
    completeness = (
        (40 if _any(text, p["completeness"]["goals"]) else 0)
        + (30 if _any(text, p["completeness"]["constraints"]) else 0)
        + (30 if _any(text, p["completeness"]["audience"]) else 0)
    )
    return {
        "clarity": clarity,
        "specificity": specificity,
        "context": context,
        "structure": structure,
        "completeness": completeness,
    }


def overall_score(scores: Dict[str, float]) -> int:
    total = sum(scores[aspect] * weight for aspect, weight in SCORE_WEIGHTS.items())
    # half rounds up
    return int(math.floor(total + 0.5))


def _issue(kind: str, severity: str, explanation: str, suggestion: str) -> Dict:
    return {
        "type": kind,
        "severity": severity,
        "explanation": explanation,
        "suggestion": suggestion,
    }


def identify_issues(text: str) -> List[Dict]:
    p = QUALITY_PATTERNS
    issues = []
    word_count = _word_count(text)

    vague = _count(text, p["clarity"]["vague"])
    if vague > 0:
        issues.append(_issue(
            "clarity",
            "high" if vague > 3 else "medium",
            "Your prompt contains vague or imprecise language.",
            'Replace vague terms with specific, measurable descriptions. For example, use '
            '"increase conversion by 15%" instead of "make it better".',
        ))

    ambiguous = _count(text, p["clarity"]["ambiguous"])
    if ambiguous > 0:
        issues.append(_issue(
            "clarity",
            "high" if ambiguous > 3 else "medium",
            "Your prompt contains potentially ambiguous pronouns that could cause confusion.",
            'Replace pronouns like "it", "they" with the specific nouns they refer to.',
        ))

    lacking = _count(text, p["specificity"]["lacking"])
    measures = _count(text, p["specificity"]["measures"])
    if lacking > 2 and measures == 0:
        issues.append(_issue(
            "specificity",
            "medium",
            "Your prompt uses general descriptors without specific measurements or criteria.",
            "Add concrete numbers, percentages, dimensions, or time frames to clarify your expectations.",
        ))

    if _any(text, p["context"]["missing"]) and not _any(text, p["context"]["defined"]) and word_count < 50:
        issues.append(_issue(
            "context",
            "high",
            "Your prompt lacks context about the purpose or background of the request.",
            "Add information about why you need this, where it will be used, or what problem it solves.",
        ))

    sections = _count(text, p["structure"]["sections"])
    formatting = _count(text, p["structure"]["formatting"])
    if word_count > 50 and sections == 0 and formatting == 0:
        issues.append(_issue(
            "structure",
            "medium",
            "Your prompt is long but lacks clear structure or formatting.",
            "Break down your request into numbered sections, bullet points, or clear paragraphs with headings.",
        ))

    if not _any(text, p["completeness"]["goals"]) and word_count > 20:
        issues.append(_issue(
            "completeness",
            "medium",
            "Your prompt doesn't clearly state the goal or objective.",
            "Add a sentence about what you want to achieve or the purpose of this request.",
        ))

    if not _any(text, p["completeness"]["constraints"]) and word_count > 30:
        issues.append(_issue(
            "completeness",
            "low",
            "Your prompt doesn't mention any constraints or limitations.",
            "Consider adding boundaries like word count, format requirements, or things to avoid.",
        ))

    if _any(text, p["tone"]["informal"]) and not _any(text, p["tone"]["formal"]):
        issues.append(_issue(
            "tone",
            "low",
            "Your prompt uses slang or casual shorthand.",
            "Spell out abbreviations and state the tone you want the response to take.",
        ))

    if not _any(text, p["completeness"]["audience"]) and word_count > 40:
        issues.append(_issue(
            "completeness",
            "low",
            "Your prompt doesn't specify the target audience or reader.",
            "Mention who the content is for to help tailor the tone and complexity appropriately.",
        ))

    return issues


def identify_strengths(text: str) -> List[str]:
    p = QUALITY_PATTERNS
    strengths = []
    word_count = _word_count(text)

    if _count(text, p["structure"]["sections"]) or _count(text, p["structure"]["formatting"]):
        strengths.append("Good structure with clear sections or formatting")
    if _count(text, p["specificity"]["measures"]):
        strengths.append("Includes specific measurements or criteria")
    if _any(text, p["context"]["defined"]):
        strengths.append("Provides clear context or background information")
    if _any(text, p["completeness"]["goals"]):
        strengths.append("Clearly states the goal or objective")
    if _any(text, p["completeness"]["constraints"]):
        strengths.append("Includes constraints or boundaries")
    if _any(text, p["completeness"]["audience"]):
        strengths.append("Specifies the target audience")
    if _any(text, p["tone"]["formal"]):
        strengths.append("Uses a courteous, professional tone")
    if _any(text, p["tone"]["instructional"]):
        strengths.append("Gives direct instructions")

    if 10 < word_count < 20:
        strengths.append("Concise and focused")
    elif 20 <= word_count <= 100:
        strengths.append("Good level of detail without being excessive")
    elif word_count > 100:
        strengths.append("Comprehensive with substantial detail")

    return strengths


def overall_feedback(score: int, issue_count: int) -> str:
    if score >= 90:
        return "Excellent prompt! Very clear, specific, and well-structured."
    if score >= 75:
        return "Good prompt with clear intent. A few minor improvements could make it even better."
    if score >= 60:
        return ("Decent prompt that communicates the basic idea, but could benefit from more "
                "specificity and structure.")
    if score >= 40:
        return (f"Your prompt needs improvement in {issue_count} areas. Consider adding more "
                "context and specific details.")
    return ("This prompt requires significant revision. Consider addressing the issues listed "
            "and providing much more context and specificity.")


def analyze_prompt_quality(text: str) -> Dict:
    scores = aspect_scores(text)
    score = overall_score(scores)
    issues = identify_issues(text)
    return {
        "score": score,
        "aspects": scores,
        "issues": issues,
        "strengths": identify_strengths(text),
        "overall_feedback": overall_feedback(score, len(issues)),
    }
