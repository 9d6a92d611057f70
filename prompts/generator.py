"""Topic-driven prompt generation built on the rule-based enhancer."""
from typing import Dict, List, Optional

from prompts.engine import build_result, enhance_prompt, normalize_role

DEFAULT_TEMPLATE_TYPE = "blog"
DEFAULT_TONE = "professional"

PROMPT_TEMPLATES: Dict[str, str] = {
    "blog": (
        "Create a well-structured blog post outline about {topic}. Include an engaging "
        "introduction, at least 3-5 main sections with supporting points, and a compelling conclusion."
    ),
    "technical": (
        "Create a technical documentation template for {topic} that includes purpose, architecture "
        "overview, installation instructions, API documentation, troubleshooting section, and usage examples."
    ),
    "creative": (
        "Generate a creative writing prompt about {topic} that includes character details, setting "
        "description, plot elements, and thematic considerations."
    ),
    "marketing": (
        "Create a marketing campaign concept for {topic} that includes target audience, key messaging, "
        "channels/platforms, call-to-action, and metrics for measuring success."
    ),
    "email": (
        "Write an email template for {topic}. Include a compelling subject line, personalized greeting, "
        "clear and concise body that addresses the recipient's needs, and appropriate call-to-action."
    ),
    "social": (
        "Create social media content ideas for {topic} across multiple platforms (Instagram, Twitter, "
        "LinkedIn, TikTok). Include post types, hashtag strategies, and engagement prompts."
    ),
    "presentation": (
        "Design a presentation outline for {topic} with an attention-grabbing intro, key points organized "
        "in logical sections, visual element suggestions, and a memorable conclusion."
    ),
    "product": (
        "Develop a product description for {topic} that highlights unique selling points, technical "
        "specifications, benefits, use cases, and differentiators from competitors."
    ),
}

ROLE_TEMPLATE_ENHANCEMENTS: Dict[str, Dict[str, str]] = {
    "writer": {
        "blog": "Focus on narrative flow, engaging storytelling techniques, and a consistent voice.",
        "technical": "Emphasize clarity, accuracy, and comprehensive explanations with minimal jargon.",
        "creative": "Explore literary devices, character development, and emotional resonance.",
        "email": "Craft conversational yet professional tone with precise language and emotional intelligence.",
    },
    "developer": {
        "blog": "Include code snippets, technical specifications, and implementation considerations.",
        "technical": "Add API reference documentation, system requirements, and performance optimization tips.",
        "product": "Detail technical stack, integration capabilities, and developer-focused features.",
        "presentation": "Structure content with technical depth while maintaining accessibility for mixed audiences.",
    },
    "designer": {
        "blog": "Consider visual hierarchy, typography recommendations, and image placement.",
        "creative": "Address visual elements, spatial relationships, and aesthetic considerations.",
        "social": "Focus on visual consistency, brand identity, and design trends appropriate for each platform.",
        "presentation": "Emphasize visual storytelling elements, slide design principles, and visual communication best practices.",
    },
    "marketer": {
        "blog": "Incorporate SEO considerations, conversion opportunities, and audience engagement strategies.",
        "email": "Optimize for open rates, click-through rates, and conversion metrics.",
        "social": "Align with campaign objectives, target audience insights, and performance metrics.",
        "product": "Highlight marketable features, competitive advantages, and compelling value propositions.",
    },
}

INDUSTRY_ENHANCEMENTS: Dict[str, str] = {
    "technology": "Include technical specifications, compatibility details, and integration capabilities.",
    "healthcare": "Address compliance requirements, patient benefits, and clinical considerations.",
    "education": "Focus on learning outcomes, engagement strategies, and assessment methods.",
    "finance": "Include risk considerations, compliance requirements, and financial implications.",
    "ecommerce": "Emphasize conversion elements, customer journey touchpoints, and purchase incentives.",
    "entertainment": "Focus on audience engagement, emotional impact, and immersive experiences.",
    "nonprofit": "Highlight mission alignment, impact metrics, and donor/volunteer engagement strategies.",
}

TONE_ENHANCEMENTS: Dict[str, List[str]] = {
    "professional": [
        "Maintain a consistent formal tone throughout the content.",
        "Use industry-standard terminology and avoid colloquialisms.",
        "Structure information in a logical, hierarchical manner.",
        "Emphasize data-driven insights and verifiable claims.",
    ],
    "conversational": [
        "Use a friendly, approachable tone that feels like a conversation.",
        "Incorporate occasional questions to engage the reader.",
        "Balance informal language with clear, valuable information.",
        "Use shorter sentences and simpler vocabulary while maintaining sophistication.",
    ],
    "persuasive": [
        "Use compelling evidence and social proof to support key points.",
        "Address potential objections proactively.",
        "Incorporate persuasive language patterns and rhetorical devices.",
        "Create a clear, logical progression toward the desired action.",
    ],
    "instructional": [
        "Use clear, step-by-step directions with numbered sequences.",
        "Anticipate common questions and provide preemptive answers.",
        "Use visual language to create clear mental models.",
        "Include specific examples for abstract concepts.",
    ],
    "inspirational": [
        "Use emotionally resonant language that evokes positive feelings.",
        "Incorporate storytelling elements to illustrate key points.",
        "Balance aspiration with actionable, practical guidance.",
        "Use sensory language to create vivid mental imagery.",
    ],
}

TOPIC_EXPANSIONS: Dict[str, List[str]] = {
    "marketing": [
        "content marketing", "email campaigns", "social media strategy",
        "brand positioning", "customer acquisition", "retention strategies",
    ],
    "technology": [
        "software development", "cloud infrastructure", "data analytics",
        "cybersecurity", "artificial intelligence", "user experience",
    ],
    "business": [
        "strategic planning", "operational efficiency", "team management",
        "financial forecasting", "business model innovation", "market research",
    ],
    "design": [
        "user interface", "visual communication", "brand identity",
        "information architecture", "accessibility", "responsive design",
    ],
    "writing": [
        "content creation", "storytelling", "editorial planning",
        "SEO optimization", "grammar and style", "audience engagement",
    ],
    "productivity": [
        "time management", "workflow optimization", "goal setting",
        "task prioritization", "focus techniques", "habit formation",
    ],
}

# expansion category used for suggestions when neither topic nor template type names one
ROLE_EXPANSION_FALLBACK = {
    "writer": "writing",
    "designer": "design",
    "developer": "technology",
    "marketer": "marketing",
}

QUALITY_CONTROL_LINES = [
    "Ensure all content is accurate, clear, and well-structured",
    "Verify that the content meets the specific requirements of the request",
    "Check that the tone is consistent throughout",
    "Review for completeness and comprehensiveness",
]

ADVANCED_ROLE_GUIDELINES: Dict[str, List[str]] = {
    "writer": [
        "Implement narrative structures that create emotional resonance",
        "Use sensory language to create immersive experiences",
        "Apply rhetorical techniques like anaphora or chiasmus for emphasis",
    ],
    "developer": [
        "Include efficiency considerations and computational complexity",
        "Address edge cases and error handling scenarios",
        "Add maintenance and scalability considerations",
    ],
    "designer": [
        "Consider accessibility requirements (WCAG guidelines)",
        "Include responsive design considerations for different devices",
        "Address visual hierarchy and information architecture",
    ],
    "marketer": [
        "Incorporate psychological triggers and persuasion principles",
        "Add customer journey mapping and touchpoint optimization",
        "Include competitor differentiation strategies",
    ],
}

ADVANCED_QUALITY_LINES = [
    "Optimize for clarity, precision, and impact",
    "Ensure comprehensive coverage of all relevant aspects",
    "Incorporate evidence-based best practices",
]


def engine_status() -> Dict:
    return {
        "enhanced_algorithm_available": True,
        "template_types": list(PROMPT_TEMPLATES),
        "tones": list(TONE_ENHANCEMENTS),
        "industries": list(INDUSTRY_ENHANCEMENTS),
    }


def _expansion_category(topic: str, template_type: str) -> Optional[str]:
    lowered = topic.lower()
    for key in TOPIC_EXPANSIONS:
        if key in lowered or key in template_type:
            return key
    return None


def generate_prompt_from_template(
    template_type: str,
    topic: str,
    role: str = "writer",
    tone: str = DEFAULT_TONE,
    industry: Optional[str] = None,
) -> str:
    if template_type not in PROMPT_TEMPLATES:
        template_type = DEFAULT_TEMPLATE_TYPE
    role = normalize_role(role)

    text = PROMPT_TEMPLATES[template_type].replace("{topic}", topic)

    tone_lines = TONE_ENHANCEMENTS.get(tone or "", TONE_ENHANCEMENTS[DEFAULT_TONE])
    text += "\n\nTone and Style Guidelines:\n" + "\n".join(f"- {line}" for line in tone_lines)

    role_line = ROLE_TEMPLATE_ENHANCEMENTS[role].get(template_type)
    if role_line:
        text += f"\n\nRole-Specific Requirements ({role}):\n- {role_line}"

    if industry and industry in INDUSTRY_ENHANCEMENTS:
        text += f"\n\nIndustry Considerations ({industry}):\n- {INDUSTRY_ENHANCEMENTS[industry]}"

    category = _expansion_category(topic, template_type)
    if category:
        text += "\n\nConsider including these related aspects:\n" + "\n".join(
            f"- {aspect}" for aspect in TOPIC_EXPANSIONS[category][:3]
        )

    text += "\n\nQuality Control:\n" + "\n".join(f"- {line}" for line in QUALITY_CONTROL_LINES)
    return text


def advanced_enhancement(prompt: str, role: str) -> Dict:
    """Basic enhancement plus the pro-only optimization sections."""
    role = normalize_role(role)
    enhanced = enhance_prompt(prompt, role)["enhanced"]

    enhanced += "\n\nAdvanced Optimization Guidelines:\n"
    enhanced += "".join(f"- {line}\n" for line in ADVANCED_ROLE_GUIDELINES[role])
    enhanced += "\nQuality Enhancement Requirements:\n"
    enhanced += "".join(f"- {line}\n" for line in ADVANCED_QUALITY_LINES)

    return build_result(prompt, enhanced)


def related_topic_suggestions(topic: str, template_type: str, role: str = "writer") -> List[str]:
    category = _expansion_category(topic, template_type) or ROLE_EXPANSION_FALLBACK[normalize_role(role)]
    return [f"{topic} with focus on {aspect}" for aspect in TOPIC_EXPANSIONS[category][:3]]


def generate_prompt(
    topic: str,
    template_type: Optional[str] = None,
    role: str = "writer",
    tone: Optional[str] = None,
    industry: Optional[str] = None,
    use_enhanced_algorithm: bool = False,
) -> Dict:
    template_type = template_type if template_type in PROMPT_TEMPLATES else DEFAULT_TEMPLATE_TYPE
    base = generate_prompt_from_template(template_type, topic, role, tone or DEFAULT_TONE, industry)

    if use_enhanced_algorithm:
        enhanced = advanced_enhancement(base, role)
    else:
        enhanced = enhance_prompt(base, role)

    return {
        "prompt": base,
        "enhanced_prompt": enhanced,
        "is_enhanced": use_enhanced_algorithm,
        "additional_suggestions": related_topic_suggestions(topic, template_type, role),
    }
