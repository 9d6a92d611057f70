from typing import Dict, List, Optional
from sqlalchemy.orm import Session
from database_models import UsageEvent
from analytics.engine import clear_analytics_cache
from prompts.engine import count_words
from prompts.quality import analyze_prompt_quality
from core.logger import logger


EVENT_FIELDS = (
    "timestamp", "user_id", "role", "prompt_id", "template_id", "prompt_type",
    "category", "tags", "enhancement_score", "word_count_before", "word_count_after",
    "session_duration",
)


def event_to_dict(event : UsageEvent) -> Dict:
    return {field: getattr(event, field) for field in EVENT_FIELDS}


def load_events(db : Session , user_id : Optional[int] = None) -> List[Dict]:
    query = db.query(UsageEvent)
    if user_id is not None:
        query = query.filter(UsageEvent.user_id == user_id)
    return [event_to_dict(event) for event in query.order_by(UsageEvent.timestamp , UsageEvent.id).all()]


def record_usage_event(db : Session , user_id : int , role : str , **fields) -> UsageEvent:
    # caller commits, cached aggregates are stale from here on
    event = UsageEvent(user_id=user_id , role=role , **fields)
    db.add(event)
    clear_analytics_cache()
    return event


def record_enhancement(
    db : Session ,
    user_id : int ,
    role : str ,
    original : str ,
    enhanced : str ,
    **fields
) -> UsageEvent:
    score = analyze_prompt_quality(enhanced)["score"]
    logger.info(f"Usage event recorded user_id={user_id} score={score}")
    return record_usage_event(
        db,
        user_id,
        role,
        enhancement_score=score,
        word_count_before=count_words(original),
        word_count_after=count_words(enhanced),
        **fields
    )
