from fastapi import APIRouter , Depends , HTTPException , status , Query
from sqlalchemy.orm import Session
from datetime import date , timezone
from typing import Literal, Optional
from database import get_db
from database_models import utcnow
from auth.models import User
from auth.utils import get_current_user
from analytics.schemas import TrackEventRequest , TrackEventResponse
from analytics.tracking import load_events , record_usage_event
from analytics import engine
from prompts.engine import DEFAULT_ROLE
from core.logger import logger


router = APIRouter(prefix="/analytics" , tags=["Analytics"])

DateRange = Literal["today", "yesterday", "last7days", "last30days", "thisMonth", "lastMonth", "thisYear", "custom"]


class RangeParams:
    def __init__(
        self,
        range : DateRange = Query(engine.DEFAULT_RANGE),
        start_date : Optional[date] = None,
        end_date : Optional[date] = None,
    ):
        if range == "custom" and (start_date is None or end_date is None):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Custom date range requires start_date and end_date"
            )
        if start_date and end_date and start_date > end_date:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="start_date must not be after end_date"
            )
        self.range = range
        self.start_date = start_date
        self.end_date = end_date

    def kwargs(self) -> dict:
        return {"start_date": self.start_date , "end_date": self.end_date}

    def key(self) -> str:
        return f"{self.range}:{self.start_date}:{self.end_date}:{utcnow().date()}"


def _cached(name : str , user_id : int , params : RangeParams , db : Session , compute):
    key = f"{name}:{user_id}:{params.key()}"
    return engine.get_cached_analytics(key , lambda: compute(load_events(db , user_id)))


@router.post("/track" , response_model=TrackEventResponse , status_code=status.HTTP_201_CREATED)
def track_usage(
    data : TrackEventRequest,
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    fields = data.model_dump(exclude={"role" , "timestamp"})
    if data.timestamp is not None:
        # stored naive UTC like every other timestamp
        stamp = data.timestamp
        if stamp.tzinfo is not None:
            stamp = stamp.astimezone(timezone.utc).replace(tzinfo=None)
        fields["timestamp"] = stamp

    event = record_usage_event(
        db,
        current_user.id,
        data.role or current_user.role or DEFAULT_ROLE,
        **fields
    )
    db.commit()
    db.refresh(event)

    logger.info(f"Usage event tracked event_id={event.id} user_id={current_user.id}")
    return {"id": event.id}


@router.get("/heatmap")
def heatmap(
    params : RangeParams = Depends(),
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return _cached("heatmap" , current_user.id , params , db , lambda events:
        engine.generate_role_prompt_heatmap(events , params.range , **params.kwargs()))


@router.get("/trends")
def trends(
    group_by : Literal["day", "week", "month"] = "day",
    params : RangeParams = Depends(),
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return _cached(f"trends:{group_by}" , current_user.id , params , db , lambda events:
        engine.generate_usage_trends(events , params.range , group_by , **params.kwargs()))


@router.get("/breakdown")
def breakdown(
    breakdown_by : Literal["role", "prompt_type", "category", "tags"] = "role",
    params : RangeParams = Depends(),
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return _cached(f"breakdown:{breakdown_by}" , current_user.id , params , db , lambda events:
        engine.generate_usage_breakdown(events , breakdown_by , params.range , **params.kwargs()))


@router.get("/wordstats")
def word_stats(
    params : RangeParams = Depends(),
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return _cached("wordstats" , current_user.id , params , db , lambda events:
        engine.generate_word_count_stats(events , params.range , **params.kwargs()))


@router.get("/user/{user_id}")
def user_insights(
    user_id : int,
    params : RangeParams = Depends(),
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    user = db.query(User).filter(User.id == user_id).first()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    if user.id != current_user.id:
        logger.warning(f"Insights for user_id={user_id} refused to user_id={current_user.id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed to view another user's insights"
        )

    return _cached("insights" , user_id , params , db , lambda events:
        engine.generate_user_insights(events , user_id , params.range , **params.kwargs()))
