from pydantic import BaseModel , Field
from datetime import datetime
from typing import List, Optional
from prompts.engine import UserRole


class TrackEventRequest(BaseModel):
    role : Optional[UserRole] = None
    prompt_id : Optional[int] = None
    template_id : Optional[int] = None
    prompt_type : Optional[str] = None
    category : Optional[str] = None
    tags : List[str] = []
    enhancement_score : Optional[float] = Field(default=None , ge=0 , le=100)
    word_count_before : Optional[int] = Field(default=None , ge=0)
    word_count_after : Optional[int] = Field(default=None , ge=0)
    session_duration : Optional[int] = Field(default=None , ge=0)
    timestamp : Optional[datetime] = None


class TrackEventResponse(BaseModel):
    id : int
    message : str = "Usage tracked"
