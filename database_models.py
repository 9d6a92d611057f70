from datetime import datetime, timezone
from sqlalchemy.orm import declarative_base  # this is used to convert python classes into DB tables
from sqlalchemy import Column , Integer , Float , String , Text , Boolean , DateTime , ForeignKey , JSON



Base = declarative_base()


def utcnow() -> datetime:
    # naive UTC so values compare the same way on sqlite and postgres
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Prompt(Base):

    __tablename__ = "prompts"

    id = Column(Integer , primary_key=True , index=True)
    user_id = Column(Integer , ForeignKey("users.id", ondelete="CASCADE") , nullable=False , index=True)
    original_prompt = Column(Text , nullable=False)
    enhanced_prompt = Column(Text , nullable=False)
    role = Column(String , nullable=True)
    created_at = Column(DateTime , default=utcnow , nullable=False)


class PromptTemplate(Base):

    __tablename__ = "prompt_templates"

    id = Column(Integer , primary_key=True , index=True)
    user_id = Column(Integer , ForeignKey("users.id", ondelete="CASCADE") , nullable=False , index=True)
    name = Column(String , nullable=False)
    description = Column(Text , default="")
    role = Column(String , nullable=False)
    category = Column(String , default="")
    tags = Column(JSON , default=list)
    content = Column(Text , nullable=False)
    variables = Column(JSON , default=list)   # [{name, description, default_value, required}]
    usage_count = Column(Integer , default=0)
    is_public = Column(Boolean , default=False)
    version = Column(Integer , default=1 , nullable=False)
    previous_version_id = Column(Integer , ForeignKey("prompt_templates.id") , nullable=True)
    created_at = Column(DateTime , default=utcnow , nullable=False)
    updated_at = Column(DateTime , default=utcnow , nullable=False)


class UsageEvent(Base):

    __tablename__ = "usage_events"

    id = Column(Integer , primary_key=True , index=True)
    timestamp = Column(DateTime , default=utcnow , nullable=False , index=True)
    user_id = Column(Integer , ForeignKey("users.id", ondelete="CASCADE") , nullable=False , index=True)
    role = Column(String , nullable=False)
    prompt_id = Column(Integer , nullable=True)
    template_id = Column(Integer , nullable=True)
    prompt_type = Column(String , nullable=True)
    category = Column(String , nullable=True)
    tags = Column(JSON , default=list)
    enhancement_score = Column(Float , nullable=True)
    word_count_before = Column(Integer , nullable=True)
    word_count_after = Column(Integer , nullable=True)
    session_duration = Column(Integer , nullable=True)   # seconds
