from pydantic import BaseModel , Field , ConfigDict , field_validator
from datetime import datetime
from typing import Dict, List, Literal, Optional
from prompts.engine import UserRole


BlockType = Literal["context", "goal", "tone", "audience", "constraints", "format", "examples", "custom"]


def _not_blank(value : str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


class EnhanceRequest(BaseModel):
    prompt : str = Field(min_length=1 , max_length=10000)
    role : Optional[UserRole] = None

    @field_validator("prompt")
    @classmethod
    def prompt_not_blank(cls , v):
        return _not_blank(v)


class WordCount(BaseModel):
    original : int
    enhanced : int


class EnhanceResponse(BaseModel):
    original : str
    enhanced : str
    word_count : WordCount
    specificity : str
    saved : bool = False
    prompt_id : Optional[int] = None


class SavePromptRequest(BaseModel):
    original_prompt : str = Field(min_length=1)
    enhanced_prompt : str = Field(min_length=1)
    role : Optional[UserRole] = None


class PromptResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id : int
    original_prompt : str
    enhanced_prompt : str
    role : Optional[str] = None
    created_at : datetime


class GenerateRequest(BaseModel):
    topic : str = Field(min_length=1 , max_length=500)
    template_type : Optional[str] = None
    role : Optional[UserRole] = None
    tone : Optional[str] = None
    industry : Optional[str] = None
    use_enhanced_algorithm : bool = False
    save : bool = False

    @field_validator("topic")
    @classmethod
    def topic_not_blank(cls , v):
        return _not_blank(v)


class GenerateResponse(BaseModel):
    prompt : str
    enhanced_prompt : EnhanceResponse
    is_enhanced : bool
    additional_suggestions : List[str]
    saved : bool = False
    prompt_id : Optional[int] = None


class AnalyzeQualityRequest(BaseModel):
    prompt : str = Field(min_length=1)


class QualityIssue(BaseModel):
    type : str
    severity : Literal["low", "medium", "high"]
    explanation : str
    suggestion : str


class QualityResponse(BaseModel):
    score : int
    aspects : Dict[str, float]
    issues : List[QualityIssue]
    strengths : List[str]
    overall_feedback : str


# block builder

class Block(BaseModel):
    id : str
    type : BlockType
    content : str
    order : int
    required : bool = False
    description : str = ""


class BlockStructure(BaseModel):
    blocks : List[Block]
    combined_prompt : str = ""


class ExtractBlocksRequest(BaseModel):
    prompt : str = Field(min_length=1)


class CreateStructureRequest(BaseModel):
    prompt : Optional[str] = None


class UpdateBlockRequest(BaseModel):
    structure : BlockStructure
    block_id : str
    content : str


class AddBlockRequest(BaseModel):
    structure : BlockStructure
    block_type : BlockType


class RemoveBlockRequest(BaseModel):
    structure : BlockStructure
    block_id : str


class ReorderBlockRequest(BaseModel):
    structure : BlockStructure
    block_id : str
    new_order : int = Field(ge=0)
