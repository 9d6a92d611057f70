from pydantic import BaseModel , Field , ConfigDict
from datetime import datetime
from typing import Dict, List, Optional
from prompts.engine import UserRole


class TemplateVariable(BaseModel):
    name : str
    description : str = ""
    default_value : str = ""
    required : bool = True


class TemplateCreate(BaseModel):
    name : str = Field(min_length=1 , max_length=200)
    description : str = ""
    role : Optional[UserRole] = None
    category : str = ""
    tags : List[str] = []
    content : str = Field(min_length=1)
    is_public : bool = False


class TemplateVersionCreate(BaseModel):
    name : Optional[str] = None
    description : Optional[str] = None
    role : Optional[UserRole] = None
    category : Optional[str] = None
    tags : Optional[List[str]] = None
    content : Optional[str] = None
    is_public : Optional[bool] = None


class TemplateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id : int
    user_id : int
    name : str
    description : Optional[str] = ""
    role : str
    category : Optional[str] = ""
    tags : List[str] = []
    content : str
    variables : List[TemplateVariable] = []
    usage_count : int = 0
    is_public : bool = False
    version : int
    previous_version_id : Optional[int] = None
    created_at : datetime
    updated_at : datetime


class ApplyTemplateRequest(BaseModel):
    values : Dict[str, str] = {}


class ApplyTemplateResponse(BaseModel):
    prompt : str
    missing_variables : List[str]
    unknown_variables : List[str]
    template_id : int


class CompareTemplatesRequest(BaseModel):
    template_id_1 : int
    template_id_2 : int


class ContentDiff(BaseModel):
    added : List[str]
    removed : List[str]


class CompareTemplatesResponse(BaseModel):
    name_changed : bool
    description_changed : bool
    content_diff : ContentDiff
    variables_added : List[TemplateVariable]
    variables_removed : List[TemplateVariable]


class ValidateTemplateRequest(BaseModel):
    content : str
    variables : Optional[List[TemplateVariable]] = None


class ValidateTemplateResponse(BaseModel):
    is_valid : bool
    errors : List[str]
    warnings : List[str]
