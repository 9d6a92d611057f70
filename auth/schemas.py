from pydantic import BaseModel , EmailStr , field_validator , Field , ConfigDict
from datetime import datetime
from typing import Optional
from prompts.engine import UserRole


class UserCreate(BaseModel):
    email : EmailStr
    password : str = Field(min_length=8,max_length=64)
    role : Optional[UserRole] = None

    @field_validator("password")
    @classmethod

    def password_length(cls , v):
        if len(v.encode("UTF-8")) > 72:
            raise ValueError("Password too long (max 72 bytes)")
        if len(v) < 8 :
            raise ValueError("password too short (min 8 chars)")
        return v 


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id : int
    email : EmailStr
    role : Optional[str] = None
    plan : str
    created_at : datetime

class UserLogin(BaseModel):
    email : EmailStr
    password : str

class TokenResponse(BaseModel):
    access_token : str
    refresh_token : str
    token_type : str = "bearer"

class ForgotPasswordRequest(BaseModel):
    email : EmailStr

class ResetPasswordRequest(BaseModel):
    token : str
    new_password : str = Field(min_length=8,max_length=64)
