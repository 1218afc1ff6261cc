"""
Pydantic schemas for user-related request/response validation.
"""

from typing import Optional
from pydantic import AnyHttpUrl, BaseModel, EmailStr, Field, TypeAdapter, ValidationError, field_validator

from app.schemas.common import UtcDatetime

_http_url = TypeAdapter(AnyHttpUrl)


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    name: str = Field(..., min_length=2, max_length=100)


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class UserUpdate(BaseModel):
    """Self-service profile update. Only the fields sent are changed."""

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8, max_length=128)
    # Empty string clears the picture
    profile_picture: Optional[str] = Field(None, max_length=2048)

    @field_validator("name", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("profile_picture")
    @classmethod
    def _check_picture_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if value:
            try:
                _http_url.validate_python(value)
            except ValidationError as e:
                raise ValueError("profile_picture must be an http(s) URL") from e
        return value


class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    profile_picture: Optional[str] = None
    created_at: UtcDatetime
    updated_at: UtcDatetime

    model_config = {"from_attributes": True}


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
