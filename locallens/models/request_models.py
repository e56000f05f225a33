# locallens/models/request_models.py
import re
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

EMAIL_RE = re.compile(r"^[\w.+-]+@[\w-]+(\.[\w-]+)*\.\w{2,}$")


class RequestModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class SignUpRequest(RequestModel):
    email: str
    password: str = Field(min_length=6)
    business_name: str = Field(min_length=1, max_length=200)
    name: Optional[str] = Field(default=None, max_length=100)
    category: str
    website: Optional[str] = None
    address: Optional[str] = Field(default=None, max_length=300)

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        v = v.lower()
        if not EMAIL_RE.match(v):
            raise ValueError("Please provide a valid email")
        return v


class LoginRequest(RequestModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return v.lower()


class ProfileUpdateRequest(RequestModel):
    name: str = Field(min_length=1, max_length=200)
    category: str = Field(min_length=1)
    website: Optional[str] = None
    address: Optional[str] = Field(default=None, max_length=300)
    description: Optional[str] = None


class CoordinatesUpdateRequest(RequestModel):
    latitude: float = Field(strict=True)
    longitude: float = Field(strict=True)


class VideoCreateRequest(RequestModel):
    url: str = Field(min_length=1)
    title: str = Field(min_length=1)
    caption: Optional[str] = Field(default=None, max_length=280)
    thumbnail_url: Optional[str] = None
    tags: Union[List[str], str, None] = None

    @field_validator("tags")
    @classmethod
    def _tags(cls, v) -> List[str]:
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        return [t.strip() for t in v if t and t.strip()]


class ReviewCreateRequest(RequestModel):
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=500)


class GeocodeRequest(RequestModel):
    address: str = Field(min_length=1)
