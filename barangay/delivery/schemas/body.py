from datetime import date, datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from barangay.domain.layout import LayoutItem

T = TypeVar("T")


class CamelModel(BaseModel):
    # JSON keys are camelCase on the wire: layoutSettings, firstName, ...
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class Page(CamelModel, Generic[T]):
    data: List[T]
    total: int
    pages: int
    current_page: int


class Message(BaseModel):
    message: str


# --- Users ---

class UserCreate(CamelModel):
    username: str = Field(min_length=1, max_length=80)
    password: str = Field(min_length=1)
    role: str = "staff"
    designation: Optional[str] = None
    email: Optional[str] = None
    pic: Optional[str] = None


class UserUpdate(CamelModel):
    username: Optional[str] = Field(None, min_length=1, max_length=80)
    password: Optional[str] = Field(None, min_length=1)
    role: Optional[str] = None
    designation: Optional[str] = None
    email: Optional[str] = None
    pic: Optional[str] = None


class UserOut(CamelModel):
    id: int
    username: str
    role: str
    designation: Optional[str] = None
    email: Optional[str] = None
    pic: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LoginBody(CamelModel):
    username: str
    password: str


class LoginResponse(CamelModel):
    token: str
    expires_at: datetime
    user: UserOut


# --- Residents ---

class ResidentFields(CamelModel):
    pic: Optional[str] = None
    birth_date: Optional[date] = None
    purok: Optional[str] = None
    house_number: Optional[str] = None
    phone_number: Optional[str] = None
    civil_status: Optional[str] = None

    @field_validator("birth_date", mode="before")
    @classmethod
    def _date_only(cls, value):
        # the dashboard sends either "2000-05-01" or a full ISO timestamp
        if value == "":
            return None
        if isinstance(value, str) and len(value) > 10:
            return value[:10]
        return value

    @field_validator("phone_number", mode="before")
    @classmethod
    def _blank_phone(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ResidentCreate(ResidentFields):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    is_indigent: bool = False
    is_senior_citizen: bool = False


class ResidentUpdate(ResidentFields):
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    is_indigent: Optional[bool] = None
    is_senior_citizen: Optional[bool] = None


class ResidentOut(CamelModel):
    id: int
    pic: Optional[str] = None
    first_name: str
    last_name: str
    birth_date: Optional[date] = None
    purok: Optional[str] = None
    house_number: Optional[str] = None
    phone_number: Optional[str] = None
    civil_status: Optional[str] = None
    is_indigent: bool = False
    is_senior_citizen: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- Document templates ---

class TemplateCreate(CamelModel):
    name: str = Field(min_length=1)
    layout_settings: Optional[Dict[str, LayoutItem]] = None


class TemplateReplace(CamelModel):
    name: str = Field(min_length=1)
    layout_settings: Dict[str, LayoutItem]


class TemplateOut(CamelModel):
    id: int
    name: str
    layout_settings: Dict[str, Any]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- Designer ---

class DesignerBody(CamelModel):
    layout_settings: Dict[str, LayoutItem] = Field(default_factory=dict)


class AddFieldBody(DesignerBody):
    name: str


class UpdateFieldBody(DesignerBody):
    key: str
    attribute: str
    value: Any = None


class MoveFieldBody(DesignerBody):
    key: str
    x: Any = None
    y: Any = None


class ResizeFieldBody(DesignerBody):
    key: str
    width: Any = None
    height: Any = None


class InjectPlaceholderBody(DesignerBody):
    key: str
    token: str
    offset: Optional[int] = Field(None, ge=0)


class RemoveFieldBody(DesignerBody):
    key: str


class LayoutResponse(CamelModel):
    layout_settings: Dict[str, Any]
    key: Optional[str] = None


class PlaceholderOut(CamelModel):
    label: str
    token: str


# --- Certificates ---

class CertificateCreate(CamelModel):
    template_id: int
    resident_id: int


class CertificateOut(CamelModel):
    id: int
    template_id: Optional[int] = None
    resident_id: Optional[int] = None
    template_name: str
    layout: Dict[str, Any]
    file_url: Optional[str] = None
    created_at: Optional[datetime] = None
