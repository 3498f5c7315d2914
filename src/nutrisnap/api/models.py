"""Request models for the HTTP API."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nutrisnap.domain.session import View


def _require_text(value: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValueError("must not be blank")
    return cleaned


class AnalyzeRequest(BaseModel):
    """Free-text meal description with the day it was eaten."""

    model_config = ConfigDict(populate_by_name=True)

    text: str
    selected_date: date | None = Field(default=None, alias="date")

    @field_validator("text")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return _require_text(value)


class CredentialsRequest(BaseModel):
    """Username and password for register and login."""

    username: str
    password: str = Field(min_length=1)

    @field_validator("username")
    @classmethod
    def strip_username(cls, value: str) -> str:
        return _require_text(value)


class ItemCreateRequest(BaseModel):
    """A food item to add to a meal."""

    name: str
    quantity: str

    @field_validator("name", "quantity")
    @classmethod
    def strip_fields(cls, value: str) -> str:
        return _require_text(value)


class ItemUpdateRequest(BaseModel):
    """New quantity for an existing food item."""

    quantity: str

    @field_validator("quantity")
    @classmethod
    def strip_quantity(cls, value: str) -> str:
        return _require_text(value)


class ViewRequest(BaseModel):
    """View to switch to."""

    view: View
