from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.theme import Theme, ThemeVariables


def _require_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Name is required")
    return v


class ThemeCreate(BaseModel):
    name: str = Field(..., description="Unique theme name")
    variables: ThemeVariables

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return _require_name(v)


class ThemeUpdate(BaseModel):
    name: Optional[str] = Field(None, description="New theme name")
    variables: Optional[ThemeVariables] = Field(None, description="Replacement colour set")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _require_name(v)


class ThemeResponse(BaseModel):
    """Theme as seen by API clients"""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: str
    is_active: bool = Field(..., alias="isActive")
    variables: ThemeVariables
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    @classmethod
    def from_document(cls, theme: Theme) -> "ThemeResponse":
        return cls(
            id=str(theme.id),
            name=theme.name,
            is_active=theme.is_active,
            variables=theme.variables,
            created_at=theme.created_at,
            updated_at=theme.updated_at,
        )
