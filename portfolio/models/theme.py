import re
from datetime import datetime
from beanie import Document
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pymongo import IndexModel

THEME_VARIABLE_NAMES = ("primary", "secondary", "background", "foreground", "accent", "border")

HEX_COLOUR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class ThemeVariables(BaseModel):
    """The six colours every theme must define"""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    primary: str = Field(..., min_length=1, description="Primary colour")
    secondary: str = Field(..., min_length=1, description="Secondary colour")
    background: str = Field(..., min_length=1, description="Page background colour")
    foreground: str = Field(..., min_length=1, description="Text colour")
    accent: str = Field(..., min_length=1, description="Accent colour")
    border: str = Field(..., min_length=1, description="Border and input colour")

    @field_validator(*THEME_VARIABLE_NAMES)
    @classmethod
    def hex_colour(cls, v: str, info) -> str:
        # The applier derives HSL values, so only #rgb and #rrggbb are usable
        if not HEX_COLOUR_RE.match(v):
            raise ValueError(f"{info.field_name} must be a hex colour such as #1a2b3c")
        return v


class Theme(Document):
    """Named colour theme; at most one is active at a time"""
    name: str = Field(..., description="Unique theme name")
    is_active: bool = Field(default=False, description="Whether this theme is applied site-wide")
    variables: ThemeVariables

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "themes"
        indexes = [
            IndexModel([("name", 1)], unique=True),
            IndexModel([("is_active", 1)]),
            IndexModel([("created_at", -1)]),
        ]
