from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ..models.user import AdminUser


def _normalize_email(v: str) -> str:
    return v.lower()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return _normalize_email(v)


class AdminInitRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=8)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return _normalize_email(v)


class UserResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: str
    email: str
    role: str

    @classmethod
    def from_document(cls, user: AdminUser) -> "UserResponse":
        return cls(id=str(user.id), name=user.name, email=user.email, role=user.role)


class LoginResponse(BaseModel):
    user: UserResponse
    token: str
