"""
Admin user model for the portfolio admin panel.
"""

from datetime import datetime
from beanie import Document
from pydantic import Field
from pymongo import IndexModel
from passlib.context import CryptContext

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class AdminUser(Document):
    """Operator allowed to manage site content"""
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Login email, stored lower-cased")
    hashed_password: str
    role: str = Field(default="admin")

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "admin_users"
        indexes = [
            IndexModel([("email", 1)], unique=True),
        ]

    @staticmethod
    def hash_password(password: str) -> str:
        return pwd_context.hash(password)

    def verify_password(self, password: str) -> bool:
        return pwd_context.verify(password, self.hashed_password)
