# storefront/schemas/auth.py
import uuid

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class SignUpRequest(SQLModel):
    """
    Email + password registration. `full_name` is stored in the Supabase
    user metadata and copied to the profile on first login.
    """

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    full_name: str | None = Field(default=None, max_length=100)

    @field_validator("full_name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class SignInRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=1)


class PasswordResetRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr


class SignUpResult(SQLModel):
    user_id: uuid.UUID
    email: str
    # True when Supabase requires the email to be verified first
    confirmation_required: bool


class SessionRead(SQLModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int | None = None
    user_id: uuid.UUID
    email: str
