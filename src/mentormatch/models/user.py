"""Pydantic models for users, identities and authentication.

Users are a tagged union selected by ``role``: role-specific fields are only
reachable after narrowing to ``StudentProfile`` or ``MentorProfile``.
"""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, RootModel

from mentormatch.models.enums import Role


class Actor(BaseModel):
    """Acting identity supplied by the authentication collaborator."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    role: Role


# ── Profiles ───────────────────────────────────────────────────────────────────

class _ProfileBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    email: str
    name: str
    created_at: datetime | None = None


class StudentProfile(_ProfileBase):
    role: Literal["student"] = "student"
    usn: str
    domain: str
    specialization: str | None = None
    year: int | None = None


class MentorProfile(_ProfileBase):
    role: Literal["mentor"] = "mentor"
    max_students: int = Field(5, gt=0)
    summary: str | None = None
    short_description: str | None = None
    projects_done: str | None = None
    expertise: list[str] = Field(default_factory=list)


UserProfile = Annotated[StudentProfile | MentorProfile, Field(discriminator="role")]


# ── Request models ─────────────────────────────────────────────────────────────

class _RegisterBase(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str = Field(min_length=1, max_length=200)


class StudentRegister(_RegisterBase):
    role: Literal["student"]
    usn: str = Field(min_length=1, max_length=64)
    domain: str = Field(min_length=1, max_length=200)
    specialization: str | None = None
    year: int | None = Field(None, ge=1, le=10)


class MentorRegister(_RegisterBase):
    role: Literal["mentor"]
    max_students: int | None = Field(None, gt=0)
    summary: str | None = None
    short_description: str | None = Field(None, max_length=500)
    projects_done: str | None = None
    expertise: list[str] = Field(default_factory=list)


class UserRegister(RootModel[Annotated[StudentRegister | MentorRegister, Field(discriminator="role")]]):
    """Registration payload, narrowed by ``role``."""


class UserLogin(BaseModel):
    email: EmailStr
    password: str
    role: Role | None = None


# ── Response models ────────────────────────────────────────────────────────────

class TokenResponse(BaseModel):
    access_token: str
    token_type: Literal["bearer"] = "bearer"
    expires_in: int
    user: UserProfile
