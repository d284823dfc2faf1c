"""Registration, login and user lookup routes."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mentormatch.config import settings
from mentormatch.dependencies import CurrentActor, get_db
from mentormatch.errors.exceptions import AuthenticationError, AuthorizationError, ConflictError, NotFoundError
from mentormatch.models.user import (
    MentorProfile,
    MentorRegister,
    StudentProfile,
    TokenResponse,
    UserLogin,
    UserRegister,
)
from mentormatch.repositories.user_repo import UserRepository, to_profile
from mentormatch.services.id_generator import generate_id
from mentormatch.services.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


def _token_response(profile: StudentProfile | MentorProfile) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(profile.user_id, profile.role),
        expires_in=settings.jwt_access_token_expire_minutes * 60,
        user=profile,
    )


@router.post("/auth/register", response_model=TokenResponse, status_code=201)
async def register(
    payload: UserRegister,
    db: AsyncSession = Depends(get_db),
):
    body = payload.root
    repo = UserRepository(db)
    if await repo.get_by_email(body.email):
        raise ConflictError("User already exists")

    fields = {
        "user_id": generate_id("usr_"),
        "email": body.email.lower(),
        "name": body.name.strip(),
        "hashed_password": hash_password(body.password),
        "role": body.role,
        "is_active": True,
    }
    if isinstance(body, MentorRegister):
        fields.update(
            max_students=body.max_students or settings.default_max_students,
            summary=body.summary,
            short_description=body.short_description,
            projects_done=body.projects_done,
            # Expertise tags keep their casing; matching lower-cases them itself
            expertise=[e.strip() for e in body.expertise if e and e.strip()],
        )
    else:
        if await repo.get_by_usn(body.usn):
            raise ConflictError(f"USN '{body.usn}' already exists.")
        fields.update(
            usn=body.usn,
            domain=body.domain,
            specialization=body.specialization,
            year=body.year,
        )

    user = await repo.create(**fields)
    await db.commit()
    logger.info("Registered %s %s", user.role, user.user_id)
    return _token_response(to_profile(user))


@router.post("/auth/login", response_model=TokenResponse)
async def login(body: UserLogin, db: AsyncSession = Depends(get_db)):
    repo = UserRepository(db)
    user = await repo.get_by_email(body.email)
    if not user or not user.is_active:
        raise AuthenticationError("User not registered")
    if not verify_password(body.password, user.hashed_password):
        raise AuthenticationError("Invalid credentials")
    if body.role and user.role != body.role:
        raise AuthorizationError(
            f"Access denied. You are trying to log in as a {body.role}, "
            f"but this account is registered as a {user.role}."
        )
    return _token_response(to_profile(user))


@router.get("/auth/me")
async def me(actor: CurrentActor, db: AsyncSession = Depends(get_db)) -> dict:
    user = await UserRepository(db).get(actor.user_id)
    if not user:
        raise NotFoundError("User", actor.user_id)
    return to_profile(user).model_dump(mode="json")


@router.get("/users/mentors")
async def list_mentors(actor: CurrentActor, db: AsyncSession = Depends(get_db)) -> list[dict]:
    rows = await UserRepository(db).list_mentors()
    return [to_profile(r).model_dump(mode="json") for r in rows]


@router.get("/users/{user_id}")
async def get_user(user_id: str, actor: CurrentActor, db: AsyncSession = Depends(get_db)) -> dict:
    user = await UserRepository(db).get(user_id)
    if not user:
        raise NotFoundError("User", user_id)
    return to_profile(user).model_dump(mode="json")
