"""FastAPI dependency injection providers."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from mentormatch.errors.exceptions import AuthenticationError, AuthorizationError
from mentormatch.events.connection_registry import ConnectionRegistry
from mentormatch.models.enums import Role
from mentormatch.models.user import Actor


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session from the app's session factory."""
    session_factory = request.app.state.db_session_factory
    async with session_factory() as session:
        yield session


def get_registry(request: Request) -> ConnectionRegistry | None:
    """Return the live connection registry from app state."""
    return getattr(request.app.state, "connection_registry", None)


async def get_current_actor(request: Request) -> Actor:
    """Return the authenticated actor or raise 401."""
    user = getattr(request.state, "user", {}) or {}
    if "_auth_error" in user:
        raise AuthenticationError(user["_auth_error"])
    if not user or user.get("sub") in (None, "", "anonymous"):
        raise AuthenticationError("Authentication required")
    try:
        role = Role(user.get("role"))
    except ValueError:
        raise AuthenticationError("Token carries no valid role") from None
    return Actor(user_id=user["sub"], role=role)


def require_role(role: Role):
    """Return a dependency that enforces the given role."""

    async def _check(actor: Actor = Depends(get_current_actor)) -> Actor:
        if actor.role != role:
            raise AuthorizationError(f"Only {role}s can perform this action")
        return actor

    return _check


# Type aliases for dependency injection
Registry = Annotated[ConnectionRegistry | None, Depends(get_registry)]
CurrentActor = Annotated[Actor, Depends(get_current_actor)]
StudentActor = Annotated[Actor, Depends(require_role(Role.STUDENT))]
MentorActor = Annotated[Actor, Depends(require_role(Role.MENTOR))]
