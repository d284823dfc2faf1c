"""SQLAlchemy ORM models - import all to register with Base.metadata."""

from mentormatch.db.models.user import UserRow
from mentormatch.db.models.project import ProjectRow
from mentormatch.db.models.message import MessageRow
from mentormatch.db.models.notification import NotificationRow

__all__ = [
    "UserRow",
    "ProjectRow",
    "MessageRow",
    "NotificationRow",
]
