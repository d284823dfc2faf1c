"""Project table; milestones are embedded as a JSON array."""

from sqlalchemy import JSON, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from mentormatch.db.base import Base, TimestampMixin
from mentormatch.models.project import TITLE_MAX_LENGTH


class ProjectRow(Base, TimestampMixin):
    __tablename__ = "projects"

    project_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    student_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True
    )
    mentor_id: Mapped[str | None] = mapped_column(
        String(128), ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    idea: Mapped[str] = mapped_column(Text, nullable=False)
    guidance_needed: Mapped[str | None] = mapped_column(Text, nullable=True)
    keywords: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft", index=True)
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    milestones: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
