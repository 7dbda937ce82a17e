"""Survey and Question models.

A survey exclusively owns its questions; deleting a survey removes its
questions and responses. Questions are kept in display order by
``order_index``, which the editor rewrites densely from 0 on every save.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from survey_studio.models.database import Base, new_id


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Survey(Base):
    """A named, ordered collection of questions with a publication status.

    Attributes:
        id: Primary key (UUID string)
        title: Survey title shown to takers
        description: Optional longer description
        slug: URL-safe unique identifier used in /survey/{slug}
        status: draft, active or closed
        start_date: Optional planned opening date (informational)
        end_date: Optional planned closing date (informational)
        created_at: Creation timestamp
        updated_at: Last update timestamp
        created_by: Email of the admin who created the survey
        questions: Questions ordered by order_index
        responses: Responses collected for this survey
    """

    __tablename__ = "surveys"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        comment="Survey title"
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Optional survey description"
    )
    slug: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        unique=True,
        comment="URL-safe unique identifier"
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="draft",
        server_default=text("'draft'"),
        comment="draft, active or closed"
    )
    start_date: Mapped[Optional[str]] = mapped_column(
        String(40),
        nullable=True,
        comment="Planned opening date (ISO string)"
    )
    end_date: Mapped[Optional[str]] = mapped_column(
        String(40),
        nullable=True,
        comment="Planned closing date (ISO string)"
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    created_by: Mapped[Optional[str]] = mapped_column(
        String(320),
        nullable=True,
        comment="Email of the creating admin"
    )

    questions: Mapped[list["Question"]] = relationship(
        "Question",
        back_populates="survey",
        cascade="all, delete-orphan",
        order_by="Question.order_index",
    )
    responses: Mapped[list["Response"]] = relationship(
        "Response",
        back_populates="survey",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_surveys_status", "status"),
        Index("idx_surveys_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Survey(id={self.id}, slug={self.slug}, status={self.status})>"


class Question(Base):
    """A single prompt belonging to a survey.

    ``options`` is only meaningful for multiple_choice questions; likert
    questions use the fixed five-point scale.
    """

    __tablename__ = "questions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    survey_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("surveys.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    question_type: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        comment="short_answer, long_answer, multiple_choice, likert_scale or file_upload"
    )
    options: Mapped[Optional[list]] = mapped_column(
        JSON,
        nullable=True,
        comment="Ordered choice list for multiple_choice questions"
    )
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    required: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    survey: Mapped["Survey"] = relationship("Survey", back_populates="questions")

    __table_args__ = (
        UniqueConstraint("survey_id", "order_index", name="uq_question_order"),
    )

    def __repr__(self) -> str:
        return (
            f"<Question(id={self.id}, survey_id={self.survey_id}, "
            f"type={self.question_type}, order_index={self.order_index})>"
        )
