"""Response and Answer models for collected survey submissions.

A response is one taker's completed pass through a survey and owns its
answers. Answers reference questions by id only: editing a survey rewrites
its questions but never touches answers already collected.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from survey_studio.models.database import Base, new_id


class Response(Base):
    """Model for a completed, anonymous survey submission.

    Attributes:
        id: Primary key (UUID string)
        survey_id: Foreign key to surveys table
        participant_id: Always NULL; responses are anonymous
        submitted_at: When the response was submitted
        answers: Answers belonging to this response
    """

    __tablename__ = "responses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    survey_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("surveys.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Foreign key to surveys table"
    )
    participant_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        nullable=True,
        comment="Unused; responses are anonymous"
    )
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When the response was submitted"
    )

    survey: Mapped["Survey"] = relationship("Survey", back_populates="responses")
    answers: Mapped[list["Answer"]] = relationship(
        "Answer",
        back_populates="response",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_survey_submitted", "survey_id", "submitted_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Response(id={self.id}, survey_id={self.survey_id}, "
            f"submitted_at={self.submitted_at})>"
        )


class Answer(Base):
    """One taker's value for one question within a response.

    Exactly one of answer_text / answer_choice is populated, chosen by the
    question type (see services.answer_codec).
    """

    __tablename__ = "answers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    response_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("responses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Weak reference: no foreign key, questions may be rewritten later
    question_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        index=True,
    )
    answer_text: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Raw text for free-text and file questions"
    )
    answer_choice: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="JSON array of selected values for choice questions"
    )
    file_url: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Reserved for uploaded file location"
    )

    response: Mapped["Response"] = relationship("Response", back_populates="answers")

    def __repr__(self) -> str:
        return (
            f"<Answer(id={self.id}, response_id={self.response_id}, "
            f"question_id={self.question_id})>"
        )
