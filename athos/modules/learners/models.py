"""SQLAlchemy model for learner preferences."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, String, text
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from athos.shared.database import Base
from athos.shared.datetime_utils import utc_now
from athos.shared.models import Difficulty, LearningStyle


class LearnerPreferencesModel(Base):
    """Learner preference columns.

    Rows are created by the auth service when an account is registered.
    """

    __tablename__ = "learner_preferences"

    user_id: Mapped[UUID] = mapped_column(PGUUID(as_uuid=True), primary_key=True)
    learning_style: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=LearningStyle.BALANCED.value,
        server_default=LearningStyle.BALANCED.value,
    )
    difficulty: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=Difficulty.BEGINNER.value,
        server_default=Difficulty.BEGINNER.value,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        server_default=text("NOW()"),
    )
