"""SQLAlchemy models for learner progress and learning paths.

Both aggregates are stored as one JSONB document per learner. The
document is always read and written whole inside a row-locked
transaction, so no partial update of the nested lists can be observed.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, Integer, String, text
from sqlalchemy.dialects.postgresql import JSONB, UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from athos.shared.database import Base
from athos.shared.datetime_utils import utc_now


class ProgressModel(Base):
    """Learner progress database model."""

    __tablename__ = "progress"

    user_id: Mapped[UUID] = mapped_column(PGUUID(as_uuid=True), primary_key=True)
    document: Mapped[dict] = mapped_column(JSONB, nullable=False)
    overall_completion: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        server_default=text("NOW()"),
    )


class LearningPathModel(Base):
    """Learning path database model."""

    __tablename__ = "learning_paths"

    user_id: Mapped[UUID] = mapped_column(PGUUID(as_uuid=True), primary_key=True)
    document: Mapped[dict] = mapped_column(JSONB, nullable=False)
    current_module: Mapped[str] = mapped_column(String(64), nullable=False)
    current_section: Mapped[str] = mapped_column(String(64), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        server_default=text("NOW()"),
    )
