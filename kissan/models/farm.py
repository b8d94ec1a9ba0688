"""Profile and Plot ORM models — the per-user farm records.

A ``Profile`` is one-to-one with ``User`` (its primary key *is* the user id)
and is absent until the first save.  ``Plot`` rows are owned by a user and
listed newest first.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, Float, ForeignKey, Index, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kissan.models.base import Base, CreatedAtMixin, UUIDPrimaryKeyMixin
from kissan.models.enums import PlotStatusEnum

if TYPE_CHECKING:
    from kissan.auth.models import User


class Profile(Base):
    """Farm/user metadata; "complete" once ``location`` is non-empty."""

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    farm_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    farming_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    land_size: Mapped[str | None] = mapped_column(String(50), nullable=True)
    primary_crop: Mapped[str | None] = mapped_column(String(100), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    user: Mapped[User] = relationship(back_populates="profile")

    def __repr__(self) -> str:
        return f"<Profile id={self.id} location={self.location!r}>"


class Plot(Base, UUIDPrimaryKeyMixin, CreatedAtMixin):
    """A single farm parcel owned by one user."""

    __tablename__ = "plots"
    __table_args__ = (
        Index("ix_plots_user_created", "user_id", "created_at"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    crop: Mapped[str] = mapped_column(String(100), nullable=False)
    area: Mapped[float] = mapped_column(Float, nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[PlotStatusEnum] = mapped_column(
        Enum(
            PlotStatusEnum,
            name="plot_status",
            create_constraint=False,
            native_enum=True,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
        default=PlotStatusEnum.preparation,
        server_default=PlotStatusEnum.preparation.value,
    )

    user: Mapped[User] = relationship(back_populates="plots")

    def __repr__(self) -> str:
        return f"<Plot id={self.id} name={self.name!r} status={self.status}>"
