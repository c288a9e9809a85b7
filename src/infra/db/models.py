from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    MappedAsDataclass,
    mapped_column,
    relationship,
)

from core.domain.check_status import CheckStatus


class Base(MappedAsDataclass, DeclarativeBase):
    pass


class EndpointModel(Base):
    __tablename__ = "endpoints"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    owner_id: Mapped[str] = mapped_column(String(255), index=True)

    name: Mapped[str] = mapped_column(String(255))
    target: Mapped[str] = mapped_column(String(2048))
    type: Mapped[str] = mapped_column(String(32), default="http")

    enabled: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    check_frequency_minutes: Mapped[int] = mapped_column(Integer, default=5)
    timeout_seconds: Mapped[int] = mapped_column(Integer, default=30)
    retry_count: Mapped[int] = mapped_column(Integer, default=3)
    success_codes: Mapped[str] = mapped_column(String(255), default="200,201,204")
    notify_on_failure: Mapped[bool] = mapped_column(Boolean, default=True)

    current_status: Mapped[Optional[CheckStatus]] = mapped_column(
        Enum(CheckStatus, native_enum=False, name="check_status", values_callable=lambda e: [m.value for m in e]),
        default=None,
    )
    last_checked: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), default=None)
    last_response_time_ms: Mapped[Optional[int]] = mapped_column(Integer, default=None)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default_factory=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        init=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default_factory=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        onupdate=func.now(),
        init=False,
    )

    check_results: Mapped[list["CheckResultModel"]] = relationship(
        back_populates="endpoint",
        cascade="all, delete-orphan",
        passive_deletes=True,
        default_factory=list,
    )


class CheckResultModel(Base):
    __tablename__ = "check_results"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, init=False)
    endpoint_id: Mapped[str] = mapped_column(ForeignKey("endpoints.id", ondelete="CASCADE"), index=True)

    status: Mapped[CheckStatus] = mapped_column(
        Enum(CheckStatus, native_enum=False, name="check_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    response_time_ms: Mapped[int] = mapped_column(Integer)
    checked_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)

    status_code: Mapped[Optional[int]] = mapped_column(Integer, default=None)
    error_message: Mapped[Optional[str]] = mapped_column(Text, default=None)

    endpoint: Mapped[EndpointModel] = relationship(back_populates="check_results", init=False)
