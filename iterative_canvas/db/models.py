"""SQLAlchemy ORM models for requirements and their evaluations."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class RequirementGroupRecord(Base):
    """The requirement set of one canvas version."""

    __tablename__ = "requirement_groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    canvas_version_id: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    success_threshold: Mapped[Decimal] = mapped_column(Numeric, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    requirements: Mapped[list[RequirementRecord]] = relationship(
        "RequirementRecord",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="RequirementRecord.id",
    )


class RequirementRecord(Base):
    """A stored requirement row."""

    __tablename__ = "requirements"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    requirement_group_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("requirement_groups.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    model_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    content: Mapped[str | None] = mapped_column(String, nullable=True)
    is_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    weight: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    type: Mapped[str] = mapped_column(String, nullable=False, default="pass_fail")
    threshold: Mapped[Decimal | None] = mapped_column(Numeric, nullable=True)
    reasoning_effort: Mapped[str | None] = mapped_column(String, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    group: Mapped[RequirementGroupRecord] = relationship("RequirementGroupRecord", back_populates="requirements")


class EvaluationRecord(Base):
    """The latest evaluation of a requirement. One row per requirement."""

    __tablename__ = "evaluations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    requirement_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("requirements.id", ondelete="CASCADE"), nullable=False, unique=True,
    )
    score: Mapped[Decimal] = mapped_column(Numeric, nullable=False)
    explanation: Mapped[str] = mapped_column(String, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
