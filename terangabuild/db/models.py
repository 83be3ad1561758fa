"""SQLAlchemy async database models for TerangaBuild.

Identifiers are text so fixture ids (``demo-project-1``) and UUIDs coexist.
Foreign keys are plain indexed columns: deleting a project leaves its
checklist, expenses and members in place.
"""

from __future__ import annotations

import datetime as dt
from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import JSON, Boolean, Date, DateTime, Float, Integer, Numeric, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func

from terangabuild.backends.base import EntityType


def _new_id() -> str:
    return str(uuid4())


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class _Record:
    id: Mapped[str] = mapped_column(Text, primary_key=True, default=_new_id)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


class ProfileModel(_Record, Base):
    __tablename__ = EntityType.PROFILES.value

    email: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    full_name: Mapped[str | None] = mapped_column(Text)
    user_type: Mapped[str] = mapped_column(Text, nullable=False)
    company_name: Mapped[str | None] = mapped_column(Text)
    phone: Mapped[str | None] = mapped_column(Text)


class ProjectModel(_Record, Base):
    __tablename__ = EntityType.PROJECTS.value

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(Text, nullable=False, default="planning")
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    budget: Mapped[Decimal | None] = mapped_column(Numeric(14, 0))
    spent: Mapped[Decimal | None] = mapped_column(Numeric(14, 0))
    location: Mapped[str | None] = mapped_column(Text)
    client_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    professional_id: Mapped[str | None] = mapped_column(Text, index=True)
    start_date: Mapped[date | None] = mapped_column(Date)
    end_date: Mapped[date | None] = mapped_column(Date)


class MaterialModel(_Record, Base):
    __tablename__ = EntityType.MATERIALS.value

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    price: Mapped[Decimal] = mapped_column(Numeric(14, 0), nullable=False)
    unit: Mapped[str] = mapped_column(Text, nullable=False)
    stock_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    supplier_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    category: Mapped[str | None] = mapped_column(Text)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    image_url: Mapped[str | None] = mapped_column(Text)


class OrderModel(_Record, Base):
    __tablename__ = EntityType.ORDERS.value

    order_number: Mapped[str] = mapped_column(Text, nullable=False)
    client_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    supplier_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    project_id: Mapped[str | None] = mapped_column(Text, index=True)
    material_id: Mapped[str | None] = mapped_column(Text)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(14, 0), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(14, 0), nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False, default="pending")


class ChecklistItemModel(_Record, Base):
    __tablename__ = EntityType.CHECKLIST_ITEMS.value

    project_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    template_id: Mapped[str | None] = mapped_column(Text)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    estimated_duration: Mapped[int | None] = mapped_column(Integer)
    dependencies: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    completed_by: Mapped[str | None] = mapped_column(Text)
    due_date: Mapped[date | None] = mapped_column(Date)
    priority: Mapped[str] = mapped_column(Text, nullable=False, default="medium")


class ProjectExpenseModel(_Record, Base):
    __tablename__ = EntityType.PROJECT_EXPENSES.value

    project_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 0), nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False, default="other")
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    created_by: Mapped[str] = mapped_column(Text, nullable=False)


class ProjectUserModel(_Record, Base):
    __tablename__ = EntityType.PROJECT_USERS.value

    project_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    role: Mapped[str] = mapped_column(Text, nullable=False, default="worker")
    permissions: Mapped[list] = mapped_column(JSON, nullable=False, default=list)


class ProjectInvitationModel(_Record, Base):
    __tablename__ = EntityType.PROJECT_INVITATIONS.value

    project_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    invited_by: Mapped[str] = mapped_column(Text, nullable=False)
    invited_email: Mapped[str] = mapped_column(Text, nullable=False)
    invited_user_id: Mapped[str | None] = mapped_column(Text)
    role: Mapped[str] = mapped_column(Text, nullable=False, default="worker")
    permissions: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(Text, nullable=False, default="pending")
    message: Mapped[str | None] = mapped_column(Text)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))


class ProjectActivityModel(_Record, Base):
    __tablename__ = EntityType.PROJECT_ACTIVITIES.value

    project_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    activity_type: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[str] = mapped_column(Text, nullable=False)


class IoTSensorModel(_Record, Base):
    __tablename__ = EntityType.IOT_SENSORS.value

    project_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    sensor_type: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str] = mapped_column(Text, nullable=False)
    value: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(Text, nullable=False, default="normal")


class IoTThresholdModel(_Record, Base):
    __tablename__ = EntityType.IOT_THRESHOLDS.value

    sensor_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    min_value: Mapped[float | None] = mapped_column(Float)
    max_value: Mapped[float | None] = mapped_column(Float)
    warning_threshold: Mapped[float | None] = mapped_column(Float)
    critical_threshold: Mapped[float | None] = mapped_column(Float)


class DroneModel(_Record, Base):
    __tablename__ = EntityType.DRONES.value

    name: Mapped[str] = mapped_column(Text, nullable=False)
    model: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(Text, nullable=False, default="available")
    battery_level: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    altitude: Mapped[float | None] = mapped_column(Float)
    project_id: Mapped[str | None] = mapped_column(Text, index=True)


MODELS: dict[EntityType, type[Base]] = {
    EntityType.PROFILES: ProfileModel,
    EntityType.PROJECTS: ProjectModel,
    EntityType.MATERIALS: MaterialModel,
    EntityType.ORDERS: OrderModel,
    EntityType.CHECKLIST_ITEMS: ChecklistItemModel,
    EntityType.PROJECT_EXPENSES: ProjectExpenseModel,
    EntityType.PROJECT_USERS: ProjectUserModel,
    EntityType.PROJECT_INVITATIONS: ProjectInvitationModel,
    EntityType.PROJECT_ACTIVITIES: ProjectActivityModel,
    EntityType.IOT_SENSORS: IoTSensorModel,
    EntityType.IOT_THRESHOLDS: IoTThresholdModel,
    EntityType.DRONES: DroneModel,
}
