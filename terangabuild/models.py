"""TerangaBuild Pydantic models for type-safe data validation.

Each entity has a ``*Create`` payload (what callers submit) and a persisted
model that adds identity, timestamps and embedded profile summaries.
"""

from __future__ import annotations

import datetime as dt
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class UserType(str, Enum):
    CLIENT = "client"
    PROFESSIONAL = "professional"


class ProjectStatus(str, Enum):
    """Project lifecycle state."""

    PLANNING = "planning"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ExpenseCategory(str, Enum):
    MATERIALS = "materials"
    LABOR = "labor"
    EQUIPMENT = "equipment"
    OTHER = "other"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class SensorStatus(str, Enum):
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


class DroneStatus(str, Enum):
    AVAILABLE = "available"
    IN_FLIGHT = "in_flight"
    MAINTENANCE = "maintenance"
    OFFLINE = "offline"


class ProjectRole(str, Enum):
    """Role of a team member attached to a project."""

    MANAGER = "manager"
    SUPERVISOR = "supervisor"
    WORKER = "worker"
    OBSERVER = "observer"


class InvitationRole(str, Enum):
    CLIENT = "client"
    MANAGER = "manager"
    SUPERVISOR = "supervisor"
    WORKER = "worker"
    OBSERVER = "observer"


class InvitationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"


# Default permission sets offered when inviting someone with a given role
ROLE_PERMISSIONS: dict[InvitationRole, list[str]] = {
    InvitationRole.CLIENT: ["view_project", "view_progress", "view_expenses", "comment"],
    InvitationRole.MANAGER: [
        "view_project",
        "edit_project",
        "manage_team",
        "manage_expenses",
        "manage_checklist",
        "invite_users",
    ],
    InvitationRole.SUPERVISOR: [
        "view_project",
        "edit_checklist",
        "view_team",
        "view_expenses",
        "validate_tasks",
    ],
    InvitationRole.WORKER: ["view_project", "edit_checklist", "comment"],
    InvitationRole.OBSERVER: ["view_project", "view_progress"],
}


class _Payload(BaseModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True, validate_default=True)


class _Persisted(_Payload):
    id: str
    created_at: datetime
    updated_at: datetime


class Profile(_Persisted):
    """User profile linked to an authenticated account."""

    email: str
    full_name: str | None = None
    user_type: UserType
    company_name: str | None = None
    phone: str | None = None


class ProjectCreate(_Payload):
    name: str
    description: str | None = None
    status: ProjectStatus = ProjectStatus.PLANNING
    progress: int = Field(default=0, ge=0, le=100)
    budget: Decimal | None = Field(default=None, ge=0)
    spent: Decimal | None = Field(default=None, ge=0)
    location: str | None = None
    client_id: str
    professional_id: str | None = None
    start_date: date | None = None
    end_date: date | None = None


class Project(ProjectCreate, _Persisted):
    """Construction project with embedded client/professional summaries."""

    client: Profile | None = None
    professional: Profile | None = None


class ChecklistItemCreate(_Payload):
    project_id: str
    template_id: str | None = None
    title: str
    description: str | None = None
    order_index: int
    estimated_duration: int | None = Field(default=None, gt=0)  # days
    dependencies: list[str] = Field(default_factory=list)
    is_completed: bool = False
    completed_at: datetime | None = None
    completed_by: str | None = None
    due_date: date | None = None
    priority: Priority = Priority.MEDIUM


class ChecklistItem(ChecklistItemCreate, _Persisted):
    """One step of a project's execution plan."""


class ProjectExpenseCreate(_Payload):
    project_id: str
    description: str
    amount: Decimal = Field(gt=0)
    category: ExpenseCategory = ExpenseCategory.OTHER
    date: dt.date
    created_by: str


class ProjectExpense(ProjectExpenseCreate, _Persisted):
    pass


class MaterialCreate(_Payload):
    name: str
    description: str | None = None
    price: Decimal = Field(ge=0)
    unit: str
    stock_quantity: int = Field(default=0, ge=0)
    supplier_id: str
    category: str | None = None
    rating: float = Field(default=0.0, ge=0, le=5)
    image_url: str | None = None


class Material(MaterialCreate, _Persisted):
    supplier: Profile | None = None


class OrderCreate(_Payload):
    order_number: str
    client_id: str
    supplier_id: str
    project_id: str | None = None
    material_id: str | None = None
    quantity: int = Field(gt=0)
    unit_price: Decimal = Field(ge=0)
    total_price: Decimal = Field(ge=0)
    status: OrderStatus = OrderStatus.PENDING


class Order(OrderCreate, _Persisted):
    client: Profile | None = None
    supplier: Profile | None = None
    project: Project | None = None
    material: Material | None = None


class ProjectUserCreate(_Payload):
    project_id: str
    user_id: str
    role: ProjectRole = ProjectRole.WORKER
    permissions: list[str] = Field(default_factory=list)


class ProjectUser(ProjectUserCreate, _Persisted):
    user: Profile | None = None


class ProjectInvitationCreate(_Payload):
    project_id: str
    invited_by: str
    invited_email: str
    invited_user_id: str | None = None
    role: InvitationRole = InvitationRole.WORKER
    permissions: list[str] = Field(default_factory=list)
    status: InvitationStatus = InvitationStatus.PENDING
    message: str | None = None
    expires_at: datetime | None = None
    responded_at: datetime | None = None


class ProjectInvitation(ProjectInvitationCreate, _Persisted):
    expires_at: datetime
    project: Project | None = None
    inviter: Profile | None = None


class IoTSensor(_Persisted):
    project_id: str
    sensor_type: str
    location: str
    value: float
    unit: str | None = None
    status: SensorStatus = SensorStatus.NORMAL


class IoTThresholdCreate(_Payload):
    """Alert bounds configured for one sensor (all optional)."""

    sensor_id: str
    min_value: float | None = None
    max_value: float | None = None
    warning_threshold: float | None = None
    critical_threshold: float | None = None


class IoTThreshold(IoTThresholdCreate, _Persisted):
    pass


class Drone(_Persisted):
    name: str
    model: str | None = None
    status: DroneStatus = DroneStatus.AVAILABLE
    battery_level: int = Field(default=100, ge=0, le=100)
    altitude: float | None = None
    project_id: str | None = None


class ProjectActivityCreate(_Payload):
    project_id: str
    activity_type: str
    description: str
    user_id: str


class ProjectActivity(ProjectActivityCreate, _Persisted):
    pass


class ScheduleDelay(BaseModel):
    """Schedule variance of a project against a linear expected progress."""

    model_config = ConfigDict(frozen=True)

    is_delayed: bool = False
    delay_days: int = Field(default=0, ge=0)
    time_progress: float = Field(default=0.0, ge=0, le=100)
