"""Data-access facade over the configured backend.

DatabaseService gives every entity the same contract whichever backend is
active:

- queries are cached per (entity, query, params) for ``CACHE_TTL_SECONDS``;
- create stamps ``created_at``/``updated_at`` and returns the stored model;
- update stamps ``updated_at`` and returns a bool;
- delete returns a bool;
- every write invalidates its entity family, plus the families that embed it.

Backend failures are logged and surfaced as None/False/[] and never raised.
Derived fields (checklist progress, expense totals) are maintained by the
caller-side services in ``terangabuild.services.checklist`` and
``terangabuild.services.expenses``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from terangabuild.backends.base import Backend, BackendError, EntityType, embedding_entities
from terangabuild.backends.fixtures import FixtureBackend
from terangabuild.config import AppConfig, get_config
from terangabuild.core.cache import CacheKey, QueryCache
from terangabuild.models import (
    ROLE_PERMISSIONS,
    ChecklistItem,
    ChecklistItemCreate,
    Drone,
    DroneStatus,
    InvitationRole,
    IoTSensor,
    IoTThreshold,
    IoTThresholdCreate,
    Material,
    MaterialCreate,
    Order,
    OrderCreate,
    Profile,
    Project,
    ProjectActivity,
    ProjectActivityCreate,
    ProjectCreate,
    ProjectExpense,
    ProjectExpenseCreate,
    ProjectInvitation,
    ProjectInvitationCreate,
    ProjectUser,
    ProjectUserCreate,
    UserType,
)

logger = structlog.get_logger(__name__)

M = TypeVar("M", bound=BaseModel)
T = TypeVar("T")

Payload = BaseModel | Mapping[str, Any]

PROFILE_SEARCH_FIELDS = ("full_name", "email", "company_name")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _values(payload: Payload, *, partial: bool = False) -> dict[str, Any]:
    """Plain column values from a pydantic payload or a mapping of updates."""
    if isinstance(payload, BaseModel):
        values = payload.model_dump(exclude_unset=partial)
    else:
        values = dict(payload)
    return {key: value.value if isinstance(value, Enum) else value for key, value in values.items()}


class DatabaseService:
    """Uniform CRUD facade with a short-lived read cache.

    Args:
        backend: Explicit backend. When omitted the mode is chosen from
            config: fixture mode unless both backend settings are present.
        config: Application config (defaults to ``get_config()``)
        cache: Read cache (defaults to a QueryCache using the configured TTL)
        clock: Source of "now" for record timestamps
    """

    def __init__(
        self,
        backend: Backend | None = None,
        *,
        config: AppConfig | None = None,
        cache: QueryCache | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.config = config or get_config()
        self.backend = backend if backend is not None else self._select_backend(self.config)
        self.cache = cache if cache is not None else QueryCache(ttl_seconds=self.config.cache.ttl_seconds)
        self._now = clock or _utcnow
        logger.info("data_access_mode_selected", mode=self.mode, backend=self.backend.name)

    @staticmethod
    def _select_backend(config: AppConfig) -> Backend:
        if config.demo_mode:
            return FixtureBackend()
        from terangabuild.backends.sql import SQLBackend

        return SQLBackend.from_config(config)

    @property
    def demo_mode(self) -> bool:
        return isinstance(self.backend, FixtureBackend)

    @property
    def mode(self) -> str:
        return "fixtures" if self.demo_mode else "live"

    def now(self) -> datetime:
        return self._now()

    async def close(self) -> None:
        await self.backend.close()

    # ------------------------------------------------------------------
    # Generic plumbing
    # ------------------------------------------------------------------

    async def _cached(
        self,
        entity: EntityType,
        query: str,
        loader: Callable[[], Awaitable[T]],
        default: T,
        **params: Any,
    ) -> T:
        key = CacheKey.build(entity, query, **params)
        entry = self.cache.get(key)
        if entry is not None:
            logger.debug("cache_hit", entity=entity.value, query=query)
            return entry.value

        logger.debug("cache_miss", entity=entity.value, query=query)
        try:
            value = await loader()
        except BackendError as e:
            logger.error("query_failed", entity=entity.value, query=query, error=str(e))
            return default
        self.cache.set(key, value)
        return value

    async def _list(
        self,
        entity: EntityType,
        model: type[M],
        query: str,
        filters: Mapping[str, Any] | None = None,
        *,
        order_by: str = "created_at",
        descending: bool = True,
        limit: int | None = None,
    ) -> list[M]:
        async def load() -> list[M]:
            rows = await self.backend.fetch(
                entity, filters, order_by=order_by, descending=descending, limit=limit
            )
            return [model.model_validate(row) for row in rows]

        return await self._cached(entity, query, load, [], **(filters or {}))

    async def _one(self, entity: EntityType, model: type[M], record_id: str) -> M | None:
        async def load() -> M | None:
            row = await self.backend.get(entity, record_id)
            return model.model_validate(row) if row is not None else None

        return await self._cached(entity, "by_id", load, None, id=record_id)

    async def _create(
        self,
        entity: EntityType,
        model: type[M],
        payload_model: type[BaseModel],
        payload: Payload,
    ) -> M | None:
        """Validate ``payload`` as ``payload_model`` and insert it.

        Invalid payloads never reach the backend, so stored rows always
        load back into ``model``.
        """
        try:
            validated = payload_model.model_validate(payload)
        except ValidationError as e:
            logger.error("create_rejected", entity=entity.value, error=str(e))
            return None
        now = self._now()
        values = {**_values(validated), "created_at": now, "updated_at": now}
        try:
            record = await self.backend.insert(entity, values)
        except BackendError as e:
            logger.error("create_failed", entity=entity.value, error=str(e))
            return None
        self._invalidate(entity)
        logger.info("record_created", entity=entity.value, id=record["id"])
        return model.model_validate(record)

    async def _update(self, entity: EntityType, record_id: str, updates: Payload) -> bool:
        values = {**_values(updates, partial=True), "updated_at": self._now()}
        try:
            updated = await self.backend.update(entity, record_id, values)
        except BackendError as e:
            logger.error("update_failed", entity=entity.value, id=record_id, error=str(e))
            return False
        if updated:
            self._invalidate(entity)
        else:
            logger.warning("update_missing_record", entity=entity.value, id=record_id)
        return updated

    async def _delete(self, entity: EntityType, record_id: str) -> bool:
        try:
            deleted = await self.backend.delete(entity, record_id)
        except BackendError as e:
            logger.error("delete_failed", entity=entity.value, id=record_id, error=str(e))
            return False
        if deleted:
            self._invalidate(entity)
        return deleted

    def _invalidate(self, entity: EntityType) -> None:
        """Drop cached reads affected by a write to ``entity``.

        The whole entity family goes: a single write can change any list
        query of that family. Families embedding the entity go as well.
        """
        self.cache.invalidate(entity)
        for dependent in embedding_entities(entity):
            self.cache.invalidate(dependent)

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    async def get_profile(self, user_id: str) -> Profile | None:
        return await self._one(EntityType.PROFILES, Profile, user_id)

    async def update_profile(self, user_id: str, updates: Payload) -> bool:
        return await self._update(EntityType.PROFILES, user_id, updates)

    async def get_professionals(self) -> list[Profile]:
        return await self._list(
            EntityType.PROFILES,
            Profile,
            "professionals",
            {"user_type": UserType.PROFESSIONAL.value},
        )

    async def search_users(self, query: str) -> list[Profile]:
        """Case-insensitive match on name, email or company.

        Queries shorter than the configured minimum return [] without
        touching the backend. Results are never cached.
        """
        text = (query or "").strip()
        if len(text) < self.config.search.min_query_length:
            return []
        try:
            rows = await self.backend.search(
                EntityType.PROFILES, text, PROFILE_SEARCH_FIELDS, self.config.search.max_results
            )
        except BackendError as e:
            logger.error("user_search_failed", query=text, error=str(e))
            return []
        return [Profile.model_validate(row) for row in rows]

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    async def get_projects_for_user(self, user_id: str, user_type: UserType | str) -> list[Project]:
        column = "client_id" if UserType(user_type) == UserType.CLIENT else "professional_id"
        return await self._list(EntityType.PROJECTS, Project, "for_user", {column: user_id})

    async def get_project(self, project_id: str) -> Project | None:
        return await self._one(EntityType.PROJECTS, Project, project_id)

    async def create_project(self, payload: ProjectCreate | Mapping[str, Any]) -> Project | None:
        return await self._create(EntityType.PROJECTS, Project, ProjectCreate, payload)

    async def update_project(self, project_id: str, updates: Payload) -> bool:
        return await self._update(EntityType.PROJECTS, project_id, updates)

    async def delete_project(self, project_id: str) -> bool:
        """Delete the project record only; checklist, expenses and members remain."""
        return await self._delete(EntityType.PROJECTS, project_id)

    # ------------------------------------------------------------------
    # Checklist
    # ------------------------------------------------------------------

    async def get_project_checklist(self, project_id: str) -> list[ChecklistItem]:
        return await self._list(
            EntityType.CHECKLIST_ITEMS,
            ChecklistItem,
            "for_project",
            {"project_id": project_id},
            order_by="order_index",
            descending=False,
        )

    async def get_checklist_item(self, item_id: str) -> ChecklistItem | None:
        return await self._one(EntityType.CHECKLIST_ITEMS, ChecklistItem, item_id)

    async def create_checklist_item(
        self, payload: ChecklistItemCreate | Mapping[str, Any]
    ) -> ChecklistItem | None:
        return await self._create(EntityType.CHECKLIST_ITEMS, ChecklistItem, ChecklistItemCreate, payload)

    async def update_checklist_item(self, item_id: str, updates: Payload) -> bool:
        return await self._update(EntityType.CHECKLIST_ITEMS, item_id, updates)

    async def delete_checklist_item(self, item_id: str) -> bool:
        return await self._delete(EntityType.CHECKLIST_ITEMS, item_id)

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------

    async def get_project_expenses(self, project_id: str) -> list[ProjectExpense]:
        return await self._list(
            EntityType.PROJECT_EXPENSES, ProjectExpense, "for_project", {"project_id": project_id}
        )

    async def create_project_expense(
        self, payload: ProjectExpenseCreate | Mapping[str, Any]
    ) -> ProjectExpense | None:
        return await self._create(EntityType.PROJECT_EXPENSES, ProjectExpense, ProjectExpenseCreate, payload)

    async def delete_project_expense(self, expense_id: str, project_id: str) -> bool:
        deleted = await self._delete(EntityType.PROJECT_EXPENSES, expense_id)
        if deleted:
            logger.info("expense_deleted", expense_id=expense_id, project_id=project_id)
        return deleted

    # ------------------------------------------------------------------
    # Materials and orders
    # ------------------------------------------------------------------

    async def get_materials(self) -> list[Material]:
        return await self._list(EntityType.MATERIALS, Material, "all")

    async def get_materials_by_supplier(self, supplier_id: str) -> list[Material]:
        return await self._list(
            EntityType.MATERIALS, Material, "by_supplier", {"supplier_id": supplier_id}
        )

    async def create_material(self, payload: MaterialCreate | Mapping[str, Any]) -> Material | None:
        return await self._create(EntityType.MATERIALS, Material, MaterialCreate, payload)

    async def update_material(self, material_id: str, updates: Payload) -> bool:
        return await self._update(EntityType.MATERIALS, material_id, updates)

    async def delete_material(self, material_id: str) -> bool:
        return await self._delete(EntityType.MATERIALS, material_id)

    async def get_orders_for_project(self, project_id: str) -> list[Order]:
        return await self._list(EntityType.ORDERS, Order, "for_project", {"project_id": project_id})

    async def get_orders_for_user(self, user_id: str, user_type: UserType | str) -> list[Order]:
        """Orders placed by a client, or received by a supplier (professional)."""
        column = "client_id" if UserType(user_type) == UserType.CLIENT else "supplier_id"
        return await self._list(EntityType.ORDERS, Order, "for_user", {column: user_id})

    async def create_order(self, payload: OrderCreate | Mapping[str, Any]) -> Order | None:
        return await self._create(EntityType.ORDERS, Order, OrderCreate, payload)

    # ------------------------------------------------------------------
    # Team and invitations
    # ------------------------------------------------------------------

    async def get_project_users(self, project_id: str) -> list[ProjectUser]:
        return await self._list(
            EntityType.PROJECT_USERS, ProjectUser, "for_project", {"project_id": project_id}
        )

    async def add_project_user(
        self, payload: ProjectUserCreate | Mapping[str, Any]
    ) -> ProjectUser | None:
        return await self._create(EntityType.PROJECT_USERS, ProjectUser, ProjectUserCreate, payload)

    async def remove_project_user(self, project_user_id: str) -> bool:
        return await self._delete(EntityType.PROJECT_USERS, project_user_id)

    async def get_project_invitations(self, project_id: str) -> list[ProjectInvitation]:
        return await self._list(
            EntityType.PROJECT_INVITATIONS,
            ProjectInvitation,
            "for_project",
            {"project_id": project_id},
        )

    async def create_project_invitation(
        self, payload: ProjectInvitationCreate | Mapping[str, Any]
    ) -> ProjectInvitation | None:
        """Create an invitation, defaulting expiry and the role's permissions."""
        try:
            invitation = ProjectInvitationCreate.model_validate(payload)
        except ValidationError as e:
            logger.error("create_rejected", entity=EntityType.PROJECT_INVITATIONS.value, error=str(e))
            return None

        defaults: dict[str, Any] = {}
        if invitation.expires_at is None:
            defaults["expires_at"] = self._now() + timedelta(days=self.config.invitation_ttl_days)
        if not invitation.permissions:
            defaults["permissions"] = list(ROLE_PERMISSIONS[InvitationRole(invitation.role)])
        return await self._create(
            EntityType.PROJECT_INVITATIONS,
            ProjectInvitation,
            ProjectInvitationCreate,
            invitation.model_copy(update=defaults),
        )

    # ------------------------------------------------------------------
    # Site monitoring and activity feed
    # ------------------------------------------------------------------

    async def get_iot_sensors_for_project(self, project_id: str) -> list[IoTSensor]:
        return await self._list(
            EntityType.IOT_SENSORS, IoTSensor, "for_project", {"project_id": project_id}
        )

    async def get_iot_thresholds_for_sensor(self, sensor_id: str) -> list[IoTThreshold]:
        return await self._list(
            EntityType.IOT_THRESHOLDS, IoTThreshold, "for_sensor", {"sensor_id": sensor_id}
        )

    async def create_iot_threshold(self, payload: Payload) -> IoTThreshold | None:
        """Store alert bounds for a sensor. Returns ``None`` on failure."""
        return await self._create(EntityType.IOT_THRESHOLDS, IoTThreshold, IoTThresholdCreate, payload)

    async def get_drones(self) -> list[Drone]:
        return await self._list(EntityType.DRONES, Drone, "all")

    async def update_drone_status(
        self,
        drone_id: str,
        status: DroneStatus | str,
        project_id: str | None = None,
    ) -> bool:
        """Set a drone's status and assignment; no project_id clears the assignment."""
        return await self._update(
            EntityType.DRONES,
            drone_id,
            {"status": DroneStatus(status).value, "project_id": project_id},
        )

    async def get_project_activities(self, project_id: str) -> list[ProjectActivity]:
        return await self._list(
            EntityType.PROJECT_ACTIVITIES,
            ProjectActivity,
            "for_project",
            {"project_id": project_id},
        )

    async def create_project_activity(
        self, payload: ProjectActivityCreate | Mapping[str, Any]
    ) -> ProjectActivity | None:
        return await self._create(EntityType.PROJECT_ACTIVITIES, ProjectActivity, ProjectActivityCreate, payload)
