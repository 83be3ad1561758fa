"""Sample dataset served by the fixture backend.

build_dataset() returns freshly built records on each call so callers can
mutate them freely. Project progress matches the completed share of each
project's checklist and ``spent`` equals the sum of its recorded expenses.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

from terangabuild.backends.base import EntityType
from terangabuild.checklist_templates import BUILTIN_TEMPLATES


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


def _profiles() -> list[dict[str, Any]]:
    base = _ts("2024-01-01T00:00:00")
    rows = [
        ("demo-client-1", "client@demo.com", "Amadou Diallo", "client", None, "+221 77 123 45 67"),
        ("demo-pro-1", "pro1@demo.com", "Fatou Sall", "professional", "BTP Excellence", "+221 77 234 56 78"),
        ("demo-pro-2", "pro2@demo.com", "Ibrahima Ndiaye", "professional", "Construction Moderne", "+221 77 345 67 89"),
        ("demo-supplier-1", "supplier1@demo.com", "Moussa Kane", "professional", "Matériaux du Sahel", "+221 77 111 22 33"),
        ("demo-supplier-2", "supplier2@demo.com", "Awa Ndiaye", "professional", "Carrière de Diass", "+221 77 222 33 44"),
        ("demo-supplier-3", "supplier3@demo.com", "Aminata Sy", "professional", "Briqueterie Moderne", "+221 77 333 44 55"),
        ("demo-supplier-4", "supplier4@demo.com", "Ousmane Diop", "professional", "Peintures & Déco", "+221 77 444 55 66"),
        ("demo-supplier-5", "supplier5@demo.com", "Cheikh Fall", "professional", "Métallurgie Sénégal", "+221 77 555 66 77"),
    ]
    return [
        {
            "id": profile_id,
            "email": email,
            "full_name": full_name,
            "user_type": user_type,
            "company_name": company,
            "phone": phone,
            "created_at": base,
            "updated_at": base,
        }
        for profile_id, email, full_name, user_type, company, phone in rows
    ]


def _projects() -> list[dict[str, Any]]:
    return [
        {
            "id": "demo-project-1",
            "name": "Villa Moderne Dakar",
            "description": "Construction d'une villa moderne de 4 chambres avec piscine",
            "status": "in_progress",
            "progress": 58,
            "budget": Decimal("45000000"),
            "spent": Decimal("29250000"),
            "location": "Almadies, Dakar",
            "client_id": "demo-client-1",
            "professional_id": "demo-pro-1",
            "start_date": date(2024, 1, 15),
            "end_date": date(2024, 8, 15),
            "created_at": _ts("2024-01-10T09:00:00"),
            "updated_at": _ts("2024-06-01T10:30:00"),
        },
        {
            "id": "demo-project-2",
            "name": "Immeuble Commercial Thiès",
            "description": "Immeuble commercial R+3 avec parking souterrain",
            "status": "planning",
            "progress": 0,
            "budget": Decimal("85000000"),
            "spent": Decimal("12750000"),
            "location": "Centre-ville, Thiès",
            "client_id": "demo-client-1",
            "professional_id": "demo-pro-2",
            "start_date": date(2024, 3, 1),
            "end_date": date(2024, 12, 31),
            "created_at": _ts("2024-02-20T14:00:00"),
            "updated_at": _ts("2024-02-20T14:00:00"),
        },
    ]


def _checklist_items() -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    completed = 7
    previous_id: str | None = None
    for index, step in enumerate(BUILTIN_TEMPLATES["villa"]["items"], start=1):
        item_id = f"demo-checklist-{index}"
        done = index <= completed
        created = _ts("2024-01-15T08:00:00")
        rows.append(
            {
                "id": item_id,
                "project_id": "demo-project-1",
                "template_id": "villa",
                "title": step["title"],
                "description": step["description"],
                "order_index": index,
                "estimated_duration": step["estimated_duration"],
                "dependencies": [previous_id] if previous_id else [],
                "is_completed": done,
                "completed_at": _ts(f"2024-{min(index, 6):02d}-10T17:00:00") if done else None,
                "completed_by": "demo-pro-1" if done else None,
                "due_date": None,
                "priority": step["priority"],
                "created_at": created,
                "updated_at": created,
            }
        )
        previous_id = item_id
    return rows


def _materials() -> list[dict[str, Any]]:
    rows = [
        ("Ciment Portland 42.5", "Ciment haute résistance pour béton armé", "4500", "sac 50kg", 500, "demo-supplier-1", "Ciment", 4.8),
        ("Fer à béton 12mm", "Barres d'acier HA pour ferraillage", "5200", "barre 12m", 800, "demo-supplier-5", "Acier", 4.6),
        ("Fer à béton 8mm", "Barres d'acier HA pour étriers", "2800", "barre 12m", 1200, "demo-supplier-5", "Acier", 4.5),
        ("Sable de dune", "Sable fin pour mortier et enduit", "15000", "m³", 200, "demo-supplier-2", "Granulats", 4.3),
        ("Gravier concassé 5/15", "Gravier pour béton de structure", "18000", "m³", 150, "demo-supplier-2", "Granulats", 4.4),
        ("Agglos creux 15", "Blocs de ciment creux 15x20x40", "450", "unité", 10000, "demo-supplier-3", "Maçonnerie", 4.7),
        ("Agglos pleins 20", "Blocs de ciment pleins pour fondations", "650", "unité", 6000, "demo-supplier-3", "Maçonnerie", 4.5),
        ("Peinture acrylique blanche", "Peinture intérieure lessivable", "25000", "pot 20L", 120, "demo-supplier-4", "Peinture", 4.2),
        ("Peinture façade", "Peinture extérieure anti-UV", "32000", "pot 20L", 80, "demo-supplier-4", "Peinture", 4.4),
        ("Carrelage grès cérame 60x60", "Carrelage sol intérieur", "12500", "m²", 900, "demo-supplier-1", "Revêtement", 4.6),
        ("Tôle bac alu", "Couverture aluminium laqué", "9500", "m²", 400, "demo-supplier-5", "Couverture", 4.3),
        ("Câble électrique 2.5mm²", "Câble cuivre rigide, rouleau de 100m", "38000", "rouleau", 60, "demo-supplier-1", "Électricité", 4.5),
    ]
    created = _ts("2024-01-05T08:00:00")
    return [
        {
            "id": f"demo-material-{index}",
            "name": name,
            "description": description,
            "price": Decimal(price),
            "unit": unit,
            "stock_quantity": stock,
            "supplier_id": supplier_id,
            "category": category,
            "rating": rating,
            "image_url": None,
            "created_at": created,
            "updated_at": created,
        }
        for index, (name, description, price, unit, stock, supplier_id, category, rating) in enumerate(rows, start=1)
    ]


def _orders() -> list[dict[str, Any]]:
    return [
        {
            "id": "demo-order-1",
            "order_number": "CMD-2024-001",
            "client_id": "demo-client-1",
            "supplier_id": "demo-supplier-1",
            "project_id": "demo-project-1",
            "material_id": "demo-material-1",
            "quantity": 200,
            "unit_price": Decimal("4500"),
            "total_price": Decimal("900000"),
            "status": "delivered",
            "created_at": _ts("2024-02-01T10:00:00"),
            "updated_at": _ts("2024-02-05T15:00:00"),
        },
        {
            "id": "demo-order-2",
            "order_number": "CMD-2024-002",
            "client_id": "demo-client-1",
            "supplier_id": "demo-supplier-5",
            "project_id": "demo-project-1",
            "material_id": "demo-material-2",
            "quantity": 150,
            "unit_price": Decimal("5200"),
            "total_price": Decimal("780000"),
            "status": "shipped",
            "created_at": _ts("2024-03-12T09:30:00"),
            "updated_at": _ts("2024-03-14T11:00:00"),
        },
    ]


def _sensors() -> list[dict[str, Any]]:
    created = _ts("2024-04-01T06:00:00")
    rows = [
        ("demo-sensor-1", "temperature", "Dalle R+1", 32.5, "°C", "normal"),
        ("demo-sensor-2", "humidity", "Fondations", 78.0, "%", "warning"),
        ("demo-sensor-3", "vibration", "Structure béton", 0.4, "mm/s", "normal"),
    ]
    return [
        {
            "id": sensor_id,
            "project_id": "demo-project-1",
            "sensor_type": sensor_type,
            "location": location,
            "value": value,
            "unit": unit,
            "status": status,
            "created_at": created,
            "updated_at": created,
        }
        for sensor_id, sensor_type, location, value, unit, status in rows
    ]


def _drones() -> list[dict[str, Any]]:
    created = _ts("2024-03-01T08:00:00")
    rows = [
        ("demo-drone-1", "Inspecteur Alpha", "DJI Mavic 3 Enterprise", "in_flight", 72, 45.0, "demo-project-1"),
        ("demo-drone-2", "Topographe Beta", "DJI Phantom 4 RTK", "available", 100, None, None),
        ("demo-drone-3", "Surveillant Gamma", "Autel EVO II", "maintenance", 15, None, None),
    ]
    return [
        {
            "id": drone_id,
            "name": name,
            "model": model,
            "status": status,
            "battery_level": battery,
            "altitude": altitude,
            "project_id": project_id,
            "created_at": created,
            "updated_at": created,
        }
        for drone_id, name, model, status, battery, altitude, project_id in rows
    ]


def _activities() -> list[dict[str, Any]]:
    return [
        {
            "id": "demo-activity-1",
            "project_id": "demo-project-1",
            "activity_type": "checklist_completed",
            "description": "Murs et cloisons terminés",
            "user_id": "demo-pro-1",
            "created_at": _ts("2024-06-10T17:00:00"),
            "updated_at": _ts("2024-06-10T17:00:00"),
        },
        {
            "id": "demo-activity-2",
            "project_id": "demo-project-1",
            "activity_type": "expense_added",
            "description": "Dépense ajoutée : Main d'œuvre maçonnerie",
            "user_id": "demo-pro-1",
            "created_at": _ts("2024-05-20T12:00:00"),
            "updated_at": _ts("2024-05-20T12:00:00"),
        },
    ]


def _expenses() -> list[dict[str, Any]]:
    rows = [
        ("demo-expense-1", "demo-project-1", "Achat ciment et fer", "225000", "materials", date(2024, 5, 15)),
        ("demo-expense-2", "demo-project-1", "Main d'œuvre maçonnerie", "850000", "labor", date(2024, 5, 20)),
        ("demo-expense-3", "demo-project-1", "Gros œuvre et structure béton", "28175000", "labor", date(2024, 4, 30)),
        ("demo-expense-4", "demo-project-2", "Études architecturales", "12750000", "other", date(2024, 2, 28)),
    ]
    return [
        {
            "id": expense_id,
            "project_id": project_id,
            "description": description,
            "amount": Decimal(amount),
            "category": category,
            "date": spent_on,
            "created_by": "demo-pro-1" if project_id == "demo-project-1" else "demo-pro-2",
            "created_at": datetime.combine(spent_on, datetime.min.time(), tzinfo=timezone.utc),
            "updated_at": datetime.combine(spent_on, datetime.min.time(), tzinfo=timezone.utc),
        }
        for expense_id, project_id, description, amount, category, spent_on in rows
    ]


def _project_users() -> list[dict[str, Any]]:
    return [
        {
            "id": "demo-project-user-1",
            "project_id": "demo-project-1",
            "user_id": "demo-pro-2",
            "role": "supervisor",
            "permissions": ["view_project", "edit_checklist", "view_team", "view_expenses", "validate_tasks"],
            "created_at": _ts("2024-02-01T09:00:00"),
            "updated_at": _ts("2024-02-01T09:00:00"),
        }
    ]


def build_dataset() -> dict[EntityType, list[dict[str, Any]]]:
    return {
        EntityType.PROFILES: _profiles(),
        EntityType.PROJECTS: _projects(),
        EntityType.CHECKLIST_ITEMS: _checklist_items(),
        EntityType.MATERIALS: _materials(),
        EntityType.ORDERS: _orders(),
        EntityType.IOT_SENSORS: _sensors(),
        EntityType.IOT_THRESHOLDS: [],
        EntityType.DRONES: _drones(),
        EntityType.PROJECT_ACTIVITIES: _activities(),
        EntityType.PROJECT_EXPENSES: _expenses(),
        EntityType.PROJECT_USERS: _project_users(),
        EntityType.PROJECT_INVITATIONS: [],
    }
