"""Typed record shapes for every dashboard collection - no I/O dependencies."""

from dataclasses import dataclass, field, fields
from datetime import date, datetime, tzinfo
from decimal import Decimal, InvalidOperation

TASK_STATUSES = ("todo", "in-progress", "completed")


def parse_datetime(value, tz: tzinfo | None = None) -> datetime | None:
    """Parse an ISO-8601 timestamp from the backend, or None if unusable."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, datetime.min.time())
    elif isinstance(value, str) and value:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if tz is not None and parsed.tzinfo is not None:
        parsed = parsed.astimezone(tz)
    return parsed


def parse_date(value) -> date | None:
    """Parse a date-only field; timestamps are truncated to their date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return date.fromisoformat(value.split("T")[0])
        except ValueError:
            return None
    return None


def parse_decimal(value) -> Decimal | None:
    """Parse a monetary amount without going through binary floats."""
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    # NaN and Infinity are valid numeric values but never a usable amount
    return parsed if parsed.is_finite() else None


def _text(data: dict, key: str) -> str:
    return data.get(key) or ""


def _list(data: dict, key: str) -> list[str]:
    value = data.get(key)
    if isinstance(value, list):
        return [str(v) for v in value]
    return []


def _json_list(data: dict, key: str) -> list:
    value = data.get(key)
    return list(value) if isinstance(value, list) else []


def _int(data: dict, key: str) -> int:
    try:
        return int(data.get(key) or 0)
    except (TypeError, ValueError):
        return 0


def _serialize(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


@dataclass
class Record:
    """Fields shared by every persisted record."""

    id: str
    user_id: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_api(self) -> dict:
        """JSON body for create/update calls. Server-owned fields are omitted."""
        skip = {"id", "created_at", "updated_at"}
        return {f.name: _serialize(getattr(self, f.name)) for f in fields(self) if f.name not in skip}

    @staticmethod
    def _common(data: dict, tz: tzinfo | None) -> dict:
        return {
            "id": str(data.get("id", "")),
            "user_id": str(data.get("user_id") or ""),
            "created_at": parse_datetime(data.get("created_at"), tz),
            "updated_at": parse_datetime(data.get("updated_at"), tz),
        }


@dataclass
class Project(Record):
    title: str = ""
    description: str = ""
    company: str = ""
    status: str = "active"
    priority: str = "medium"
    progress: int = 0
    total_tasks: int = 0
    completed_tasks: int = 0
    start_date: date | None = None
    due_date: date | None = None
    budget: Decimal | None = None

    @classmethod
    def from_api(cls, data: dict, tz: tzinfo | None = None) -> "Project":
        return cls(
            **cls._common(data, tz),
            title=_text(data, "title"),
            description=_text(data, "description"),
            company=_text(data, "company"),
            status=data.get("status") or "active",
            priority=data.get("priority") or "medium",
            progress=_int(data, "progress"),
            total_tasks=_int(data, "total_tasks"),
            completed_tasks=_int(data, "completed_tasks"),
            start_date=parse_date(data.get("start_date")),
            due_date=parse_date(data.get("due_date")),
            budget=parse_decimal(data.get("budget")),
        )


@dataclass
class Task(Record):
    """A task; subtasks point at their parent through parent_task_id."""

    title: str = ""
    description: str = ""
    project_id: str | None = None
    priority: str = "medium"
    status: str = "todo"
    due_date: datetime | None = None
    estimated_time: str = ""
    parent_task_id: str | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"

    @property
    def is_subtask(self) -> bool:
        return bool(self.parent_task_id)

    @classmethod
    def from_api(cls, data: dict, tz: tzinfo | None = None) -> "Task":
        status = data.get("status")
        return cls(
            **cls._common(data, tz),
            title=_text(data, "title"),
            description=_text(data, "description"),
            project_id=data.get("project_id") or None,
            priority=data.get("priority") or "medium",
            # Unknown statuses land in the first Kanban column
            status=status if status in TASK_STATUSES else "todo",
            due_date=parse_datetime(data.get("due_date"), tz),
            estimated_time=_text(data, "estimated_time"),
            parent_task_id=data.get("parent_task_id") or None,
        )


@dataclass
class Sale(Record):
    project_name: str = ""
    client_name: str = ""
    business_name: str = ""
    client_phone: str = ""
    categories: list[str] = field(default_factory=list)
    sale_value: Decimal | None = None
    sale_date: date | None = None
    payment_status: str = "pending"
    client_rating: int = 0

    @classmethod
    def from_api(cls, data: dict, tz: tzinfo | None = None) -> "Sale":
        return cls(
            **cls._common(data, tz),
            project_name=_text(data, "project_name"),
            client_name=_text(data, "client_name"),
            business_name=_text(data, "business_name"),
            client_phone=_text(data, "client_phone"),
            categories=_list(data, "categories"),
            sale_value=parse_decimal(data.get("sale_value")),
            sale_date=parse_date(data.get("sale_date")),
            payment_status=data.get("payment_status") or "pending",
            client_rating=_int(data, "client_rating"),
        )


@dataclass
class Customer(Record):
    name: str = ""
    email: str = ""
    phone: str = ""
    social_media: str = ""
    company_name: str = ""
    segment: str = ""
    rating: int = 0

    @classmethod
    def from_api(cls, data: dict, tz: tzinfo | None = None) -> "Customer":
        return cls(
            **cls._common(data, tz),
            name=_text(data, "name"),
            email=_text(data, "email"),
            phone=_text(data, "phone"),
            social_media=_text(data, "social_media"),
            company_name=_text(data, "company_name"),
            segment=_text(data, "segment"),
            rating=_int(data, "rating"),
        )


@dataclass
class Note(Record):
    title: str = ""
    content: str = ""
    tags: list[str] = field(default_factory=list)
    is_favorite: bool = False

    @classmethod
    def from_api(cls, data: dict, tz: tzinfo | None = None) -> "Note":
        return cls(
            **cls._common(data, tz),
            title=_text(data, "title"),
            content=_text(data, "content"),
            tags=_list(data, "tags"),
            is_favorite=bool(data.get("is_favorite")),
        )


@dataclass
class Investment(Record):
    title: str = ""
    description: str = ""
    category: str = ""
    amount: Decimal | None = None
    investment_date: date | None = None
    payment_type: str = "one_time"
    recurrence: str = ""
    status: str = "active"
    vendor: str = ""
    tags: list[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict, tz: tzinfo | None = None) -> "Investment":
        return cls(
            **cls._common(data, tz),
            title=_text(data, "title"),
            description=_text(data, "description"),
            category=_text(data, "category"),
            amount=parse_decimal(data.get("amount")),
            investment_date=parse_date(data.get("investment_date")),
            payment_type=data.get("payment_type") or "one_time",
            recurrence=_text(data, "recurrence"),
            status=data.get("status") or "active",
            vendor=_text(data, "vendor"),
            tags=_list(data, "tags"),
        )


BRIEFING_STATUSES = ("draft", "in_progress", "completed", "approved")


@dataclass
class DesignBriefing(Record):
    title: str = ""
    client_name: str = ""
    project_type: str = ""
    target_audience: str = ""
    design_inspiration: str = ""
    main_objective: str = ""
    brand_personality: str = ""
    conversion_goals: list = field(default_factory=list)
    color_palette: dict = field(default_factory=dict)
    typography_primary: str = ""
    typography_secondary: str = ""
    brand_voice: str = ""
    logo_url: str = ""
    brand_assets: list = field(default_factory=list)
    status: str = "draft"

    @classmethod
    def from_api(cls, data: dict, tz: tzinfo | None = None) -> "DesignBriefing":
        status = data.get("status")
        palette = data.get("color_palette")
        return cls(
            **cls._common(data, tz),
            title=_text(data, "title"),
            client_name=_text(data, "client_name"),
            project_type=_text(data, "project_type"),
            target_audience=_text(data, "target_audience"),
            design_inspiration=_text(data, "design_inspiration"),
            main_objective=_text(data, "main_objective"),
            brand_personality=_text(data, "brand_personality"),
            # JSON columns; kept as stored
            conversion_goals=_json_list(data, "conversion_goals"),
            color_palette=palette if isinstance(palette, dict) else {},
            typography_primary=_text(data, "typography_primary"),
            typography_secondary=_text(data, "typography_secondary"),
            brand_voice=_text(data, "brand_voice"),
            logo_url=_text(data, "logo_url"),
            brand_assets=_json_list(data, "brand_assets"),
            status=status if status in BRIEFING_STATUSES else "draft",
        )

COLLECTIONS: dict[str, type[Record]] = {
    "projects": Project,
    "tasks": Task,
    "sales": Sale,
    "customers": Customer,
    "notes": Note,
    "investments": Investment,
    "design_briefings": DesignBriefing,
}


def record_from_api(collection: str, data: dict, tz: tzinfo | None = None) -> Record:
    """Build the typed record for a collection row."""
    try:
        cls = COLLECTIONS[collection]
    except KeyError:
        raise ValueError(f"Unknown collection: {collection}") from None
    return cls.from_api(data, tz)
