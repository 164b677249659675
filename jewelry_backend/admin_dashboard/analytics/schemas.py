from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator, model_validator
from typing import Any, List, Optional
from datetime import date, datetime, timezone
from enum import Enum


class ReportKind(str, Enum):
    DAILY = "daily"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"


DEFAULT_ORDER_STATUS = "Pending"
DEFAULT_PAYMENT_STATUS = "Pending"
COMPLETED_STATUS = "Delivered"
CANCELLED_STATUS = "Cancelled"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Normalize a stored timestamp to a naive UTC datetime.

    Returns None for missing or unparseable values so that such records
    never land in any report window.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            moment = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment


def _as_identifier(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, dict):
        value = value.get("_id") or value.get("id")
        if value is None:
            return None
    return str(value)


"""
___________________________________________________

1.  Source Records
___________________________________________________

"""
class RecordModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class GuestContact(RecordModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = Field(default=None, validation_alias=AliasChoices("phone", "contactNumber"))


class LineItemRecord(RecordModel):
    product_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("product_id", "productId", "product_uid", "_id"))
    name: Optional[str] = None
    quantity: int = 1
    unit_price: float = Field(default=0.0, validation_alias=AliasChoices("unit_price", "price"))

    @field_validator("product_id", mode="before")
    @classmethod
    def _product_id(cls, value):
        return _as_identifier(value)

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity(cls, value):
        if not value:
            return 1
        return max(int(value), 1)

    @field_validator("unit_price", mode="before")
    @classmethod
    def _unit_price(cls, value):
        return 0.0 if value is None or value == "" else value


class OrderRecord(RecordModel):
    id: str = Field(validation_alias=AliasChoices("id", "_id", "uid"))
    created_at: Optional[datetime] = Field(default=None, validation_alias=AliasChoices("created_at", "createdAt"))
    total_amount: float = Field(default=0.0, validation_alias=AliasChoices("total_amount", "totalAmount"))
    status: str = DEFAULT_ORDER_STATUS
    payment_status: str = Field(default=DEFAULT_PAYMENT_STATUS, validation_alias=AliasChoices("payment_status", "paymentStatus"))
    items: List[LineItemRecord] = Field(default_factory=list, validation_alias=AliasChoices("items", "products"))
    buyer_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("buyer_id", "userId", "user_id", "user_uid"))
    buyer_name: Optional[str] = None
    guest_contact: Optional[GuestContact] = Field(default=None, validation_alias=AliasChoices("guest_contact", "guestInfo", "guest"))

    @model_validator(mode="before")
    @classmethod
    def _unpack_populated_buyer(cls, data):
        # A populated buyer reference carries the display name along with the id
        if isinstance(data, dict):
            for key in ("buyer_id", "userId", "user_id", "user_uid"):
                buyer = data.get(key)
                if isinstance(buyer, dict):
                    data = dict(data)
                    data[key] = buyer.get("_id") or buyer.get("id")
                    if not data.get("buyer_name"):
                        data["buyer_name"] = buyer.get("name")
                    break
        return data

    @field_validator("id", "buyer_id", mode="before")
    @classmethod
    def _identifiers(cls, value):
        return _as_identifier(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def _created_at(cls, value):
        return parse_timestamp(value)

    @field_validator("total_amount", mode="before")
    @classmethod
    def _total_amount(cls, value):
        return 0.0 if value is None or value == "" else value

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value):
        return value or DEFAULT_ORDER_STATUS

    @field_validator("payment_status", mode="before")
    @classmethod
    def _payment_status(cls, value):
        return value or DEFAULT_PAYMENT_STATUS

    @field_validator("items", mode="before")
    @classmethod
    def _items(cls, value):
        return value or []


class UserRecord(RecordModel):
    id: str = Field(validation_alias=AliasChoices("id", "_id", "uid"))
    created_at: Optional[datetime] = Field(default=None, validation_alias=AliasChoices("created_at", "createdAt"))
    role: str = "user"
    name: Optional[str] = None
    email: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _identifier(cls, value):
        return _as_identifier(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def _created_at(cls, value):
        return parse_timestamp(value)

    @field_validator("role", mode="before")
    @classmethod
    def _role(cls, value):
        return value or "user"


class ProductRecord(RecordModel):
    id: str = Field(validation_alias=AliasChoices("id", "_id", "uid"))
    title: str = "Untitled"
    price: float = 0.0
    category: Optional[str] = None
    material: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, validation_alias=AliasChoices("created_at", "createdAt"))

    @field_validator("id", mode="before")
    @classmethod
    def _identifier(cls, value):
        return _as_identifier(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def _created_at(cls, value):
        return parse_timestamp(value)

    @field_validator("price", mode="before")
    @classmethod
    def _price(cls, value):
        return 0.0 if value is None or value == "" else value


"""
___________________________________________________

2.  Period Windows
___________________________________________________

"""
class PeriodWindow(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime
    kind: ReportKind

    def contains(self, moment: Optional[datetime]) -> bool:
        return moment is not None and self.start <= moment < self.end


class ReportPeriod(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ReportKind
    anchor: str
    current: PeriodWindow
    previous: PeriodWindow


"""
___________________________________________________

3.  Report Output
___________________________________________________

"""
class PeriodMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    revenue: float = 0.0
    order_count: int = 0
    average_order_value: float = 0.0
    completed_count: int = 0
    cancelled_count: int = 0
    cancellation_rate_pct: float = 0.0
    peak_hour: Optional[int] = None  # None when there are no orders


class Growth(BaseModel):
    model_config = ConfigDict(frozen=True)

    percentage: float
    is_up: bool


class GrowthSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    revenue: Growth
    orders: Growth
    average_order_value: Growth
    new_customers: Growth


class TopProduct(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: str
    title: str
    price: float
    revenue: float
    units_sold: int


class ChartPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    start: date
    revenue: float


class Report(BaseModel):
    model_config = ConfigDict(frozen=True)

    period: ReportPeriod
    current_metrics: PeriodMetrics
    previous_metrics: PeriodMetrics
    growth: GrowthSummary
    top_products: List[TopProduct]
    chart_series: List[ChartPoint]
    filtered_order_count: int
    new_customers: int
    previous_new_customers: int
    unresolved_line_items: int = 0
    has_data: bool


class FailureDetail(BaseModel):
    model_config = ConfigDict(frozen=True)

    error_code: str
    message: str

    @classmethod
    def from_exception(cls, exc: Exception) -> "FailureDetail":
        return cls(
            error_code=getattr(exc, "error_code", "jewelry_error"),
            message=str(exc) or exc.__class__.__name__
        )


class ReportResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    report: Optional[Report] = None
    failure: Optional[FailureDetail] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class ExportResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: Optional[bytes] = None
    filename: Optional[str] = None
    row_count: int = 0
    failure: Optional[FailureDetail] = None

    @property
    def ok(self) -> bool:
        return self.failure is None
