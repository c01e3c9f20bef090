from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import (
    BaseModel,
    EmailStr,
    Field,
    computed_field,
    field_validator,
    model_validator,
)

from models.enums import (
    ApplicationStatus,
    NotificationKind,
    PaymentStatus,
    PaymentType,
    PropertyType,
)
from models.shape import convert_location
from models.utils import next_payment_date, split_csv


def reject_null(value, field: str):
    if value is None:
        raise ValueError(f"{field} cannot be null")
    return value


class Coordinates(BaseModel):
    longitude: float
    latitude: float


class LocationOut(BaseModel):
    id: int
    address: str
    city: str
    state: str
    country: str
    postal_code: str
    coordinates: Coordinates

    model_config = {"from_attributes": True}

    @field_validator("coordinates", mode="before")
    @classmethod
    def resolve_point(cls, v):
        if isinstance(v, (dict, Coordinates)):
            return v
        return convert_location(v)


class PropertyFields(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    price_per_month: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    security_deposit: Decimal = Field(
        Decimal("0"), ge=0, max_digits=12, decimal_places=2
    )
    application_fee: Decimal = Field(
        Decimal("0"), ge=0, max_digits=12, decimal_places=2
    )
    amenities: List[str] = Field(default_factory=list)
    highlights: List[str] = Field(default_factory=list)
    is_pets_allowed: bool = False
    is_parking_included: bool = False
    beds: int = Field(..., ge=0)
    baths: float = Field(..., ge=0)
    square_feet: int = Field(..., gt=0)
    property_type: PropertyType

    @field_validator("amenities", "highlights", mode="before")
    @classmethod
    def parse_list(cls, v):
        return split_csv(v)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class PropertyCreate(PropertyFields):
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    postal_code: str = Field(..., min_length=1)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    @model_validator(mode="after")
    def both_or_neither_coordinate(self):
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be supplied together")
        return self

    def location_fields(self) -> dict:
        return self.model_dump(
            include={"address", "city", "state", "country", "postal_code"}
        )

    def property_fields(self) -> dict:
        return self.model_dump(include=set(PropertyFields.model_fields))


class PropertyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price_per_month: Optional[Decimal] = Field(None, gt=0)
    security_deposit: Optional[Decimal] = Field(None, ge=0)
    application_fee: Optional[Decimal] = Field(None, ge=0)
    amenities: Optional[List[str]] = None
    highlights: Optional[List[str]] = None
    photo_urls: Optional[List[str]] = None
    is_pets_allowed: Optional[bool] = None
    is_parking_included: Optional[bool] = None
    beds: Optional[int] = Field(None, ge=0)
    baths: Optional[float] = Field(None, ge=0)
    square_feet: Optional[int] = Field(None, gt=0)
    property_type: Optional[PropertyType] = None

    @field_validator("amenities", "highlights", mode="before")
    @classmethod
    def parse_list(cls, v, info):
        return split_csv(reject_null(v, info.field_name))

    @field_validator(
        "name",
        "description",
        "price_per_month",
        "security_deposit",
        "application_fee",
        "photo_urls",
        "is_pets_allowed",
        "is_parking_included",
        "beds",
        "baths",
        "square_feet",
        "property_type",
        mode="before",
    )
    @classmethod
    def not_null(cls, v, info):
        return reject_null(v, info.field_name)


class PropertyFilters(BaseModel):
    favorite_ids: List[int] = Field(default_factory=list)
    price_min: Optional[Decimal] = Field(None, ge=0)
    price_max: Optional[Decimal] = Field(None, ge=0)
    beds: Optional[int] = Field(None, ge=0)
    baths: Optional[float] = Field(None, ge=0)
    property_type: Optional[PropertyType] = None
    square_feet_min: Optional[int] = Field(None, ge=0)
    square_feet_max: Optional[int] = Field(None, ge=0)
    amenities: List[str] = Field(default_factory=list)
    available_from: Optional[date] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    radius_km: Optional[float] = Field(None, gt=0)

    @field_validator("beds", "baths", "property_type", mode="before")
    @classmethod
    def any_means_unset(cls, v):
        if isinstance(v, str) and v.strip().lower() in ("", "any"):
            return None
        return v

    @field_validator("favorite_ids", mode="before")
    @classmethod
    def parse_ids(cls, v):
        try:
            return [int(x) for x in split_csv(v)]
        except ValueError:
            raise ValueError("favoriteIds must be a comma separated list of ids")

    @field_validator("amenities", mode="before")
    @classmethod
    def parse_amenities(cls, v):
        return split_csv(v)

    @model_validator(mode="after")
    def check_ranges(self):
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be supplied together")
        if (
            self.price_min is not None
            and self.price_max is not None
            and self.price_min > self.price_max
        ):
            raise ValueError("priceMin cannot exceed priceMax")
        if (
            self.square_feet_min is not None
            and self.square_feet_max is not None
            and self.square_feet_min > self.square_feet_max
        ):
            raise ValueError("squareFeetMin cannot exceed squareFeetMax")
        return self

    @property
    def has_center(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class PropertyBriefOut(BaseModel):
    id: int
    name: str
    price_per_month: Decimal
    property_type: PropertyType
    beds: int
    baths: float
    photo_urls: List[str] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class PropertyOut(BaseModel):
    id: int
    name: str
    description: str
    price_per_month: Decimal
    security_deposit: Decimal
    application_fee: Decimal
    photo_urls: List[str] = Field(default_factory=list)
    amenities: List[str] = Field(default_factory=list)
    highlights: List[str] = Field(default_factory=list)
    is_pets_allowed: bool
    is_parking_included: bool
    beds: int
    baths: float
    square_feet: int
    property_type: PropertyType
    posted_date: Optional[datetime] = None
    average_rating: Optional[float] = None
    number_of_reviews: Optional[int] = None
    manager_cognito_id: str
    location: LocationOut
    distance_km: Optional[float] = None

    model_config = {"from_attributes": True}


class ManagerCreate(BaseModel):
    cognito_id: str = Field(..., min_length=1, max_length=128)
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone_number: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        if not isinstance(value, str):
            return value
        return value.strip().lower()


class ManagerUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = None

    @field_validator("name", "email", mode="before")
    @classmethod
    def not_null(cls, v, info):
        return reject_null(v, info.field_name)


class ManagerOut(BaseModel):
    id: int
    cognito_id: str
    name: str
    email: str
    phone_number: Optional[str] = None

    model_config = {"from_attributes": True}


class TenantCreate(ManagerCreate):
    pass


class TenantUpdate(ManagerUpdate):
    is_suspended: Optional[bool] = None

    @field_validator("is_suspended", mode="before")
    @classmethod
    def suspension_not_null(cls, v):
        return reject_null(v, "is_suspended")


class TenantOut(BaseModel):
    id: int
    cognito_id: str
    name: str
    email: str
    phone_number: Optional[str] = None
    balance: Decimal
    is_suspended: bool

    model_config = {"from_attributes": True}


class TenantDetailOut(TenantOut):
    favorites: List[PropertyBriefOut] = Field(default_factory=list)


class LeaseOut(BaseModel):
    id: int
    start_date: datetime
    end_date: datetime
    rent: Decimal
    deposit: Decimal
    property_id: int
    tenant_cognito_id: str

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def next_payment_date(self) -> datetime:
        return next_payment_date(self.start_date)


class LeaseWithPropertyOut(LeaseOut):
    property: Optional[PropertyBriefOut] = None


class ApplicationCreate(BaseModel):
    property_id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone_number: str = Field(..., min_length=3, max_length=32)
    message: Optional[str] = None
    application_date: Optional[datetime] = None


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus


class ApplicationOut(BaseModel):
    id: int
    application_date: datetime
    status: ApplicationStatus
    property_id: int
    tenant_cognito_id: str
    name: str
    email: str
    phone_number: str
    message: Optional[str] = None
    lease_id: Optional[int] = None
    property: Optional[PropertyBriefOut] = None
    lease: Optional[LeaseOut] = None

    model_config = {"from_attributes": True}


class PaymentCreate(BaseModel):
    lease_id: int = Field(..., gt=0)
    amount_due: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    amount_paid: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    due_date: datetime
    payment_date: Optional[datetime] = None


class DepositRequest(BaseModel):
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    due_date: Optional[datetime] = None


class WithdrawalRequest(BaseModel):
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    destination: str = Field(..., min_length=1, max_length=255)


class FundRequest(BaseModel):
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)


class PaymentOut(BaseModel):
    id: int
    amount_due: Decimal
    amount_paid: Decimal
    due_date: datetime
    payment_date: datetime
    payment_status: PaymentStatus
    type: PaymentType
    is_approved: bool
    receipt_path: Optional[str] = None
    destination: Optional[str] = None
    lease_id: Optional[int] = None
    tenant_cognito_id: str

    model_config = {"from_attributes": True}


class PaymentWithLeaseOut(PaymentOut):
    lease: Optional[LeaseWithPropertyOut] = None


class LedgerEntryOut(BaseModel):
    payment: PaymentOut
    balance: Decimal


class EmailAllRequest(BaseModel):
    subject: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)


class EmailUserRequest(EmailAllRequest):
    email: EmailStr


class EmailSendResult(BaseModel):
    success: bool
    sent: int


class NotificationOut(BaseModel):
    id: int
    kind: NotificationKind
    title: str
    body: str
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}
