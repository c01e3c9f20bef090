from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from geoalchemy2 import Geography
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.get_db import Base

from .enums import (
    ApplicationStatus,
    NotificationKind,
    PaymentStatus,
    PaymentType,
    PropertyType,
)
from .shape import SRID, convert_location


def _enum(enum_cls):
    return Enum(
        enum_cls,
        native_enum=False,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
        length=32,
    )


Money = Numeric(12, 2)


tenant_favorites = Table(
    "tenant_favorites",
    Base.metadata,
    Column(
        "tenant_id",
        ForeignKey("tenants.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "property_id",
        ForeignKey("properties.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

tenant_properties = Table(
    "tenant_properties",
    Base.metadata,
    Column(
        "tenant_id",
        ForeignKey("tenants.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "property_id",
        ForeignKey("properties.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Location(Base):
    __tablename__ = "locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(120), nullable=False)
    state: Mapped[str] = mapped_column(String(120), nullable=False)
    country: Mapped[str] = mapped_column(String(120), nullable=False)
    postal_code: Mapped[str] = mapped_column(String(20), nullable=False)
    coordinates: Mapped[object] = mapped_column(
        Geography(geometry_type="POINT", srid=SRID), nullable=False
    )

    property: Mapped[Optional["Property"]] = relationship(
        "Property", back_populates="location", uselist=False
    )

    def as_dict(self):
        return {
            "id": self.id,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "country": self.country,
            "postal_code": self.postal_code,
            "coordinates": convert_location(self.coordinates),
        }


class Manager(Base):
    __tablename__ = "managers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    cognito_id: Mapped[str] = mapped_column(
        String(128), unique=True, index=True, nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    managed_properties: Mapped[List["Property"]] = relationship(
        "Property", back_populates="manager", passive_deletes=True
    )

    def __str__(self):
        return self.name


class Tenant(Base):
    __tablename__ = "tenants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    cognito_id: Mapped[str] = mapped_column(
        String(128), unique=True, index=True, nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    balance: Mapped[Decimal] = mapped_column(
        Money, nullable=False, default=Decimal("0.00")
    )
    is_suspended: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    applications: Mapped[List["Application"]] = relationship(
        "Application", back_populates="tenant", passive_deletes=True
    )
    leases: Mapped[List["Lease"]] = relationship(
        "Lease", back_populates="tenant", passive_deletes=True
    )
    favorites: Mapped[List["Property"]] = relationship(
        "Property",
        secondary=tenant_favorites,
        back_populates="favorited_by",
        passive_deletes=True,
    )
    properties: Mapped[List["Property"]] = relationship(
        "Property",
        secondary=tenant_properties,
        back_populates="tenants",
        passive_deletes=True,
    )

    def __str__(self):
        return self.name


class Property(Base):
    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price_per_month: Mapped[Decimal] = mapped_column(Money, nullable=False, index=True)
    security_deposit: Mapped[Decimal] = mapped_column(Money, nullable=False)
    application_fee: Mapped[Decimal] = mapped_column(Money, nullable=False)
    photo_urls: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    amenities: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    highlights: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    is_pets_allowed: Mapped[bool] = mapped_column(Boolean, default=False)
    is_parking_included: Mapped[bool] = mapped_column(Boolean, default=False)
    beds: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    baths: Mapped[float] = mapped_column(Float, nullable=False)
    square_feet: Mapped[int] = mapped_column(Integer, nullable=False)
    property_type: Mapped[PropertyType] = mapped_column(
        _enum(PropertyType), nullable=False, index=True
    )
    posted_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    average_rating: Mapped[Optional[float]] = mapped_column(Float, default=0)
    number_of_reviews: Mapped[Optional[int]] = mapped_column(Integer, default=0)

    location_id: Mapped[int] = mapped_column(
        ForeignKey("locations.id", ondelete="RESTRICT"),
        unique=True,
        nullable=False,
    )
    location: Mapped["Location"] = relationship("Location", back_populates="property")

    manager_cognito_id: Mapped[str] = mapped_column(
        ForeignKey("managers.cognito_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    manager: Mapped["Manager"] = relationship(
        "Manager", back_populates="managed_properties"
    )

    leases: Mapped[List["Lease"]] = relationship(
        "Lease", back_populates="property", passive_deletes=True
    )
    applications: Mapped[List["Application"]] = relationship(
        "Application", back_populates="property", passive_deletes=True
    )
    favorited_by: Mapped[List["Tenant"]] = relationship(
        "Tenant",
        secondary=tenant_favorites,
        back_populates="favorites",
        passive_deletes=True,
    )
    tenants: Mapped[List["Tenant"]] = relationship(
        "Tenant",
        secondary=tenant_properties,
        back_populates="properties",
        passive_deletes=True,
    )

    def __str__(self):
        return self.name


class Application(Base):
    __tablename__ = "applications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    application_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    status: Mapped[ApplicationStatus] = mapped_column(
        _enum(ApplicationStatus),
        nullable=False,
        default=ApplicationStatus.PENDING,
        index=True,
    )
    property_id: Mapped[int] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True
    )
    property: Mapped["Property"] = relationship(
        "Property", back_populates="applications"
    )
    tenant_cognito_id: Mapped[str] = mapped_column(
        ForeignKey("tenants.cognito_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="applications")
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(32), nullable=False)
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    lease_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("leases.id", ondelete="SET NULL"), unique=True, nullable=True
    )
    lease: Mapped[Optional["Lease"]] = relationship(
        "Lease", back_populates="application"
    )


class Lease(Base):
    __tablename__ = "leases"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    rent: Mapped[Decimal] = mapped_column(Money, nullable=False)
    deposit: Mapped[Decimal] = mapped_column(Money, nullable=False)
    property_id: Mapped[int] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True
    )
    property: Mapped["Property"] = relationship("Property", back_populates="leases")
    tenant_cognito_id: Mapped[str] = mapped_column(
        ForeignKey("tenants.cognito_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="leases")
    agreement_path: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    application: Mapped[Optional["Application"]] = relationship(
        "Application", back_populates="lease", uselist=False
    )
    payments: Mapped[List["Payment"]] = relationship(
        "Payment", back_populates="lease", passive_deletes=True
    )


class Payment(Base):
    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    amount_due: Mapped[Decimal] = mapped_column(Money, nullable=False)
    amount_paid: Mapped[Decimal] = mapped_column(Money, nullable=False)
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    payment_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        _enum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING, index=True
    )
    type: Mapped[PaymentType] = mapped_column(
        _enum(PaymentType), nullable=False, default=PaymentType.RENT, index=True
    )
    is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    receipt_path: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    destination: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    lease_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("leases.id", ondelete="CASCADE"), nullable=True, index=True
    )
    lease: Mapped[Optional["Lease"]] = relationship("Lease", back_populates="payments")
    tenant_cognito_id: Mapped[str] = mapped_column(
        ForeignKey("tenants.cognito_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tenant: Mapped["Tenant"] = relationship("Tenant")


class Notification(Base):
    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipient_cognito_id: Mapped[str] = mapped_column(
        String(128), nullable=False, index=True
    )
    kind: Mapped[NotificationKind] = mapped_column(
        _enum(NotificationKind), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
