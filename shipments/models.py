"""
Purpose: Domain models for the Shipments capability.
What it does:
- Defines core data structures mirroring the hosted tables:
- Customer (customers)
- Package (packages) with optional embedded customer and tracking events
- TrackingEvent (tracking_events)

Defines enums/constants:
- PackageStatus = pending | picked_up | in_transit | out_for_delivery | delivered | cancelled | returned
- TrackingEventType = created | picked_up | ... | exception | cancelled | returned

Bridges a package row to the progress estimator via Package.route_snapshot().

Rule: No store calls, no HTTP. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from store.errors import ValidationError
from tracking.geo import GeoPoint
from tracking.progress import RouteSnapshot

Row = Dict[str, Any]


class PackageStatus(str, Enum):
    PENDING = "pending"
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"

    @property
    def label(self) -> str:
        """Display string, e.g. in_transit -> "In Transit"."""
        return format_status(self.value)


class TrackingEventType(str, Enum):
    CREATED = "created"
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    ARRIVED_AT_FACILITY = "arrived_at_facility"
    DEPARTED_FACILITY = "departed_facility"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERY_ATTEMPTED = "delivery_attempted"
    DELIVERED = "delivered"
    EXCEPTION = "exception"
    CANCELLED = "cancelled"
    RETURNED = "returned"


def event_type_for_status(status: PackageStatus) -> TrackingEventType:
    """
    Timeline event recorded when a package moves into `status`.
    pending has no event of its own, it reads as a (re)created package.
    """
    if status == PackageStatus.PENDING:
        return TrackingEventType.CREATED
    return TrackingEventType(status.value)


def format_status(value: Any) -> str:
    """
    snake_case status -> title-cased label. Unknown strings are formatted the same way.
    """
    if isinstance(value, Enum):
        value = value.value
    if not value:
        return "Unknown"
    return " ".join(part.capitalize() for part in str(value).split("_") if part)


def _point(lat: Optional[float], lng: Optional[float], label: str) -> Optional[GeoPoint]:
    if lat is None or lng is None:
        return None
    return GeoPoint(latitude=float(lat), longitude=float(lng), label=label)


def _join(*parts: Optional[str]) -> str:
    return ", ".join(p for p in parts if p)


@dataclass
class Customer:
    """
    Someone who ships or receives packages.
    """
    id: str
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    #package summaries when the row was fetched with packages embedded
    packages: List[Row] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_row(cls, row: Row) -> Customer:
        return cls(
            id=row.get("id", ""),
            first_name=row.get("first_name") or "",
            last_name=row.get("last_name") or "",
            email=row.get("email") or "",
            phone=row.get("phone"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
            packages=list(row.get("packages") or []),
        )


@dataclass
class TrackingEvent:
    """
    One entry on a package's tracking timeline.
    """
    id: str
    package_id: str
    event_type: TrackingEventType
    description: str
    location: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Row) -> TrackingEvent:
        return cls(
            id=row.get("id", ""),
            package_id=row.get("package_id", ""),
            event_type=TrackingEventType(row["event_type"]),
            description=row.get("description") or "",
            location=row.get("location"),
            lat=row.get("lat"),
            lng=row.get("lng"),
            created_at=row.get("created_at"),
        )

    def to_dict(self) -> Row:
        return {
            "id": self.id,
            "package_id": self.package_id,
            "event_type": self.event_type.value,
            "status": format_status(self.event_type),
            "description": self.description,
            "location": self.location,
            "lat": self.lat,
            "lng": self.lng,
            "created_at": self.created_at,
        }


@dataclass
class Package:
    """
    A tracked shipment. Coordinates are optional in the table; the ones the
    progress estimator needs are checked in route_snapshot().
    """
    id: str
    tracking_number: str
    status: PackageStatus

    origin_address: str = ""
    origin_city: str = ""
    origin_state: Optional[str] = None
    origin_country: str = ""
    origin_postal_code: Optional[str] = None
    origin_lat: Optional[float] = None
    origin_lng: Optional[float] = None

    destination_address: str = ""
    destination_city: str = ""
    destination_state: Optional[str] = None
    destination_country: str = ""
    destination_postal_code: Optional[str] = None
    destination_lat: Optional[float] = None
    destination_lng: Optional[float] = None

    current_lat: Optional[float] = None
    current_lng: Optional[float] = None
    current_location: Optional[str] = None

    customer_id: Optional[str] = None
    description: Optional[str] = None
    weight: Optional[float] = None
    value: Optional[float] = None
    dimensions: Optional[Any] = None
    estimated_delivery_date: Optional[str] = None
    actual_delivery_date: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    customer: Optional[Customer] = None
    tracking_events: List[TrackingEvent] = field(default_factory=list)

    _SCALAR_FIELDS = (
        "origin_address", "origin_city", "origin_state", "origin_country", "origin_postal_code",
        "origin_lat", "origin_lng",
        "destination_address", "destination_city", "destination_state", "destination_country",
        "destination_postal_code", "destination_lat", "destination_lng",
        "current_lat", "current_lng", "current_location",
        "customer_id", "description", "weight", "value", "dimensions",
        "estimated_delivery_date", "actual_delivery_date", "created_at", "updated_at",
    )

    @classmethod
    def from_row(cls, row: Row) -> Package:
        kwargs = {name: row[name] for name in cls._SCALAR_FIELDS if row.get(name) is not None}

        customer_row = row.get("customer")
        events = [TrackingEvent.from_row(r) for r in row.get("tracking_events") or []]
        #timeline is always shown oldest first
        events.sort(key=lambda event: event.created_at or "")

        return cls(
            id=row.get("id", ""),
            tracking_number=row["tracking_number"],
            status=PackageStatus(row.get("status") or PackageStatus.PENDING.value),
            customer=Customer.from_row({"id": row.get("customer_id") or "", **customer_row}) if customer_row else None,
            tracking_events=events,
            **kwargs,
        )

    @property
    def status_label(self) -> str:
        return self.status.label

    @property
    def is_delivered(self) -> bool:
        return self.status == PackageStatus.DELIVERED

    def origin_point(self) -> Optional[GeoPoint]:
        return _point(self.origin_lat, self.origin_lng, _join(self.origin_city, self.origin_state))

    def destination_point(self) -> Optional[GeoPoint]:
        return _point(self.destination_lat, self.destination_lng, _join(self.destination_city, self.destination_state))

    def current_point(self) -> Optional[GeoPoint]:
        return _point(self.current_lat, self.current_lng, self.current_location or "")

    def route_snapshot(self) -> RouteSnapshot:
        """
        Snapshot for the progress estimator.

        No current fix yet -> the package is treated as sitting at the origin,
        or at the destination once delivered.

        Raises:
            ValidationError if origin or destination coordinates are missing.
        """
        origin = self.origin_point()
        destination = self.destination_point()
        if origin is None or destination is None:
            raise ValidationError(f"Package {self.tracking_number} has no origin/destination coordinates")

        current = self.current_point()
        if current is None:
            current = destination if self.is_delivered else origin

        return RouteSnapshot(
            origin=origin,
            destination=destination,
            current=current,
            delivered=self.is_delivered,
        )
