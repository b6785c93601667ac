"""
Purpose: Package / customer / tracking-event operations against the hosted store.
What it does:
- PackageService: list, fetch, create, update, status + location changes, delete,
  timeline events, search, stats, and the tracking lookup that feeds the
  progress estimator
- CustomerService: list, fetch, create (unique email), update, delete (only
  without packages), search, stats, bulk import / export

Every call logs failures with context and re-raises; callers decide what to show.
Rule: Business rules live here, HTTP details live in store.client.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from store.client import StoreClient
from store.errors import DuplicateEntryError, NotFoundError, StoreError, ValidationError, log_error
from tracking.progress import ProgressResult, RouteSnapshot, compute_progress
from tracking.policy import TrackingPolicy

from .models import Customer, Package, PackageStatus, TrackingEvent, TrackingEventType, event_type_for_status
from .stats import customer_stats, package_stats

logger = logging.getLogger(__name__)

PACKAGES = "packages"
CUSTOMERS = "customers"
TRACKING_EVENTS = "tracking_events"

PACKAGE_WITH_CUSTOMER = "*, customer:customers(first_name, last_name, email, phone)"
PACKAGE_WITH_EVENTS = "*, tracking_events(*)"


def _search_pattern(term: str) -> str:
    # PostgREST uses * as the like wildcard; commas / parens would break the or=() group
    cleaned = "".join(ch for ch in term if ch not in ",()")
    return f"*{cleaned.strip()}*"


def _parse_status(status: str) -> PackageStatus:
    try:
        return PackageStatus(status)
    except ValueError as e:
        raise ValidationError(f"Invalid package status: {status}") from e


def _validate_location(latitude: float, longitude: float, label: str) -> None:
    if latitude is None or not -90 <= latitude <= 90:
        raise ValidationError("Latitude must be between -90 and 90")
    if longitude is None or not -180 <= longitude <= 180:
        raise ValidationError("Longitude must be between -180 and 180")
    if not label or len(label.strip()) < 2:
        raise ValidationError("Location name must be at least 2 characters")


class PackageService:
    """
    Package operations. All reads return Package models, not raw rows.
    """

    def __init__(self, client: StoreClient, policy: Optional[TrackingPolicy] = None):
        self.client = client
        if policy is not None:
            policy.validate()
        self.policy = policy

    def get_packages(
        self,
        status: Optional[str] = None,
        customer_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Package]:
        filters: Dict[str, Any] = {}
        if status:
            filters["status"] = _parse_status(status).value
        if customer_id:
            filters["customer_id"] = customer_id

        try:
            rows = self.client.select(
                PACKAGES,
                PACKAGE_WITH_CUSTOMER,
                filters=filters,
                order="created_at",
                ascending=False,
                limit=limit,
                offset=offset,
            )
        except StoreError as e:
            log_error(e, "Get packages")
            raise
        return [Package.from_row(row) for row in rows]

    def _get_one(self, column: str, value: str, context: str) -> Optional[Package]:
        try:
            row = self.client.select(PACKAGES, PACKAGE_WITH_EVENTS, filters={column: value}, single=True)
        except NotFoundError:
            return None
        except StoreError as e:
            log_error(e, context)
            raise
        return Package.from_row(row)

    def get_package_by_id(self, package_id: str) -> Optional[Package]:
        return self._get_one("id", package_id, "Get package by ID")

    def get_package_by_tracking_number(self, tracking_number: str) -> Optional[Package]:
        return self._get_one("tracking_number", tracking_number, "Get package by tracking number")

    def create_package(self, package_data: Dict[str, Any]) -> Package:
        """
        Insert a package and record its initial "created" timeline event at the origin.
        """
        try:
            row = self.client.insert(PACKAGES, package_data, single=True)
            package = Package.from_row(row)

            self.create_tracking_event(
                package_id=package.id,
                event_type=TrackingEventType.CREATED,
                description="Package created and received",
                location=f"{package_data.get('origin_city')}, {package_data.get('origin_state')}",
                lat=package_data.get("origin_lat"),
                lng=package_data.get("origin_lng"),
            )
        except StoreError as e:
            log_error(e, "Create package")
            raise

        logger.info(f"Created package {package.tracking_number}")
        return package

    def update_package(self, package_id: str, updates: Dict[str, Any]) -> Package:
        try:
            row = self.client.update(PACKAGES, updates, {"id": package_id}, single=True)
        except StoreError as e:
            log_error(e, "Update package")
            raise
        return Package.from_row(row)

    def update_package_status(self, package_id: str, status: str, location: Optional[str] = None) -> Package:
        """
        Change status and append a matching timeline event.
        """
        new_status = _parse_status(status)

        updates: Dict[str, Any] = {"status": new_status.value}
        if location:
            updates["current_location"] = location
        if new_status == PackageStatus.DELIVERED:
            updates["actual_delivery_date"] = datetime.now(timezone.utc).isoformat()

        package = self.update_package(package_id, updates)

        try:
            self.create_tracking_event(
                package_id=package_id,
                event_type=event_type_for_status(new_status),
                description=f"Package status updated to {new_status.value}",
                location=location or package.current_location,
                lat=package.current_lat,
                lng=package.current_lng,
            )
        except StoreError as e:
            log_error(e, "Update package status")
            raise

        logger.info(f"Package {package.tracking_number} -> {new_status.value}")
        return package

    def update_package_location(self, package_id: str, latitude: float, longitude: float, label: str) -> Package:
        """
        Move the package's current position (admin location editor).

        Raises:
            ValidationError for out-of-range coordinates or a label shorter than 2 characters.
        """
        _validate_location(latitude, longitude, label)
        return self.update_package(
            package_id,
            {
                "current_lat": float(latitude),
                "current_lng": float(longitude),
                "current_location": label.strip(),
            },
        )

    def delete_package(self, package_id: str) -> bool:
        try:
            self.client.delete(PACKAGES, {"id": package_id})
        except StoreError as e:
            log_error(e, "Delete package")
            raise
        return True

    def create_tracking_event(
        self,
        package_id: str,
        event_type: TrackingEventType,
        description: str,
        location: Optional[str] = None,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
    ) -> TrackingEvent:
        row = self.client.insert(
            TRACKING_EVENTS,
            {
                "package_id": package_id,
                "event_type": TrackingEventType(event_type).value,
                "description": description,
                "location": location,
                "lat": lat,
                "lng": lng,
            },
            single=True,
        )
        return TrackingEvent.from_row(row)

    def get_tracking_events(self, package_id: str) -> List[TrackingEvent]:
        try:
            rows = self.client.select(
                TRACKING_EVENTS,
                filters={"package_id": package_id},
                order="created_at",
                ascending=True,
            )
        except StoreError as e:
            log_error(e, "Get tracking events")
            raise
        return [TrackingEvent.from_row(row) for row in rows]

    def search_packages(
        self,
        term: str,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Package]:
        """
        Case-insensitive match on tracking number or description, narrowed by
        status and paged the same way as get_packages().
        """
        pattern = _search_pattern(term)
        filters = {"status": _parse_status(status).value} if status else None
        try:
            rows = self.client.select(
                PACKAGES,
                PACKAGE_WITH_CUSTOMER,
                filters=filters,
                or_filter=f"tracking_number.ilike.{pattern},description.ilike.{pattern}",
                order="created_at",
                ascending=False,
                limit=limit,
                offset=offset,
            )
        except StoreError as e:
            log_error(e, "Search packages")
            raise
        return [Package.from_row(row) for row in rows]

    def get_package_stats(self) -> Dict[str, int]:
        try:
            rows = self.client.select(PACKAGES, "status")
        except StoreError as e:
            log_error(e, "Get package stats")
            raise
        return package_stats(rows)

    # --- tracking lookup ---

    def _require_package(self, tracking_number: str) -> Package:
        package = self.get_package_by_tracking_number(tracking_number)
        if package is None:
            raise NotFoundError(f"No package found with tracking number {tracking_number}")
        return package

    def get_route_snapshot(self, tracking_number: str) -> RouteSnapshot:
        """
        Resolve a tracking number into the snapshot the estimator consumes.

        Raises:
            NotFoundError for unknown tracking numbers,
            ValidationError when the package has no origin/destination coordinates.
        """
        return self._require_package(tracking_number).route_snapshot()

    def get_progress(self, tracking_number: str) -> ProgressResult:
        return compute_progress(self.get_route_snapshot(tracking_number), self.policy)


class CustomerService:
    """
    Customer operations.
    """

    def __init__(self, client: StoreClient):
        self.client = client

    def get_customers(
        self,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Customer]:
        or_filter = self._search_filter(search) if search else None
        try:
            rows = self.client.select(
                CUSTOMERS,
                or_filter=or_filter,
                order="created_at",
                ascending=False,
                limit=limit,
                offset=offset,
            )
        except StoreError as e:
            log_error(e, "Get customers")
            raise
        return [Customer.from_row(row) for row in rows]

    @staticmethod
    def _search_filter(term: str) -> str:
        pattern = _search_pattern(term)
        return f"first_name.ilike.{pattern},last_name.ilike.{pattern},email.ilike.{pattern}"

    def get_customer_by_id(self, customer_id: str) -> Optional[Customer]:
        try:
            row = self.client.select(
                CUSTOMERS,
                "*, packages(id, tracking_number, status, created_at)",
                filters={"id": customer_id},
                single=True,
            )
        except NotFoundError:
            return None
        except StoreError as e:
            log_error(e, "Get customer by ID")
            raise
        return Customer.from_row(row)

    def get_customer_by_email(self, email: str) -> Optional[Customer]:
        try:
            row = self.client.select(CUSTOMERS, filters={"email": email}, single=True)
        except NotFoundError:
            return None
        except StoreError as e:
            log_error(e, "Get customer by email")
            raise
        return Customer.from_row(row)

    def create_customer(self, customer_data: Dict[str, Any]) -> Customer:
        """
        Raises:
            DuplicateEntryError if a customer with the same email exists.
        """
        if self.get_customer_by_email(customer_data["email"]) is not None:
            raise DuplicateEntryError("Customer with this email already exists")

        try:
            row = self.client.insert(CUSTOMERS, customer_data, single=True)
        except StoreError as e:
            log_error(e, "Create customer")
            raise
        return Customer.from_row(row)

    def update_customer(self, customer_id: str, updates: Dict[str, Any]) -> Customer:
        if updates.get("email"):
            existing = self.get_customer_by_email(updates["email"])
            if existing is not None and existing.id != customer_id:
                raise DuplicateEntryError("Email is already taken by another customer")

        try:
            row = self.client.update(CUSTOMERS, updates, {"id": customer_id}, single=True)
        except StoreError as e:
            log_error(e, "Update customer")
            raise
        return Customer.from_row(row)

    def delete_customer(self, customer_id: str) -> bool:
        """
        Raises:
            ValidationError while the customer still has packages.
        """
        customer = self.get_customer_by_id(customer_id)
        if customer is not None and customer.packages:
            raise ValidationError("Cannot delete customer with existing packages")

        try:
            self.client.delete(CUSTOMERS, {"id": customer_id})
        except StoreError as e:
            log_error(e, "Delete customer")
            raise
        return True

    def search_customers(self, term: str) -> List[Customer]:
        return self.get_customers(search=term)

    def get_customer_stats(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        try:
            rows = self.client.select(CUSTOMERS, "id, first_name, last_name, email, created_at, packages(count)")
        except StoreError as e:
            log_error(e, "Get customer stats")
            raise
        return customer_stats(rows, now)

    def bulk_import_customers(self, customers: List[Dict[str, Any]]) -> List[Customer]:
        if not customers:
            return []
        try:
            rows = self.client.insert(CUSTOMERS, customers)
        except StoreError as e:
            log_error(e, "Bulk import customers")
            raise
        logger.info(f"Imported {len(rows)} customers")
        return [Customer.from_row(row) for row in rows]

    def export_customers(self) -> List[Customer]:
        return self.get_customers()
