"""
Shipments domain package.

Public API:
- Domain models: Package, Customer, TrackingEvent, PackageStatus, TrackingEventType
- Services: PackageService, CustomerService
- Aggregates: package_stats, customer_stats
"""
from .models import (
    Package,
    Customer,
    TrackingEvent,
    PackageStatus,
    TrackingEventType,
    event_type_for_status,
    format_status,
)
from .services import PackageService, CustomerService
from .stats import package_stats, customer_stats

__all__ = ["Package",
           "Customer",
             "TrackingEvent",
               "PackageStatus",
               "TrackingEventType",
               "event_type_for_status",
               "format_status",
               "PackageService",
               "CustomerService",
               "package_stats",
               "customer_stats",
               ]
