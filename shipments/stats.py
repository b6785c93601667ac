"""
Purpose: Dashboard / report aggregates over package and customer rows.
What it does:
- package_stats(): counts by status
- customer_stats(): totals, recent sign-ups and top customers by package count

Takes plain rows (as returned by the store) and aggregates them with pandas.
Rule: No store calls. Services fetch, this module counts.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pandas as pd

from .models import PackageStatus

TOP_CUSTOMER_COUNT = 5


def package_stats(rows: List[Dict[str, Any]]) -> Dict[str, int]:
    """
    Returns:
        {"total", "in_transit", "delivered", "pending", "cancelled"}
    """
    stats = {"total": 0, "in_transit": 0, "delivered": 0, "pending": 0, "cancelled": 0}
    if not rows:
        return stats

    df = pd.DataFrame(rows)
    if "status" not in df.columns:
        stats["total"] = len(df)
        return stats

    counts = df["status"].value_counts()
    stats["total"] = int(len(df))
    stats["in_transit"] = int(counts.get(PackageStatus.IN_TRANSIT.value, 0))
    stats["delivered"] = int(counts.get(PackageStatus.DELIVERED.value, 0))
    stats["pending"] = int(counts.get(PackageStatus.PENDING.value, 0))
    stats["cancelled"] = int(counts.get(PackageStatus.CANCELLED.value, 0))
    return stats


def _package_count(value: Any) -> int:
    # embedded "packages(count)" comes back as [{"count": n}], a plain embed as a list of rows
    if isinstance(value, list):
        if len(value) == 1 and isinstance(value[0], dict) and set(value[0]) == {"count"}:
            return int(value[0]["count"])
        return len(value)
    return 0


def customer_stats(customers: List[Dict[str, Any]], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Aggregate customer rows.

    Args:
        customers: customer rows, optionally with an embedded "packages" list
        now: reference time (UTC). Defaults to the current time.

    Returns:
        {"total", "active", "new_this_month", "top_customers"} where
        active = created within the last month,
        new_this_month = created on/after the 1st of the current month,
        top_customers = up to 5 customers with the most packages.
    """
    result: Dict[str, Any] = {"total": 0, "active": 0, "new_this_month": 0, "top_customers": []}
    if not customers:
        return result

    now_ts = pd.Timestamp(now or datetime.now(timezone.utc))
    if now_ts.tzinfo is None:
        now_ts = now_ts.tz_localize("UTC")
    else:
        now_ts = now_ts.tz_convert("UTC")

    df = pd.DataFrame(customers)
    result["total"] = int(len(df))

    if "created_at" in df.columns:
        created = pd.to_datetime(df["created_at"], utc=True, errors="coerce")
        last_month = now_ts - pd.DateOffset(months=1)
        month_start = now_ts.normalize().replace(day=1)
        result["active"] = int((created > last_month).sum())
        result["new_this_month"] = int((created >= month_start).sum())

    if "packages" in df.columns:
        df["package_count"] = df["packages"].apply(_package_count)
    else:
        df["package_count"] = 0

    top = df.sort_values("package_count", ascending=False, kind="stable").head(TOP_CUSTOMER_COUNT)
    result["top_customers"] = [
        {
            "id": row.get("id"),
            "first_name": row.get("first_name"),
            "last_name": row.get("last_name"),
            "email": row.get("email"),
            "package_count": int(row["package_count"]),
        }
        for row in top.to_dict("records")
    ]
    return result
