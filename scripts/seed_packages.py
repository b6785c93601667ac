import argparse
import logging

import pandas as pd

from shipments.services import PackageService
from store.client import default_client
from store.errors import StoreError

logging.basicConfig(level=logging.INFO)

# columns the packages table accepts on insert
INSERT_COLUMNS = [
    "tracking_number", "status",
    "origin_address", "origin_city", "origin_state", "origin_country", "origin_lat", "origin_lng",
    "destination_address", "destination_city", "destination_state", "destination_country",
    "destination_lat", "destination_lng",
    "current_lat", "current_lng", "current_location",
    "weight", "value", "estimated_delivery_date",
]


def load_rows(filepath, limit=None):
    df = pd.read_csv(filepath)
    if limit:
        df = df.head(limit)
    df = df[[c for c in INSERT_COLUMNS if c in df.columns]]
    # NaN is not valid JSON, the store wants null
    df = df.astype(object).where(pd.notna(df), None)
    return df.to_dict("records")


def main():
    parser = argparse.ArgumentParser(description="Insert mock packages into the hosted store.")
    parser.add_argument("csv", nargs="?", default="mock_packages.csv")
    parser.add_argument("--limit", type=int, default=None)
    args = parser.parse_args()

    service = PackageService(default_client())
    rows = load_rows(args.csv, args.limit)

    created, failed = 0, 0
    for row in rows:
        try:
            service.create_package(row)
            created += 1
        except StoreError as e:
            failed += 1
            print(f"  - {row['tracking_number']}: {e.message} ({e.code})")

    print(f"Seeded {created} packages, {failed} failed.")


if __name__ == "__main__":
    main()
