import pandas as pd
import numpy as np
import uuid
from datetime import datetime, timezone, timedelta

from shipments.models import PackageStatus

# Hub cities the mock shipments run between: (city, state, lat, lng)
CITIES = [
    ("Dallas", "TX", 32.9481, -96.7591),
    ("Denver", "CO", 39.7392, -104.9903),
    ("Amarillo", "TX", 36.1699, -101.3864),
    ("Oklahoma City", "OK", 35.4676, -97.5164),
    ("Albuquerque", "NM", 35.0844, -106.6504),
    ("Kansas City", "MO", 39.0997, -94.5786),
    ("Houston", "TX", 29.7604, -95.3698),
]

# rough share of packages per status
STATUS_WEIGHTS = {
    PackageStatus.PENDING: 0.10,
    PackageStatus.PICKED_UP: 0.10,
    PackageStatus.IN_TRANSIT: 0.40,
    PackageStatus.OUT_FOR_DELIVERY: 0.10,
    PackageStatus.DELIVERED: 0.25,
    PackageStatus.CANCELLED: 0.03,
    PackageStatus.RETURNED: 0.02,
}


def _position_for(status, origin, destination):
    """
    Where a package with this status plausibly is: at the origin before pickup,
    somewhere along the straight line while moving, at the destination once delivered.
    """
    if status in (PackageStatus.PENDING, PackageStatus.PICKED_UP, PackageStatus.CANCELLED):
        fraction = 0.0
    elif status == PackageStatus.IN_TRANSIT:
        fraction = np.random.uniform(0.1, 0.85)
    elif status == PackageStatus.OUT_FOR_DELIVERY:
        fraction = np.random.uniform(0.9, 0.99)
    else:
        fraction = 1.0
    lat = origin[2] + (destination[2] - origin[2]) * fraction
    lng = origin[3] + (destination[3] - origin[3]) * fraction
    return lat, lng


def generate_mock_packages(num_packages=200, output_file="mock_packages.csv"):
    """
    Generates package rows shaped like the hosted `packages` table, routed between
    a handful of hub cities so the tracking page has realistic long-haul progress to show.
    """
    statuses = list(STATUS_WEIGHTS.keys())
    weights = np.array(list(STATUS_WEIGHTS.values()))
    weights = weights / weights.sum()

    now = datetime.now(timezone.utc)
    data = []

    for package_index in range(num_packages):
        origin_index, destination_index = np.random.choice(len(CITIES), size=2, replace=False)
        origin = CITIES[origin_index]
        destination = CITIES[destination_index]
        status = statuses[np.random.choice(len(statuses), p=weights)]
        current_lat, current_lng = _position_for(status, origin, destination)

        created_at = now - timedelta(hours=int(np.random.randint(1, 24 * 14)))

        data.append({
            "id": str(uuid.uuid4()),
            "tracking_number": f"SMS{str(package_index + 1).zfill(9)}",
            "status": status.value,
            "origin_address": f"{np.random.randint(100, 9999)} Main St",
            "origin_city": origin[0],
            "origin_state": origin[1],
            "origin_country": "United States",
            "origin_lat": np.round(origin[2], 6),
            "origin_lng": np.round(origin[3], 6),
            "destination_address": f"{np.random.randint(100, 9999)} Oak Ave",
            "destination_city": destination[0],
            "destination_state": destination[1],
            "destination_country": "United States",
            "destination_lat": np.round(destination[2], 6),
            "destination_lng": np.round(destination[3], 6),
            "current_lat": np.round(current_lat, 6),
            "current_lng": np.round(current_lng, 6),
            "current_location": origin[0] if current_lat == origin[2] else None,
            "weight": np.round(np.random.uniform(0.5, 25.0), 1),
            "value": np.round(np.random.uniform(10.0, 500.0), 2),
            "created_at": created_at.isoformat(),
            "estimated_delivery_date": (created_at + timedelta(days=int(np.random.randint(2, 6)))).date().isoformat(),
        })

    df = pd.DataFrame(data)
    df.to_csv(output_file, index=False)
    print(f"✅ Generated {num_packages} packages and saved to '{output_file}'")

    print("\nPackages by status:")
    for status, count in df["status"].value_counts().items():
        print(f"  {status}: {count}")


if __name__ == "__main__":
    generate_mock_packages(num_packages=200)
