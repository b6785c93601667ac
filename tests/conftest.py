import os

import django
import pytest

from store.errors import NotFoundError, StoreError
from tracking.geo import GeoPoint

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "swiftmail_backend.settings")
django.setup()


class FakeStore:
    """
    Stand-in for StoreClient: records every call and answers from queued results.
    A queued exception is raised instead of returned.
    """

    def __init__(self):
        self.calls = []
        self.select_results = []
        self.insert_results = []
        self.update_results = []
        self.auth_users = {}
        self.auth_results = []
        self.token = None

    def _next(self, queue, default):
        if not queue:
            return default
        result = queue.pop(0)
        if isinstance(result, StoreError):
            raise result
        return result

    def with_access_token(self, access_token):
        self.calls.append(("with_access_token", access_token))
        self.token = access_token
        return self

    def select(self, table, columns="*", **kwargs):
        self.calls.append(("select", table, columns, kwargs))
        if kwargs.get("single") and not self.select_results:
            raise NotFoundError("Record not found")
        return self._next(self.select_results, [])

    def insert(self, table, rows, **kwargs):
        self.calls.append(("insert", table, rows, kwargs))
        return self._next(self.insert_results, rows)

    def update(self, table, values, filters, **kwargs):
        self.calls.append(("update", table, values, filters, kwargs))
        return self._next(self.update_results, values)

    def delete(self, table, filters):
        self.calls.append(("delete", table, filters))

    def get_user(self, access_token):
        self.calls.append(("get_user", access_token))
        user = self.auth_users.get(access_token)
        if isinstance(user, StoreError):
            raise user
        return user

    def sign_in(self, email, password):
        self.calls.append(("sign_in", email))
        return {"access_token": "tok-1", "refresh_token": "ref-1", "user": {"id": "u-1", "email": email}}

    def sign_out(self, access_token):
        self.calls.append(("sign_out", access_token))

    def sign_up(self, email, password, data=None):
        self.calls.append(("sign_up", email, data))
        return self._next(self.auth_results, {"id": "u-new", "email": email})

    def reset_password(self, email, redirect_to=None):
        self.calls.append(("reset_password", email, redirect_to))

    def update_user(self, access_token, attributes):
        self.calls.append(("update_user", access_token, attributes))
        return self._next(self.auth_results, {"id": "u-1"})

    def calls_to(self, name):
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def dallas():
    return GeoPoint(32.9481, -96.7591, "Dallas, TX")


@pytest.fixture
def denver():
    return GeoPoint(39.7392, -104.9903, "Denver, CO")


@pytest.fixture
def amarillo():
    return GeoPoint(36.1699, -101.3864, "Amarillo, TX")


@pytest.fixture
def package_row():
    """A packages row as the store returns it, in transit at Amarillo."""
    return {
        "id": "pkg-1",
        "tracking_number": "SMS123456789",
        "status": "in_transit",
        "origin_address": "16000 Dallas Pkwy # 400",
        "origin_city": "Dallas",
        "origin_state": "TX",
        "origin_country": "United States",
        "origin_lat": 32.9481,
        "origin_lng": -96.7591,
        "destination_address": "1234 Main St",
        "destination_city": "Denver",
        "destination_state": "CO",
        "destination_country": "United States",
        "destination_lat": 39.7392,
        "destination_lng": -104.9903,
        "current_lat": 36.1699,
        "current_lng": -101.3864,
        "current_location": "Amarillo, TX",
        "customer_id": "cus-1",
        "estimated_delivery_date": "2023-09-17",
        "created_at": "2023-09-15T09:30:00+00:00",
        "tracking_events": [
            {
                "id": "evt-2",
                "package_id": "pkg-1",
                "event_type": "in_transit",
                "description": "Your package is in transit to the next facility.",
                "location": "Amarillo, TX",
                "created_at": "2023-09-16T10:15:00+00:00",
            },
            {
                "id": "evt-1",
                "package_id": "pkg-1",
                "event_type": "created",
                "description": "Package created and received",
                "location": "Dallas, TX",
                "created_at": "2023-09-15T09:30:00+00:00",
            },
        ],
    }
