import pytest

from shipments.services import CustomerService
from store.errors import DuplicateEntryError, NotFoundError, ValidationError


@pytest.fixture
def service(fake_store):
    return CustomerService(fake_store)


def customer_row(**overrides):
    row = {
        "id": "cus-1",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "phone": "+1 555 0100",
        "created_at": "2023-09-01T12:00:00+00:00",
    }
    row.update(overrides)
    return row


def test_get_customers_with_search_and_paging(service, fake_store):
    fake_store.select_results.append([customer_row()])

    customers = service.get_customers(search="ada", limit=10, offset=20)

    assert customers[0].full_name == "Ada Lovelace"
    _, table, _, kwargs = fake_store.calls_to("select")[0]
    assert table == "customers"
    assert kwargs["or_filter"] == "first_name.ilike.*ada*,last_name.ilike.*ada*,email.ilike.*ada*"
    assert kwargs["limit"] == 10
    assert kwargs["offset"] == 20


def test_get_customers_without_search(service, fake_store):
    service.get_customers()
    assert fake_store.calls_to("select")[0][3]["or_filter"] is None


def test_get_customer_by_id_embeds_packages(service, fake_store):
    fake_store.select_results.append(customer_row(packages=[{"id": "pkg-1", "tracking_number": "SMS1", "status": "pending"}]))

    customer = service.get_customer_by_id("cus-1")

    assert customer.packages[0]["tracking_number"] == "SMS1"
    columns = fake_store.calls_to("select")[0][2]
    assert "packages(id, tracking_number, status, created_at)" in columns


def test_get_customer_by_id_missing(service, fake_store):
    fake_store.select_results.append(NotFoundError("Record not found"))
    assert service.get_customer_by_id("nope") is None


def test_create_customer(service, fake_store):
    fake_store.select_results.append(NotFoundError("Record not found"))
    fake_store.insert_results.append(customer_row(id="cus-2"))

    customer = service.create_customer({"first_name": "Ada", "last_name": "Lovelace", "email": "ada@example.com"})

    assert customer.id == "cus-2"
    assert fake_store.calls_to("insert")[0][1] == "customers"


def test_create_customer_duplicate_email(service, fake_store):
    fake_store.select_results.append(customer_row())

    with pytest.raises(DuplicateEntryError):
        service.create_customer({"first_name": "Ada", "last_name": "L", "email": "ada@example.com"})
    assert fake_store.calls_to("insert") == []


def test_update_customer_email_taken_by_someone_else(service, fake_store):
    fake_store.select_results.append(customer_row(id="cus-other"))

    with pytest.raises(DuplicateEntryError):
        service.update_customer("cus-1", {"email": "ada@example.com"})
    assert fake_store.calls_to("update") == []


def test_update_customer_keeping_own_email(service, fake_store):
    fake_store.select_results.append(customer_row())
    fake_store.update_results.append(customer_row(phone="+1 555 0199"))

    customer = service.update_customer("cus-1", {"email": "ada@example.com", "phone": "+1 555 0199"})

    assert customer.phone == "+1 555 0199"


def test_delete_customer_with_packages_is_refused(service, fake_store):
    fake_store.select_results.append(customer_row(packages=[{"id": "pkg-1"}]))

    with pytest.raises(ValidationError):
        service.delete_customer("cus-1")
    assert fake_store.calls_to("delete") == []


def test_delete_customer_without_packages(service, fake_store):
    fake_store.select_results.append(customer_row(packages=[]))

    assert service.delete_customer("cus-1") is True
    assert fake_store.calls_to("delete") == [("delete", "customers", {"id": "cus-1"})]


def test_customer_stats_selects_package_counts(service, fake_store):
    fake_store.select_results.append([customer_row(packages=[{"count": 3}])])

    stats = service.get_customer_stats()

    assert stats["total"] == 1
    assert stats["top_customers"][0]["package_count"] == 3
    assert "packages(count)" in fake_store.calls_to("select")[0][2]


def test_bulk_import(service, fake_store):
    rows = [customer_row(id="cus-1"), customer_row(id="cus-2", email="b@example.com")]

    customers = service.bulk_import_customers(rows)

    assert [c.id for c in customers] == ["cus-1", "cus-2"]
    assert service.bulk_import_customers([]) == []
    assert len(fake_store.calls_to("insert")) == 1
