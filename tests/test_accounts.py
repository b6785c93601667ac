import pytest

from accounts.models import Role, User
from accounts.policy import (
    Capability,
    capabilities_for,
    has_any_role,
    has_capability,
    has_role,
    require_auth,
)
from accounts.service import AuthService
from store.errors import AuthError, NetworkError, NotFoundError


def make_user(role="user"):
    return User(id="u-1", email="ops@swiftmail.test", first_name="Sam", last_name="Ops", role=role)


def test_admin_has_every_capability():
    admin = make_user("admin")
    assert capabilities_for(admin) == frozenset(Capability)


@pytest.mark.parametrize(
    "role, capability, allowed",
    [
        ("manager", "reports:view", True),
        ("manager", "users:manage", False),
        ("operator", "packages:update", True),
        ("operator", "packages:delete", False),
        ("agent", "customers:manage", True),
        ("agent", "packages:update", False),
        ("viewer", "packages:view", True),
        ("viewer", "packages:create", False),
        ("user", "packages:view", False),
    ],
)
def test_role_capabilities(role, capability, allowed):
    assert has_capability(make_user(role), capability) is allowed


def test_unknown_role_or_capability_is_denied():
    assert has_capability(make_user("superhero"), "packages:view") is False
    assert has_capability(make_user("admin"), "rockets:launch") is False
    assert has_capability(None, "packages:view") is False


def test_role_checks_are_case_insensitive():
    user = make_user("Manager")
    assert has_role(user, "manager")
    assert has_role(user, Role.MANAGER)
    assert has_any_role(user, ["viewer", "manager"])
    assert not has_any_role(user, ["viewer", "agent"])


def test_require_auth():
    assert require_auth(None) is False
    assert require_auth(make_user()) is True
    assert require_auth(make_user("viewer"), "admin") is False
    assert require_auth(make_user("admin"), "admin") is True


def test_user_from_auth_prefers_profile():
    auth_user = {"id": "u-1", "email": "ops@swiftmail.test", "user_metadata": {"first_name": "Meta", "last_name": "Data"}}

    user = User.from_auth(auth_user, {"first_name": "Sam", "role": "ADMIN"})

    assert user.first_name == "Sam"
    assert user.last_name == "Data"
    assert user.role == "admin"
    assert user.display_name == "Sam Data"
    assert user.is_authenticated


def test_user_without_names_displays_email():
    user = User.from_auth({"id": "u-2", "email": "x@y.z"})
    assert user.display_name == "x@y.z"
    assert user.role == Role.USER.value


def test_sign_in_merges_profile(fake_store):
    fake_store.select_results.append({"id": "u-1", "first_name": "Sam", "last_name": "Ops", "role": "operator"})

    result = AuthService(fake_store).sign_in("ops@swiftmail.test", "pw")

    assert result["session"]["access_token"] == "tok-1"
    assert result["user"].role == "operator"
    assert ("with_access_token", "tok-1") in fake_store.calls
    _, table, _, kwargs = fake_store.calls_to("select")[0]
    assert table == "profiles"
    assert kwargs == {"filters": {"id": "u-1"}, "single": True}


def test_current_user_without_profile(fake_store):
    fake_store.auth_users["tok-9"] = {"id": "u-9", "email": "new@swiftmail.test", "user_metadata": {"first_name": "New"}}
    fake_store.select_results.append(NotFoundError("Record not found"))

    user = AuthService(fake_store).get_current_user("tok-9")

    assert user.id == "u-9"
    assert user.first_name == "New"
    assert user.role == "user"


def test_current_user_rejected_token(fake_store):
    fake_store.auth_users["expired"] = AuthError("JWT expired")
    service = AuthService(fake_store)

    assert service.get_current_user("expired") is None
    assert service.get_current_user("") is None
    assert service.get_current_user("unknown") is None
    assert service.is_authenticated("expired") is False


def test_update_profile_only_touches_allowed_fields(fake_store):
    AuthService(fake_store).update_profile("tok-1", "u-1", {"first_name": "Sam", "email": "hack@x.y", "role": "viewer"})

    _, table, values, filters, kwargs = fake_store.calls_to("update")[0]
    assert table == "profiles"
    assert values == {"first_name": "Sam", "role": "viewer"}
    assert filters == {"id": "u-1"}
    assert kwargs == {"single": True}


def test_sign_out(fake_store):
    assert AuthService(fake_store).sign_out("tok-1") is True
    assert fake_store.calls_to("sign_out") == [("sign_out", "tok-1")]


def test_current_user_store_outage_is_raised(fake_store):
    fake_store.auth_users["tok-1"] = NetworkError("down")

    with pytest.raises(NetworkError):
        AuthService(fake_store).get_current_user("tok-1")


def test_sign_up_with_session(fake_store):
    session = {"access_token": "tok-2", "user": {"id": "u-2", "email": "new@swiftmail.test"}}
    fake_store.auth_results.append(session)

    result = AuthService(fake_store).sign_up("new@swiftmail.test", "pw", {"first_name": "New"})

    assert result["session"] is session
    assert result["user"]["id"] == "u-2"
    assert fake_store.calls_to("sign_up") == [("sign_up", "new@swiftmail.test", {"first_name": "New"})]


def test_sign_up_awaiting_email_confirmation(fake_store):
    result = AuthService(fake_store).sign_up("new@swiftmail.test", "pw")

    assert result["session"] is None
    assert result["user"] == {"id": "u-new", "email": "new@swiftmail.test"}


def test_sign_up_rejected(fake_store):
    fake_store.auth_results.append(AuthError("User already registered"))
    with pytest.raises(AuthError):
        AuthService(fake_store).sign_up("ops@swiftmail.test", "pw")


def test_reset_password(fake_store):
    service = AuthService(fake_store)

    assert service.reset_password("ops@swiftmail.test", "https://swiftmail.test/reset") is True
    assert fake_store.calls_to("reset_password") == [
        ("reset_password", "ops@swiftmail.test", "https://swiftmail.test/reset")
    ]


def test_update_password(fake_store):
    assert AuthService(fake_store).update_password("tok-1", "n3w-secret") is True
    assert fake_store.calls_to("update_user") == [("update_user", "tok-1", {"password": "n3w-secret"})]
