"""Tests for FallbackStore and the seeded demo data."""

import pytest

from storefront.domain.exceptions import BackendException
from storefront.infrastructure.gateway.base import merge_products_by_id
from storefront.infrastructure.gateway.fallback_store import FallbackStore, UserRecord


@pytest.fixture
def store() -> FallbackStore:
    return FallbackStore.seeded()


def test_seeded_store_contents(store: FallbackStore) -> None:
    assert store.count_products() == 12
    assert store.find_by_email("test@example.com").uid == "dummy-user-1"
    admin = store.find_by_uid("dummy-admin-1")
    assert admin.profile["role"] == "ADMIN"
    assert store.session is None


def test_seeded_catalog_order_and_dates(store: FallbackStore) -> None:
    """Catalog order follows product number; dummy-12 is the newest."""
    products = store.list_products()
    assert [p["id"] for p in products] == [f"dummy-{i}" for i in range(1, 13)]
    dates = [p["dateAdded"] for p in products]
    assert dates == sorted(dates)
    assert all(p["name_lower"] == p["name"].lower() for p in products)


def test_each_store_has_its_own_seed() -> None:
    first, second = FallbackStore.seeded(), FallbackStore.seeded()
    first.merge_profile("dummy-user-1", {"address": "elsewhere"})
    assert second.find_by_uid("dummy-user-1").profile["address"] != "elsewhere"


def test_product_reads_are_copies(store: FallbackStore) -> None:
    product = store.get_product("dummy-1")
    product["price"] = 0
    store.list_products()[0]["name"] = "changed"
    fresh = store.get_product("dummy-1")
    assert fresh["price"] == 5.99
    assert fresh["name"] == "Premium Wireless Headphones"
    assert store.get_product("missing") is None


def test_insert_duplicate_email_rejected(store: FallbackStore) -> None:
    with pytest.raises(BackendException) as exc_info:
        store.insert_user(UserRecord(uid="other", email="test@example.com", password="x"))
    assert exc_info.value.error_code == "EMAIL_EXISTS"


def test_public_identity_has_no_password(store: FallbackStore) -> None:
    user = store.find_by_email("admin@example.com").public()
    assert user.uid == "dummy-admin-1"
    assert "password" not in vars(user)
    assert user.metadata == {"creationTime": user.creation_time}


def test_merge_profile_unknown_uid(store: FallbackStore) -> None:
    assert store.merge_profile("ghost", {"x": 1}) is False
    assert store.merge_profile("dummy-user-1", {"x": 1}) is True
    assert store.find_by_uid("dummy-user-1").profile["x"] == 1


def test_migrate_email_same_address_is_noop(store: FallbackStore) -> None:
    record = store.find_by_email("test@example.com")
    store.migrate_email(record, "test@example.com")
    assert store.find_by_email("test@example.com") is record


def test_start_session_requires_stored_record(store: FallbackStore) -> None:
    stranger = UserRecord(uid="stranger", email="stranger@example.com", password="x")
    with pytest.raises(ValueError):
        store.start_session(stranger)
    record = store.find_by_email("test@example.com")
    store.start_session(record)
    assert store.session is record
    store.end_session()
    assert store.session is None


def test_merge_products_keeps_first_position_last_data() -> None:
    merged = merge_products_by_id(
        [{"id": "a", "v": 1}, {"id": "b", "v": 1}],
        [{"id": "c", "v": 2}, {"id": "a", "v": 2}],
    )
    assert merged == [{"id": "a", "v": 2}, {"id": "b", "v": 1}, {"id": "c", "v": 2}]
