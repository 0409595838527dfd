# tests/test_support.py
import pytest

from sdk.cache import InventoryCache
from sdk.config import Settings
from sdk.models import InventoryRecord
from sdk.money import dollars_to_cents, format_price
from sdk.storage import LocalStorage

from conftest import FakeClock


def test_format_price():
    assert format_price(0) == "$0.00"
    assert format_price(4999) == "$49.99"
    assert format_price(123456789) == "$1,234,567.89"
    assert format_price(-250) == "-$2.50"
    assert dollars_to_cents(19.99) == 1999


def test_settings_from_env():
    s = Settings.from_env({
        "SUPERGAINS_API_URL": "http://api:8085",
        "SUPERGAINS_TIMEOUT": "2.5",
        "SUPERGAINS_INVENTORY_TTL_MS": "1000",
    })
    assert s.api_url == "http://api:8085"
    assert s.timeout == 2.5
    assert s.inventory_ttl_ms == 1000
    assert s.rate_limit_pause == 2.0
    assert Settings.from_env({}).inventory_ttl_ms == 300_000


def test_storage_persists_to_file(tmp_path):
    path = tmp_path / "nested" / "storage.json"
    s = LocalStorage(str(path))
    s.set_json("supergains_cart", [{"productId": "p1", "quantity": 1}])
    assert path.exists()

    again = LocalStorage(str(path))
    assert again.get_json("supergains_cart") == [{"productId": "p1", "quantity": 1}]
    again.remove_item("supergains_cart")
    assert "supergains_cart" not in LocalStorage(str(path))


def test_storage_tolerates_corrupt_data(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{not json")
    s = LocalStorage(str(path))
    assert s.get_item("anything") is None
    s.set_item("k", "{broken")
    assert s.get_json("k", default=[]) == []


@pytest.mark.parametrize("content", ["null", "[]", '"x"', "42"])
def test_storage_ignores_file_that_is_not_an_object(tmp_path, content):
    path = tmp_path / "storage.json"
    path.write_text(content)
    s = LocalStorage(str(path))
    assert s.get_item("supergains_cart") is None
    assert "supergains_cart" not in s
    s.remove_item("supergains_cart")
    s.set_json("supergains_cart", [])
    assert LocalStorage(str(path)).get_json("supergains_cart") == []


def test_storage_get_json_tolerates_non_string_values(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text('{"supergains_cart": 5}')
    s = LocalStorage(str(path))
    assert s.get_json("supergains_cart", default=[]) == []


def test_settings_log_level_is_normalized():
    assert Settings.from_env({"SUPERGAINS_LOG_LEVEL": "debug"}).log_level == "DEBUG"
    assert Settings(log_level=" info ").log_level == "INFO"
    assert Settings().log_level == "WARNING"


def test_cache_entry_expires_exactly_at_ttl():
    clock = FakeClock()
    cache = InventoryCache(ttl_ms=1000, clock=clock)
    record = InventoryRecord(product_id="p1", available_stock=5)
    cache.set("p1", record)
    clock.advance(999)
    assert cache.get("p1") == record
    clock.advance(1)
    assert "p1" not in cache
    assert cache.get("p1") is None
    assert len(cache) == 0


def test_cache_delete_and_clear():
    cache = InventoryCache(clock=FakeClock())
    cache.set("a", InventoryRecord(product_id="a"))
    cache.set("b", InventoryRecord(product_id="b"))
    assert cache.delete("a")
    assert not cache.delete("a")
    cache.clear()
    assert len(cache) == 0
