import pickle
import threading
from datetime import timedelta
from unittest.mock import MagicMock, call

import pytest

from filepool.core.cache_item import CacheItem
from filepool.core.cache_pool import FileCachePool
from filepool.domain.exceptions import InvalidKeyError
from filepool.domain.interfaces.cache import CacheItemInterface
from filepool.domain.models.common import CacheItemState
from filepool.infrastructure.serialization.pickle_codec import PickleCodec


# --- Retrieval ---

def test_unsaved_key_is_absent_and_a_miss(pool: FileCachePool):
    assert pool.has_item("never-saved") is False
    item = pool.get_item("never-saved")
    assert isinstance(item, CacheItem)
    assert item.get_key() == "never-saved"
    assert item.is_hit() is False
    assert item.get() is None


def test_get_item_miss_does_not_read(mock_pool: FileCachePool, mock_storage: MagicMock):
    mock_pool.get_item("absent")
    mock_storage.exists.assert_called_once_with("absent")
    mock_storage.read.assert_not_called()


def test_save_then_get_restores_full_state(pool: FileCachePool, clock):
    saved = pool.get_item("x").set({"n": 42}).expires_after(3600)
    assert pool.save(saved) is True

    loaded = pool.get_item("x")
    assert loaded.state() == saved.state()
    assert loaded.is_hit() is True
    assert loaded.get() == {"n": 42}


def test_expired_blob_is_present_but_not_a_hit(pool: FileCachePool, clock):
    pool.save(CacheItem("old").set("stale").expires_after(10))
    clock.advance(11)

    assert pool.has_item("old") is True
    item = pool.get_item("old")
    assert item.is_hit() is False
    assert item.get() is None
    assert item.state().value == "stale"


def test_vanished_blob_is_treated_as_miss(mock_pool: FileCachePool, mock_storage: MagicMock):
    """A blob deleted between the existence check and the read is a miss, not an error."""
    mock_storage.exists.return_value = True
    mock_storage.read.side_effect = FileNotFoundError("gone")

    item = mock_pool.get_item("racy")
    assert item.is_hit() is False
    assert item.get_key() == "racy"


def test_corrupt_blob_is_treated_as_miss(pool: FileCachePool, cache_dir):
    (cache_dir / "broken").write_bytes(b"\x00not a pickle")

    assert pool.has_item("broken") is True
    item = pool.get_item("broken")
    assert item.is_hit() is False
    assert item.get() is None


def test_blob_for_another_key_is_treated_as_miss(mock_pool: FileCachePool, mock_storage: MagicMock):
    mock_storage.exists.return_value = True
    mock_storage.read.return_value = pickle.dumps(CacheItemState(key="other", value=1, hit=True))

    item = mock_pool.get_item("mine")
    assert item.get_key() == "mine"
    assert item.is_hit() is False


def test_get_items_keys_result_by_requested_key(pool: FileCachePool):
    pool.save(CacheItem("a").set(1))

    items = pool.get_items(["a", "b"])
    assert list(items) == ["a", "b"]
    assert items["a"].get() == 1
    assert items["b"].is_hit() is False


def test_get_items_with_no_keys_is_empty(pool: FileCachePool):
    assert pool.get_items([]) == {}
    assert pool.get_items() == {}


@pytest.mark.parametrize("operation", [
    lambda p: p.get_item("a/b"),
    lambda p: p.has_item(""),
    lambda p: p.get_items(["ok", "bad:key"]),
    lambda p: p.delete_item(".hidden"),
    lambda p: p.save(CacheItem("{x}").set(1)),
    lambda p: p.save_deferred(CacheItem("a@b").set(1)),
    lambda p: p.get_item("k" * 300),
    lambda p: p.has_item("k" * 300),
])
def test_invalid_keys_raise_before_storage_access(mock_pool, mock_storage, operation):
    with pytest.raises(InvalidKeyError):
        operation(mock_pool)
    assert mock_storage.method_calls == []
    assert mock_pool.deferred_count == 0


def test_keys_lists_only_legal_names_sorted(mock_pool: FileCachePool, mock_storage: MagicMock):
    mock_storage.list_keys.return_value = ["b", "a", "not:a:key"]
    assert mock_pool.keys() == ["a", "b"]


# --- Deletion ---

def test_delete_item_removes_blob(pool: FileCachePool):
    pool.save(CacheItem("gone").set(1))
    assert pool.delete_item("gone") is True
    assert pool.has_item("gone") is False


def test_delete_absent_key_reports_failure(pool: FileCachePool):
    assert pool.delete_item("never-saved") is False


def test_delete_items_stops_at_first_failure(mock_pool: FileCachePool, mock_storage: MagicMock):
    mock_storage.remove.side_effect = [True, False, True]

    assert mock_pool.delete_items(["k1", "k2", "k3"]) is False
    assert mock_storage.remove.call_args_list == [call("k1"), call("k2")]


def test_delete_items_leaves_keys_after_failure_untouched(pool: FileCachePool):
    pool.save(CacheItem("k1").set(1))
    pool.save(CacheItem("k3").set(3))

    # k2 was never saved, so deleting it fails
    assert pool.delete_items(["k1", "k2", "k3"]) is False
    assert pool.has_item("k1") is False
    assert pool.has_item("k3") is True


def test_delete_items_validates_every_key_first(mock_pool: FileCachePool, mock_storage: MagicMock):
    with pytest.raises(InvalidKeyError):
        mock_pool.delete_items(["k1", "bad/key"])
    mock_storage.remove.assert_not_called()


def test_delete_items_all_succeed(pool: FileCachePool):
    for key in ("a", "b"):
        pool.save(CacheItem(key).set(key))
    assert pool.delete_items(["a", "b"]) is True
    assert pool.delete_items([]) is True


def test_clear_empty_store_returns_true(pool: FileCachePool):
    assert pool.clear() is True


def test_clear_removes_everything(pool: FileCachePool, cache_dir):
    for key in ("a", "b", "c"):
        pool.save(CacheItem(key).set(key))

    assert pool.clear() is True
    assert pool.keys() == []
    assert list(cache_dir.iterdir()) == []


def test_clear_stops_at_first_failure(mock_pool: FileCachePool, mock_storage: MagicMock):
    mock_storage.list_keys.return_value = ["a", "b"]
    mock_storage.remove.return_value = False

    assert mock_pool.clear() is False
    mock_storage.remove.assert_called_once_with("a")


def test_clear_reports_unlistable_storage(mock_pool: FileCachePool, mock_storage: MagicMock):
    mock_storage.list_keys.side_effect = PermissionError("denied")

    assert mock_pool.clear() is False
    mock_storage.remove.assert_not_called()


def test_clear_after_directory_replaced_by_file(pool: FileCachePool, cache_dir):
    cache_dir.rmdir()
    cache_dir.write_bytes(b"")

    assert pool.save(CacheItem("a").set(1)) is False
    assert pool.clear() is False


# --- Persistence ---

def test_save_writes_encoded_state(mock_pool: FileCachePool, mock_storage: MagicMock):
    item = CacheItem("k").set([1, 2, 3])

    assert mock_pool.save(item) is True
    key, data = mock_storage.write_exclusive.call_args.args
    assert key == "k"
    assert PickleCodec().decode(data) == item.state()


def test_save_reports_write_failure(mock_pool: FileCachePool, mock_storage: MagicMock):
    mock_storage.write_exclusive.return_value = False
    assert mock_pool.save(CacheItem("k").set(1)) is False


def test_save_unserializable_value_returns_false(mock_pool: FileCachePool, mock_storage: MagicMock):
    assert mock_pool.save(CacheItem("lock").set(threading.Lock())) is False
    mock_storage.write_exclusive.assert_not_called()


def test_save_rejects_foreign_item_types(mock_pool: FileCachePool):
    foreign = MagicMock(spec=CacheItemInterface)
    with pytest.raises(TypeError):
        mock_pool.save(foreign)


def test_save_deferred_does_not_touch_storage(mock_pool: FileCachePool, mock_storage: MagicMock):
    assert mock_pool.save_deferred(CacheItem("k").set(1)) is True
    assert mock_pool.deferred_count == 1
    assert mock_storage.method_calls == []


def test_commit_empty_queue_touches_nothing(mock_pool: FileCachePool, mock_storage: MagicMock):
    assert mock_pool.commit() is True
    assert mock_storage.method_calls == []


def test_commit_same_key_later_wins(pool: FileCachePool):
    pool.save_deferred(CacheItem("dup").set("first"))
    pool.save_deferred(CacheItem("dup").set("second"))

    assert pool.commit() is True
    assert pool.deferred_count == 0
    assert pool.get_item("dup").get() == "second"


def test_commit_writes_in_insertion_order(mock_pool: FileCachePool, mock_storage: MagicMock):
    for key in ("c", "a", "b"):
        mock_pool.save_deferred(CacheItem(key).set(key))

    assert mock_pool.commit() is True
    assert [c.args[0] for c in mock_storage.write_exclusive.call_args_list] == ["c", "a", "b"]


def test_failed_commit_keeps_only_unattempted_items(mock_pool: FileCachePool, mock_storage: MagicMock):
    mock_storage.write_exclusive.side_effect = [True, False, True]
    for key in ("a", "b", "c"):
        mock_pool.save_deferred(CacheItem(key).set(key))

    assert mock_pool.commit() is False
    # "b" failed and was consumed; "c" was never attempted
    assert mock_pool.deferred_count == 1

    assert mock_pool.commit() is True
    assert [c.args[0] for c in mock_storage.write_exclusive.call_args_list] == ["a", "b", "c"]
    assert mock_pool.deferred_count == 0


def test_deferred_queue_holds_a_snapshot(pool: FileCachePool):
    item = CacheItem("snap").set("queued")
    pool.save_deferred(item)
    item.set("changed later")

    pool.commit()
    assert pool.get_item("snap").get() == "queued"


def test_deferred_items_keep_their_expiration(pool: FileCachePool, clock):
    pool.save_deferred(CacheItem("ttl").set(1).expires_after(timedelta(seconds=30)))
    pool.commit()

    clock.advance(31)
    assert pool.get_item("ttl").is_hit() is False
