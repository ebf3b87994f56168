import pytest
from callback_registry.domain.signature import Signature
from callback_registry.store.ram import RAMStore


def _cb(r):
    return {}


def test_set_get_unset():
    store = RAMStore()
    store.set("k", _cb, Signature(), {"count": 1})
    assert store.exists("k")
    cb, sig, env = store.get("k")
    assert cb is _cb
    assert sig == Signature()
    assert env == {"count": 1}
    store.unset("k")
    assert not store.exists("k")
    store.unset("k")  # already gone is fine
    with pytest.raises(KeyError):
        store.get("k")


def test_env_is_copied():
    store = RAMStore()
    env = {"count": 1}
    store.set("k", _cb, Signature(), env)
    env["count"] = 99
    store.get("k")[2]["count"] = 42
    assert store.get("k")[2]["count"] == 1


def test_keys_snapshot():
    store = RAMStore()
    for k in ("a", "b", "c"):
        store.set(k, _cb, Signature(), {})
    for k in store.keys():
        store.unset(k)
    assert len(store) == 0
