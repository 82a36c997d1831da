import threading

import pytest
from cachetools import TTLCache

from app.application import identity_service
from app.application.identity_service import (
    Identity,
    cached_identity,
    forget_identity,
    remember_identity,
)

class LockCheckingCache(TTLCache):
    """Fails any mutation made without the module lock held."""

    def __setitem__(self, key, value, *args, **kwargs):
        assert identity_service._identity_lock.locked()
        super().__setitem__(key, value, *args, **kwargs)

    def __getitem__(self, key, *args, **kwargs):
        assert identity_service._identity_lock.locked()
        return super().__getitem__(key, *args, **kwargs)

    def pop(self, key, *args):
        assert identity_service._identity_lock.locked()
        return super().pop(key, *args)

@pytest.fixture
def small_cache(monkeypatch):
    cache = LockCheckingCache(maxsize=4, ttl=60)
    monkeypatch.setattr(identity_service, "_identity_cache", cache)
    return cache

def test_remember_then_forget(small_cache):
    identity = Identity(user_id=1, tenant_id=7, token_version=0, name="Owner")
    remember_identity(identity)
    assert cached_identity(1) == identity
    forget_identity(1)
    assert cached_identity(1) is None

def test_forget_unknown_user_is_harmless(small_cache):
    forget_identity(42)
    assert cached_identity(42) is None

def test_concurrent_access_stays_consistent(small_cache):
    errors = []
    barrier = threading.Barrier(8)

    def churn(worker):
        barrier.wait()
        try:
            for i in range(300):
                user_id = (worker * 300 + i) % 16
                remember_identity(Identity(user_id, 1, 0, "u"))
                cached_identity(user_id)
                if i % 3 == 0:
                    forget_identity(user_id)
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=churn, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    assert errors == []
    assert len(small_cache) <= 4
