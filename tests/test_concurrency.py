"""Thread-safety tests for AuthGateway bindings."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

from authgate.backend.protocol import AuthResult
from authgate.errors import AuthenticatorUnavailableError
from authgate.gateway import AuthGateway
from tests.conftest import PEM, RecordingBackend


class BlockingBackend:
    """Backend whose verify() blocks until released."""

    def __init__(self) -> None:
        self.entered = threading.Event()
        self.release = threading.Event()

    def verify(self, username: str, secret: str) -> AuthResult:
        self.entered.set()
        self.release.wait(timeout=10)
        return AuthResult.ACCEPT


class TestConcurrentAuthenticate:
    def test_n_concurrent_calls_all_accepted(self, accepting_backend: RecordingBackend) -> None:
        gateway = AuthGateway(PEM)
        gateway.bound(accepting_backend)
        num_calls = 200

        with ThreadPoolExecutor(max_workers=16) as pool:
            results = list(pool.map(lambda i: gateway.authenticate(f"user{i}", "pw"), range(num_calls)))

        assert results == [True] * num_calls
        assert len(accepting_backend.calls) == num_calls
        assert sorted(accepting_backend.calls) == sorted((f"user{i}", "pw") for i in range(num_calls))


class TestLockScope:
    def test_slow_backend_does_not_block_rebinding(self) -> None:
        gateway = AuthGateway(PEM)
        slow = BlockingBackend()
        gateway.bound(slow)

        outcome: list[bool] = []
        worker = threading.Thread(target=lambda: outcome.append(gateway.authenticate("alice", "pw")))
        worker.start()
        assert slow.entered.wait(timeout=5)

        # The in-flight call holds its own reference; the slot is free.
        fast = RecordingBackend(AuthResult.REJECT)
        gateway.bound(fast)
        assert gateway.authenticate("bob", "pw") is False
        gateway.unbound()
        assert gateway.is_bound is False

        slow.release.set()
        worker.join(timeout=5)
        assert outcome == [True]
        assert fast.calls == [("bob", "pw")]

    def test_notification_before_call_is_visible(self) -> None:
        gateway = AuthGateway(PEM)
        done = threading.Event()
        backend = RecordingBackend(AuthResult.ACCEPT)

        def bind() -> None:
            gateway.bound(backend)
            done.set()

        threading.Thread(target=bind).start()
        assert done.wait(timeout=5)
        assert gateway.authenticate("alice", "pw") is True


class TestBindingStress:
    def test_interleaved_bind_unbind_and_authenticate(self) -> None:
        gateway = AuthGateway(PEM)
        backends = [RecordingBackend(AuthResult.ACCEPT, name=f"b{i}") for i in range(4)]
        stop = threading.Event()
        errors: list[Exception] = []
        outcomes = {"accepted": 0, "unavailable": 0}
        outcomes_lock = threading.Lock()

        def churn() -> None:
            try:
                i = 0
                while not stop.is_set():
                    gateway.bound(backends[i % len(backends)])
                    if i % 3 == 0:
                        gateway.unbound()
                    i += 1
            except Exception as e:
                errors.append(e)

        def login(n: int) -> None:
            try:
                for _ in range(n):
                    try:
                        accepted = gateway.authenticate("alice", "pw")
                    except AuthenticatorUnavailableError:
                        key = "unavailable"
                    else:
                        assert accepted is True
                        key = "accepted"
                    with outcomes_lock:
                        outcomes[key] += 1
            except Exception as e:
                errors.append(e)

        churner = threading.Thread(target=churn)
        logins = [threading.Thread(target=login, args=(500,)) for _ in range(8)]
        churner.start()
        for t in logins:
            t.start()
        for t in logins:
            t.join(timeout=30)
        stop.set()
        churner.join(timeout=10)

        assert errors == [], f"Concurrent operations raised errors: {errors}"
        assert outcomes["accepted"] + outcomes["unavailable"] == 8 * 500
        assert sum(len(b.calls) for b in backends) == outcomes["accepted"]
