"""Tests for the pending-request registry."""

import pytest

from fetchwise.services import (
    CancelError,
    CancellationToken,
    ErrorKind,
    PendingRequestRegistry,
)


class TestPendingRequestRegistry:
    """Tests for PendingRequestRegistry."""

    def test_register_stores_token(self) -> None:
        registry = PendingRequestRegistry()
        token = CancellationToken()

        assert registry.register("get/a", token) is True
        assert registry.is_pending("get/a")
        assert len(registry) == 1

    def test_register_keeps_existing_entry(self) -> None:
        registry = PendingRequestRegistry()
        first = CancellationToken()
        second = CancellationToken()
        registry.register("get/a", first)

        assert registry.register("get/a", second) is False

        registry.supersede("get/a", "Request canceled")
        assert first.is_cancelled()
        assert not second.is_cancelled()

    def test_supersede_triggers_cancel_error(self) -> None:
        registry = PendingRequestRegistry()
        token = CancellationToken()
        registry.register("get/a", token)

        assert registry.supersede("get/a", "Request canceled") is True

        assert token.is_cancelled()
        assert isinstance(token.reason, CancelError)
        assert token.reason.kind == ErrorKind.CANCEL
        assert token.reason.message == "Request canceled"
        assert token.reason.key == "get/a"
        assert not registry.is_pending("get/a")

    def test_supersede_absent_key_is_noop(self) -> None:
        registry = PendingRequestRegistry()

        assert registry.supersede("get/missing", "Request canceled") is False
        assert registry.get_stats().superseded == 0

    def test_supersede_then_register_holds_single_entry(self) -> None:
        registry = PendingRequestRegistry()
        old = CancellationToken()
        new = CancellationToken()
        registry.register("get/a", old)

        registry.supersede("get/a", "Request canceled")
        assert registry.register("get/a", new) is True

        assert registry.pending_keys() == ["get/a"]
        assert old.is_cancelled()
        assert not new.is_cancelled()

    def test_unregister_removes_entry(self) -> None:
        registry = PendingRequestRegistry()
        registry.register("get/a", CancellationToken())

        assert registry.unregister("get/a") is True
        assert registry.unregister("get/a") is False
        assert len(registry) == 0

    def test_unregister_with_stale_token_keeps_newer_entry(self) -> None:
        registry = PendingRequestRegistry()
        old = CancellationToken()
        new = CancellationToken()
        registry.register("get/a", old)
        registry.supersede("get/a", "Request canceled")
        registry.register("get/a", new)

        assert registry.unregister("get/a", old) is False
        assert registry.is_pending("get/a")
        assert registry.unregister("get/a", new) is True

    def test_supersede_swallows_cleanup_failures(self) -> None:
        class BrokenToken(CancellationToken):
            def trigger(self, reason: CancelError) -> bool:
                raise RuntimeError("boom")

        registry = PendingRequestRegistry()
        registry.register("get/a", BrokenToken())

        assert registry.supersede("get/a", "Request canceled") is True
        assert not registry.is_pending("get/a")

    def test_cancel_all(self) -> None:
        registry = PendingRequestRegistry(debug=True)
        tokens = [CancellationToken() for _ in range(3)]
        for i, token in enumerate(tokens):
            registry.register(f"get/{i}", token)

        assert registry.cancel_all() == 3

        assert all(t.is_cancelled() for t in tokens)
        assert len(registry) == 0

    def test_stats(self) -> None:
        registry = PendingRequestRegistry()
        registry.register("get/a", CancellationToken())
        registry.register("get/b", CancellationToken())
        registry.supersede("get/a", "Request canceled")

        stats = registry.get_stats().to_dict()

        assert stats == {"registered": 2, "superseded": 1, "in_flight": 1}


class TestCancellationToken:
    """Tests for CancellationToken."""

    def test_first_reason_wins(self) -> None:
        token = CancellationToken()
        first = CancelError("first")

        assert token.trigger(first) is True
        assert token.trigger(CancelError("second")) is False
        assert token.reason is first

    def test_raise_if_cancelled(self) -> None:
        token = CancellationToken()
        token.raise_if_cancelled()

        token.trigger(CancelError("stop"))

        with pytest.raises(CancelError, match="stop"):
            token.raise_if_cancelled()

    @pytest.mark.asyncio
    async def test_wait_returns_reason_when_already_triggered(self) -> None:
        token = CancellationToken()
        reason = CancelError("stop")
        token.trigger(reason)

        assert await token.wait() is reason
