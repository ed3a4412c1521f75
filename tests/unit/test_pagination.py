"""
Unit tests for continuation-token listing
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from core.errors import BackendServiceError, CalloutError
from core.models.storage import ListPage
from core.storage.pagination import list_all
from tests.fakes import TEST_BUCKET, FakeStorageBackend


def scripted_backend(*pages):
    """Backend whose list_keys returns (or raises) the given items in order"""
    backend = MagicMock()
    backend.list_keys = AsyncMock(side_effect=list(pages))
    return backend


@pytest.mark.unit
class TestListAll:
    """Test list_all page traversal"""

    @pytest.mark.asyncio
    async def test_single_page(self):
        """Test a non-truncated page ends the listing after one request"""
        backend = scripted_backend(ListPage(keys=["a", "b"], is_truncated=False))

        keys = await list_all(backend, TEST_BUCKET, "")

        assert keys == ["a", "b"]
        backend.list_keys.assert_awaited_once_with(TEST_BUCKET, "", None)

    @pytest.mark.asyncio
    async def test_tokens_passed_in_sequence(self):
        """Test each request carries the previous page's token"""
        backend = scripted_backend(
            ListPage(keys=["a"], is_truncated=True, next_continuation_token="t1"),
            ListPage(keys=["b"], is_truncated=True, next_continuation_token="t2"),
            ListPage(keys=["c"], is_truncated=False),
        )

        keys = await list_all(backend, TEST_BUCKET, "logs/")

        assert keys == ["a", "b", "c"]
        tokens = [call.args[2] for call in backend.list_keys.await_args_list]
        assert tokens == [None, "t1", "t2"]

    @pytest.mark.asyncio
    async def test_backend_order_preserved(self):
        """Test keys are returned in backend order, not re-sorted"""
        backend = scripted_backend(
            ListPage(keys=["z", "a"], is_truncated=True, next_continuation_token="t"),
            ListPage(keys=["m"], is_truncated=False),
        )

        assert await list_all(backend, TEST_BUCKET, "") == ["z", "a", "m"]

    @pytest.mark.asyncio
    async def test_truncated_without_token_ends_listing(self):
        """Test a truncated page with no token stops instead of looping"""
        backend = scripted_backend(
            ListPage(keys=["a"], is_truncated=True, next_continuation_token="t1"),
            ListPage(keys=["b"], is_truncated=True, next_continuation_token=None),
        )

        keys = await list_all(backend, TEST_BUCKET, "")

        assert keys == ["a", "b"]
        assert backend.list_keys.await_count == 2

    @pytest.mark.asyncio
    async def test_empty_token_treated_as_missing(self):
        """Test an empty-string token does not trigger another request"""
        backend = scripted_backend(
            ListPage(keys=["a"], is_truncated=True, next_continuation_token=""),
        )

        assert await list_all(backend, TEST_BUCKET, "") == ["a"]

    @pytest.mark.asyncio
    async def test_empty_prefix_match(self):
        """Test no matching keys yields an empty list"""
        backend = scripted_backend(ListPage(keys=[], is_truncated=False))

        assert await list_all(backend, TEST_BUCKET, "nothing/") == []

    @pytest.mark.asyncio
    async def test_failure_mid_listing_discards_partial_result(self):
        """Test a failing page raises CalloutError rather than returning page 1"""
        cause = BackendServiceError("throttled")
        backend = scripted_backend(
            ListPage(keys=["a"], is_truncated=True, next_continuation_token="t1"),
            cause,
        )

        with pytest.raises(CalloutError) as exc_info:
            await list_all(backend, TEST_BUCKET, "")

        assert exc_info.value.cause is cause
        assert exc_info.value.operation == "list keys"

    @pytest.mark.asyncio
    async def test_more_than_one_backend_page(self):
        """Test 1003 keys across a 1000-key page limit are all returned"""
        backend = FakeStorageBackend(page_size=1000)
        for i in range(1003):
            backend.objects[(TEST_BUCKET, f"data/{i:05d}")] = {
                "body": b"",
                "metadata": None,
                "content_type": None,
            }

        keys = await list_all(backend, TEST_BUCKET, "data/")

        assert len(keys) == 1003
        assert keys[0] == "data/00000"
        assert keys[-1] == "data/01002"
        list_calls = [c for c in backend.calls if c[0] == "list_keys"]
        assert [c[3] for c in list_calls] == [None, "1000"]
