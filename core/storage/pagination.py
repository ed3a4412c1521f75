"""
Key listing across pages

Drives BaseStorageBackend.list_keys with the continuation-token protocol:

    page 1 (no token) → keys + token A
    page 2 (token A)  → keys + token B
    page 3 (token B)  → keys, not truncated → stop

Pages depend on the previous token, so requests are strictly sequential.
"""

import logging
from typing import TYPE_CHECKING

from core.errors import BackendError, CalloutError

if TYPE_CHECKING:
    from core.interfaces.storage import BaseStorageBackend

logger = logging.getLogger(__name__)


async def list_all(backend: "BaseStorageBackend", bucket: str, prefix: str) -> list[str]:
    """
    List every key under prefix

    Args:
        backend: Storage backend
        bucket: Bucket name
        prefix: Key prefix filter

    Returns:
        Keys in the order the backend returned them (not re-sorted)

    Raises:
        CalloutError: Any page request failed. Keys gathered so far are
            discarded; a partial listing is never returned.
    """
    keys: list[str] = []
    continuation_token: str | None = None
    pages = 0

    while True:
        try:
            page = await backend.list_keys(bucket, prefix, continuation_token)
        except BackendError as e:
            logger.error(f"✗ Listing s3://{bucket}/{prefix} failed on page {pages + 1}: {e}")
            raise CalloutError("list keys", e) from e

        pages += 1
        keys.extend(page.keys)

        if page.has_next_page:
            continuation_token = page.next_continuation_token
            continue

        if page.is_truncated:
            # Treated as end of listing rather than looping forever
            logger.debug(
                f"Page {pages} of s3://{bucket}/{prefix} is truncated without a "
                f"continuation token; ending listing"
            )
        break

    logger.debug(f"Listed {len(keys)} keys in s3://{bucket}/{prefix} ({pages} pages)")
    return keys
