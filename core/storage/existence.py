"""
Existence checks and bounded waits

key_exists / head_if_exists:
    One HEAD probe. Absence is an answer (False / None), not an error.
    Every other failure (permissions, throttling, network) is raised as a
    CalloutError and never collapsed into "doesn't exist".

wait_until_key_exists:
    Delegates to the backend's wait primitive. S3 has a native waiter;
    other backends fall back to poll_until_exists.
"""

import asyncio
import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from core.errors import BackendError, BackendNotFoundError, BackendTimeoutError, CalloutError
from core.models.storage import ObjectHead

if TYPE_CHECKING:
    from core.interfaces.storage import BaseStorageBackend

logger = logging.getLogger(__name__)

DEFAULT_WAIT_TIMEOUT = timedelta(seconds=60)


async def head_if_exists(
    backend: "BaseStorageBackend", bucket: str, key: str
) -> ObjectHead | None:
    """
    HEAD key, mapping absence to None

    Raises:
        CalloutError: HEAD failed for any reason other than absence
    """
    try:
        return await backend.head_object(bucket, key)
    except BackendNotFoundError:
        return None
    except BackendError as e:
        logger.error(f"✗ HEAD s3://{bucket}/{key} failed: {e}")
        raise CalloutError("check key existence", e) from e


async def key_exists(backend: "BaseStorageBackend", bucket: str, key: str) -> bool:
    """
    Check whether key exists

    Returns:
        True if HEAD succeeded, False if the backend reported not-found

    Raises:
        CalloutError: HEAD failed for any reason other than absence
    """
    return await head_if_exists(backend, bucket, key) is not None


async def wait_until_key_exists(
    backend: "BaseStorageBackend",
    bucket: str,
    key: str,
    timeout: timedelta = DEFAULT_WAIT_TIMEOUT,
) -> None:
    """
    Block until key exists, bounded by timeout

    Raises:
        CalloutError: Timeout (cause is BackendTimeoutError) or probe failure
    """
    try:
        await backend.wait_until_object_exists(bucket, key, timeout)
    except BackendError as e:
        logger.error(
            f"✗ Waiting for s3://{bucket}/{key} failed after up to "
            f"{timeout.total_seconds():g}s: {e}"
        )
        raise CalloutError("wait until key exists", e) from e

    logger.debug(f"s3://{bucket}/{key} exists")


async def poll_until_exists(
    backend: "BaseStorageBackend",
    bucket: str,
    key: str,
    timeout: timedelta,
    poll_interval: timedelta,
) -> None:
    """
    Emulated waiter: probe head_object until it succeeds or the deadline passes

    The first probe always runs, even with a zero timeout. Sleeps never
    overshoot the deadline.

    Raises:
        ValueError: Negative timeout or non-positive poll_interval
        BackendTimeoutError: Still absent at the deadline
        BackendServiceError: A probe failed for a reason other than absence
    """
    timeout_s = timeout.total_seconds()
    interval_s = poll_interval.total_seconds()
    if timeout_s < 0:
        raise ValueError(f"timeout must be non-negative, got {timeout}")
    if interval_s <= 0:
        raise ValueError(f"poll_interval must be positive, got {poll_interval}")

    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_s
    probes = 0

    while True:
        probes += 1
        try:
            await backend.head_object(bucket, key)
            return
        except BackendNotFoundError:
            pass

        remaining = deadline - loop.time()
        if remaining <= 0:
            raise BackendTimeoutError(
                f"s3://{bucket}/{key} did not appear within {timeout_s:g}s ({probes} probes)"
            )
        await asyncio.sleep(min(interval_s, remaining))
