"""
Object key generation utilities

Date-partitioned keys keep related objects under one prefix per day and
make plain lexicographic listing return objects in write order.
"""

import uuid
from datetime import UTC, datetime

# 11 digits keeps string order == chronological order until year ~5138
EPOCH_DIGITS = 11


def date_partitioned_unique_key(prefix: str, timestamp: datetime | None = None) -> str:
    """
    Build a collision-resistant, time-partitioned object key

    Format: {prefix}/{YYYY}/{MM}/{DD}/{epoch-seconds, 11 digits}-{uuid4}

    Args:
        prefix: Path-like prefix, used as-is (no validation)
        timestamp: Write time; naive values are taken as UTC, aware values
            are converted to UTC. Defaults to now.

    Returns:
        Object key

    Example:
        >>> date_partitioned_unique_key("uploads", datetime(2024, 3, 5, tzinfo=UTC))
        'uploads/2024/03/05/01709596800-1b4e28ba-2fa1-11d2-883f-0016d3cca427'
    """
    if timestamp is None:
        timestamp = datetime.now(UTC)
    elif timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    else:
        timestamp = timestamp.astimezone(UTC)

    epoch = int(timestamp.timestamp())
    return (
        f"{prefix}/{timestamp:%Y}/{timestamp:%m}/{timestamp:%d}/"
        f"{epoch:0{EPOCH_DIGITS}d}-{uuid.uuid4()}"
    )
