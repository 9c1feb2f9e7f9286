"""Tracking ids and timestamps for errors, snapshots and crash records.

Ids are KSUIDs: 4 bytes of seconds since the KSUID epoch followed by
16 random bytes, base62 encoded into 27 characters. They sort by creation
second, which keeps crash and run logs greppable in order.
"""

import os
import time
from datetime import datetime, timezone

KSUID_EPOCH = 1400000000
KSUID_LENGTH = 27
BASE62 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"


def generate_ksuid():
    """Generate a 27-character sortable unique ID."""
    seconds = int(time.time()) - KSUID_EPOCH
    n = int.from_bytes(seconds.to_bytes(4, "big") + os.urandom(16), "big")

    out = ""
    while n:
        n, digit = divmod(n, 62)
        out = BASE62[digit] + out
    return out.rjust(KSUID_LENGTH, "0")


def now_micros():
    """Current time in microseconds since Unix epoch."""
    return time.time_ns() // 1_000


def format_timestamp(epoch_us=None):
    """ISO 8601 UTC with microseconds and a trailing Z."""
    if epoch_us is None:
        epoch_us = now_micros()
    moment = datetime.fromtimestamp(epoch_us / 1_000_000, tz=timezone.utc)
    return moment.replace(tzinfo=None).isoformat(timespec="microseconds") + "Z"
