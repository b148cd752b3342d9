from __future__ import annotations

import logging
import random
import re
import uuid

logger = logging.getLogger(__name__)

UUID4_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$", re.IGNORECASE
)

_TEMPLATE = "xxxxxxxx-xxxx-4xxx-yxxx-xxxxxxxxxxxx"


def _pseudo_random_uuid() -> str:
    out = []
    for ch in _TEMPLATE:
        if ch == "x":
            out.append(format(random.randint(0, 15), "x"))
        elif ch == "y":
            out.append(format(random.randint(0, 15) & 0x3 | 0x8, "x"))
        else:
            out.append(ch)
    return "".join(out)


def generate_agent_id() -> str:
    """
    Return a UUID-v4 string used as the correlation key for one submission.

    Uses the OS CSPRNG through `uuid.uuid4`; if no secure source is available
    it falls back to a pseudo-random id of the same shape, so this never fails.
    """
    try:
        return str(uuid.uuid4())
    except NotImplementedError:
        logger.warning("secure random source unavailable; using pseudo-random agent id")
        return _pseudo_random_uuid()


def is_agent_id(value: str) -> bool:
    return bool(value) and bool(UUID4_PATTERN.match(value))
