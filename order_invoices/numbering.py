"""Human-readable invoice numbers."""

from __future__ import annotations

import random
import re
import string
from datetime import datetime
from typing import Optional

INVOICE_NUMBER_PATTERN = re.compile(r"^INV-\d{4}(0[1-9]|1[0-2])-[A-Z0-9]{6}$")

SUFFIX_ALPHABET = string.digits + string.ascii_uppercase
SUFFIX_LENGTH = 6

_system_random = random.SystemRandom()


def generate_invoice_number(
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> str:
    """Return ``INV-<YYYY><MM>-<6 base36 chars>``.

    The suffix is random, so numbers are informational rather than keys.
    """
    now = now or datetime.now()
    rng = rng or _system_random
    suffix = "".join(rng.choice(SUFFIX_ALPHABET) for _ in range(SUFFIX_LENGTH))
    return f"INV-{now.year:04d}{now.month:02d}-{suffix}"
