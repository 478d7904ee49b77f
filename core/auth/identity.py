from __future__ import annotations
# revealgate - Password-gated reveal.js server
# Copyright (C) 2026 revealgate Authors
# SPDX-License-Identifier: Apache-2.0

"""Per-process signing salt.

Generated once at startup; every session signature mixes it in, so a
restart invalidates all outstanding sessions.
"""

import hashlib
import time
from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class InstanceIdentity:
    salt: str = field(repr=False)
    created_ns: int

    @classmethod
    def generate(cls, clock_ns: Callable[[], int] = time.time_ns) -> InstanceIdentity:
        created_ns = clock_ns()
        salt = hashlib.sha1(str(created_ns).encode("utf-8")).hexdigest()
        return cls(salt=salt, created_ns=created_ns)
