from __future__ import annotations

import hashlib
import re
from typing import List

DISCRIMINATOR_LEN = 8

_BOUNDARY_RE = re.compile(r"([a-z0-9])([A-Z])|([A-Z]+)([A-Z][a-z])")


def gen_discriminator(namespace: str, name: str) -> List[int]:
    # Anchor discriminator = first 8 bytes of sha256("<namespace>:<name>")
    digest = hashlib.sha256(f"{namespace}:{name}".encode("utf-8")).digest()
    return list(digest[:DISCRIMINATOR_LEN])


def to_snake_case(name: str) -> str:
    """``createPoolV2`` -> ``create_pool_v2``; already-snake names pass through."""
    out = _BOUNDARY_RE.sub(lambda m: "_".join(g for g in m.groups() if g), name)
    out = re.sub(r"[-\s]+", "_", out)
    return re.sub(r"_+", "_", out).strip("_").lower()
