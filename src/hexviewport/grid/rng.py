from __future__ import annotations

import hashlib
import random
from collections.abc import Sequence

from hexviewport.grid.world import HexCoord, PayloadChooser

RNG_TERRAIN_STREAM_NAME = "rng_terrain"


def derive_stream_seed(master_seed: int, stream_name: str) -> int:
    """Derive a deterministic child RNG seed from (master_seed, stream_name)."""
    digest = hashlib.sha256(f"{master_seed}:{stream_name}".encode("utf-8")).digest()
    return int.from_bytes(digest[:8], byteorder="big", signed=False)


def seeded_payload_chooser(master_seed: int, options: Sequence[str]) -> PayloadChooser:
    """Uniform random terrain per cell, reproducible for the same seed and generation order."""
    if not options:
        raise ValueError("options must not be empty")
    choices = tuple(options)
    rng_terrain = random.Random(derive_stream_seed(master_seed=master_seed, stream_name=RNG_TERRAIN_STREAM_NAME))

    def choose(coord: HexCoord) -> str:
        return rng_terrain.choice(choices)

    return choose


def cycling_payload_chooser(options: Sequence[str]) -> PayloadChooser:
    if not options:
        raise ValueError("options must not be empty")
    choices = tuple(options)

    def choose(coord: HexCoord) -> str:
        return choices[(coord.q + coord.r) % len(choices)]

    return choose
