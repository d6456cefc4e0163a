from __future__ import annotations

import hashlib
import json
import logging
import random
import uuid
from dataclasses import dataclass
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

SeedLike = Union[int, str, bytes]


def _to_stable_json(value: Any) -> str:
    """Canonical JSON (sorted keys, no whitespace) so derived seeds never depend on dict order."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True)
class RNGManager:
    """Deterministic RNG factory for a single dungeon seed.

    Every randomized decision in floor generation draws from a ``random.Random``
    derived from ``(master_seed, domain, *identifiers)``; the process-wide
    ``random`` module is never touched, so independent floors can be generated
    concurrently and the same inputs always yield the same floor.

    Usage pattern:
        rngm = RNGManager(dungeon_seed)
        floor_rng = rngm.context_rng("floor", level)
    """

    master_seed: SeedLike

    def __post_init__(self) -> None:
        object.__setattr__(self, "_master_seed_bytes", self._canonicalize_seed(self.master_seed))

    @staticmethod
    def _canonicalize_seed(seed: SeedLike) -> bytes:
        if isinstance(seed, bool):
            raise TypeError("Unsupported seed type: %r" % (type(seed),))
        if isinstance(seed, bytes):
            return seed
        if isinstance(seed, int):
            # Signed so that negative int64 seeds are accepted
            length = (seed.bit_length() + 8) // 8 or 1
            return seed.to_bytes(length, "big", signed=True)
        if isinstance(seed, str):
            return seed.strip().encode("utf-8")
        raise TypeError("Unsupported seed type: %r" % (type(seed),))

    def derive_seed(self, domain: str, *identifiers: Any) -> int:
        """Derive a 64-bit integer seed from the master seed and domain identifiers."""
        payload = {
            "domain": domain,
            "ids": identifiers,
            "master": self._master_seed_bytes.hex(),
            "algo": "blake2b-64",
            "version": 1,
        }
        data = _to_stable_json(payload).encode("utf-8")
        h = hashlib.blake2b(data, digest_size=8)
        seed_int = int.from_bytes(h.digest(), "big", signed=False)
        logger.debug("Derived seed for domain=%s ids=%s -> %d", domain, identifiers, seed_int)
        return seed_int

    def context_rng(self, domain: str, *identifiers: Any) -> random.Random:
        return random.Random(self.derive_seed(domain, *identifiers))

    def get_master_seed_hex(self) -> str:
        return self._master_seed_bytes.hex()


def make_id(rng: random.Random) -> str:
    """UUID4-shaped id drawn from ``rng``; stable for a given RNG stream."""
    raw = bytearray(rng.getrandbits(8) for _ in range(16))
    raw[6] = (raw[6] & 0x0F) | 0x40
    raw[8] = (raw[8] & 0x3F) | 0x80
    return str(uuid.UUID(bytes=bytes(raw)))


def random_seed(rng: Optional[random.Random] = None) -> int:
    """Fresh non-negative 63-bit seed for a new dungeon when the caller supplies none."""
    source = rng or random.SystemRandom()
    return source.getrandbits(63)
