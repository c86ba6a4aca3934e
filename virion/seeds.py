"""
virion/seeds.py
Deterministic seed derivation

seed = keccak256(abi.encodePacked(uint256 id, uint256 id, string DOMAIN_SEPARATOR))

CRITICAL: Keccak-256 is NOT hashlib.sha3_256 (different padding). Every
implementation that must agree on traits uses the same hash, the same
encoding and the same domain separator, or traits diverge silently.
"""

import hashlib
import operator

import numpy as np
from Crypto.Hash import keccak

from .config import DOMAIN_SEPARATOR, MAX_TOKEN_ID, TOKEN_ID_BITS


class TokenIdError(ValueError):
    """Raised when a token ID cannot be encoded as a uint256."""
    pass


def validate_token_id(token_id) -> int:
    """
    Validate a token ID and return it as a plain int, or raise TokenIdError.

    Rules:
    - Any integer type (int, numpy integers) is accepted; bool is rejected
    - 0 <= token_id <= 2**256 - 1, no wraparound
    """
    if isinstance(token_id, (bool, np.bool_)):
        raise TokenIdError("token_id must be an integer, got bool")
    try:
        token_id = operator.index(token_id)
    except TypeError:
        raise TokenIdError(
            f"token_id must be an integer, got {type(token_id).__name__}"
        ) from None
    if token_id < 0:
        raise TokenIdError(f"token_id {token_id} is negative")
    if token_id > MAX_TOKEN_ID:
        raise TokenIdError(
            f"token_id {token_id} does not fit in uint{TOKEN_ID_BITS}"
        )
    return token_id


def encode_packed_uint256(value: int) -> bytes:
    """32-byte big-endian encoding (Solidity uint256)."""
    return validate_token_id(value).to_bytes(TOKEN_ID_BITS // 8, "big")


def encode_seed_input(token_id: int) -> bytes:
    """
    Packed hash input: uint256(id) || uint256(id) || utf8(DOMAIN_SEPARATOR).

    Matches abi.encodePacked(uint256, uint256, string) - no length prefix
    and no padding on the string.
    """
    word = encode_packed_uint256(token_id)
    return word + word + DOMAIN_SEPARATOR.encode("utf-8")


def keccak256(data: bytes) -> bytes:
    """Keccak-256 digest (32 bytes)."""
    h = keccak.new(digest_bits=256)
    h.update(data)
    return h.digest()


def token_seed(token_id: int) -> int:
    """Seed for a token ID as a 256-bit unsigned integer."""
    return int.from_bytes(keccak256(encode_seed_input(token_id)), "big")


def seed_hex(token_id: int) -> str:
    """Seed as 0x-prefixed, zero-padded hex."""
    return "0x" + keccak256(encode_seed_input(token_id)).hex()


def stable_u32(*parts) -> int:
    """
    Stable 32-bit unsigned integer from arbitrary parts.

    Do NOT use Python's built-in hash() - it's salted per-process.
    """
    s = "|".join(str(p) for p in parts).encode("utf-8")
    return int.from_bytes(hashlib.sha256(s).digest()[:4], "big")


def particle_rng(seed: int, stream: str, index: int = 0) -> np.random.Generator:
    """
    Seeded generator for per-particle jitter.

    Keyed by (seed, stream, index) so body, each appendage and the
    atmosphere draw from independent streams: same ID -> same buffers.
    Jitter is presentation detail; identity lives in the traits only.
    """
    ss = np.random.SeedSequence(entropy=seed, spawn_key=(stable_u32(stream), index))
    return np.random.default_rng(ss)
