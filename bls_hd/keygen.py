"""
EIP-2333 key derivation for BLS12-381 secret keys.

    derive_master_sk(seed)          -> SK
    derive_child_sk(parent_SK, i)   -> SK

Child keys go through a Lamport-style mixing step: the parent key and its
bitwise negation are each expanded into 255 HKDF blocks, every block is
hashed, and the 510 digests are hashed once more into a 32-byte compressed
"public key". That value (or the seed, for the master node) is reduced into
the scalar field by hkdf_mod_r.

https://eips.ethereum.org/EIPS/eip-2333
"""

import logging

from Crypto.Hash import SHA256
from Crypto.Protocol.KDF import HKDF

from .errors import DerivationError, InvalidChildIndex, SeedTooShort

log = logging.getLogger(__name__)

# ============================================================
#  Constants
# ============================================================

# Order of the BLS12-381 scalar field
R = 52435875175126190479447740508185965837690552500527637822603658699938581184513

K = 32                  # SHA-256 digest size
LAMPORT_BLOCKS = 255    # lamport_SK has 255 chunks of K bytes
L = 48                  # ceil((3 * ceil(log2(r))) / 16)
KEYGEN_SALT = b"BLS-SIG-KEYGEN-SALT-"
SEED_MIN_LEN = 32
MAX_INDEX = 0xFFFFFFFF

# ============================================================
#  Codec & Hash Primitives
# ============================================================

def sha256(data: bytes) -> bytes:
    h = SHA256.new()
    h.update(data)
    return h.digest()

def i2osp(val: int, length: int) -> bytes:
    """Big-endian encoding of a non-negative integer into exactly `length` bytes."""
    if val < 0:
        raise ValueError(f"cannot encode negative integer {val}")
    try:
        return val.to_bytes(length, "big")
    except OverflowError as e:
        raise ValueError(f"integer does not fit in {length} bytes") from e

def os2ip(data: bytes) -> int:
    return int.from_bytes(data, "big")

def to_b32(val: int) -> bytes:
    return i2osp(val, 32)

def to_b4(val: int) -> bytes:
    return i2osp(val, 4)

def to_b2(val: int) -> bytes:
    return i2osp(val, 2)

def _check_index(index: int):
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index <= MAX_INDEX:
        raise InvalidChildIndex(index)

def _check_sk(sk: int):
    if isinstance(sk, bool) or not isinstance(sk, int) or not 0 <= sk < R:
        raise ValueError("secret key must be an integer in [0, r)")

# ============================================================
#  Lamport Expansion
# ============================================================

def flip_bits(data: bytes) -> bytes:
    """Bitwise negation of every byte."""
    return bytes(b ^ 0xFF for b in data)

def ikm_to_lamport_sk(ikm: bytes, salt: bytes) -> list:
    """IKM_to_lamport_SK: 255 blocks of 32 bytes from HKDF-SHA256(salt, IKM, info="")."""
    try:
        blocks = HKDF(ikm, K, salt, SHA256, num_keys=LAMPORT_BLOCKS, context=b"")
    except ValueError as e:
        raise DerivationError(f"failed to expand lamport secret: {e}") from e
    if len(blocks) != LAMPORT_BLOCKS:
        raise DerivationError(f"expected {LAMPORT_BLOCKS} lamport blocks, got {len(blocks)}")
    return blocks

def parent_sk_to_lamport_pk(parent_sk: int, index: int) -> bytes:
    """parent_SK_to_lamport_PK: compressed 32-byte Lamport PK for child `index`."""
    _check_sk(parent_sk)
    _check_index(index)
    salt = to_b4(index)
    ikm = to_b32(parent_sk)
    lamport_0 = ikm_to_lamport_sk(ikm, salt)
    lamport_1 = ikm_to_lamport_sk(flip_bits(ikm), salt)

    # lamport_0 chunks first, then lamport_1, each in ascending order
    lamport_pk = bytearray()
    for block in lamport_0:
        lamport_pk += sha256(block)
    for block in lamport_1:
        lamport_pk += sha256(block)
    assert len(lamport_pk) == 2 * LAMPORT_BLOCKS * K
    return sha256(bytes(lamport_pk))

# ============================================================
#  HKDF mod r
# ============================================================

def hkdf_mod_r(ikm: bytes, key_info=b"") -> int:
    """HKDF_mod_r: reduce IKM into a non-zero scalar of the BLS12-381 field."""
    if isinstance(key_info, str):
        key_info = key_info.encode()
    secret = bytes(ikm) + b"\x00"
    info = bytes(key_info) + to_b2(L)
    salt = KEYGEN_SALT
    sk = 0
    attempt = 0
    while sk == 0:
        salt = sha256(salt)
        try:
            okm = HKDF(secret, L, salt, SHA256, context=info)
        except ValueError as e:
            raise DerivationError(f"failed reading OKM: {e}") from e
        if len(okm) != L:
            raise DerivationError(f"short OKM: {len(okm)} bytes")
        sk = os2ip(okm) % R
        attempt += 1
        if sk == 0:
            log.debug("hkdf_mod_r: zero candidate on attempt %d, rehashing salt", attempt)
    return sk

# ============================================================
#  Master / Child Derivation
# ============================================================

def derive_master_sk(seed: bytes) -> int:
    """derive_master_SK: master node secret key from a seed of at least 32 bytes."""
    if len(seed) < SEED_MIN_LEN:
        raise SeedTooShort(len(seed), SEED_MIN_LEN)
    return hkdf_mod_r(seed)

def derive_child_sk(parent_sk: int, index: int) -> int:
    """derive_child_SK: secret key of child `index` (0 <= index < 2**32)."""
    try:
        compressed_lamport_pk = parent_sk_to_lamport_pk(parent_sk, index)
    except DerivationError as e:
        raise DerivationError(f"failed parent_SK_to_lamport_PK for index {index}: {e}") from e
    return hkdf_mod_r(compressed_lamport_pk)
