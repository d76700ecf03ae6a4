"""
EIP-2334 path traversal: m/i1/i2/... -> 32-byte secret key.

Each derivation walks the whole path from the master node. Nothing is
cached between calls, so "m/1/2" and "m/1/2/3" both recompute "m/1".
"""

import logging
import multiprocessing

from .errors import (
    DerivationError,
    EmptyPath,
    EmptyPathSegment,
    InvalidChildIndex,
    MissingMasterNode,
    SeedTooShort,
    UnexpectedMasterNode,
)
from .keygen import (
    MAX_INDEX,
    SEED_MIN_LEN,
    _check_index,
    derive_child_sk,
    derive_master_sk,
    to_b32,
)

log = logging.getLogger(__name__)

MASTER_NODE = "m"
PATH_SEPARATOR = "/"

# EIP-2334 purpose and coin type for Ethereum validator keys
PURPOSE = 12381
COIN_TYPE = 3600

_DIGITS = frozenset("0123456789")

# ============================================================
#  Parsing
# ============================================================

def _parse_index(segment: str, position: int) -> int:
    # int() alone would accept "+1", " 1", "1_0" and non-ASCII digits
    if not segment or not set(segment) <= _DIGITS:
        raise InvalidChildIndex(segment, position)
    # leading zeros are allowed in any number; MAX_INDEX has 10 digits
    digits = segment.lstrip("0") or "0"
    if len(digits) > len(str(MAX_INDEX)):
        raise InvalidChildIndex(segment, position)
    index = int(digits)
    if index > MAX_INDEX:
        raise InvalidChildIndex(segment, position)
    return index

def _walk(path: str):
    """Yield (position, index) per segment; index is None for the master node."""
    if path == "":
        raise EmptyPath()
    for i, seg in enumerate(path.split(PATH_SEPARATOR)):
        if seg == "":
            raise EmptyPathSegment(i)
        if seg == MASTER_NODE:
            if i != 0:
                raise UnexpectedMasterNode(i)
            yield i, None
        else:
            if i == 0:
                raise MissingMasterNode(seg)
            yield i, _parse_index(seg, i)

def parse_path(path: str) -> list:
    """Validate an HD path and return its child indices ("m" -> [])."""
    return [index for _, index in _walk(path) if index is not None]

# ============================================================
#  Derivation
# ============================================================

def secret_key_from_path(seed: bytes, path: str) -> bytes:
    """Derive the 32-byte big-endian secret key at `path` from `seed`."""
    if path == "":
        raise EmptyPath()
    if len(seed) < SEED_MIN_LEN:
        raise SeedTooShort(len(seed), SEED_MIN_LEN)

    sk = None
    for i, index in _walk(path):
        if index is None:
            try:
                sk = derive_master_sk(seed)
            except DerivationError as e:
                raise DerivationError(
                    f"failed to derive master node at segment {i}: {e}"
                ) from e
            log.debug("derived master node")
        else:
            try:
                sk = derive_child_sk(sk, index)
            except DerivationError as e:
                raise DerivationError(
                    f"failed to derive child node at segment {i}, index {index}: {e}"
                ) from e
            log.debug("derived child node at segment %d, index %d", i, index)

    if sk is None:
        raise DerivationError("failed to derive key")
    return to_b32(sk)

def _derive_path_worker(args):
    """Worker for multiprocessing: derive one path."""
    seed, path = args
    return secret_key_from_path(seed, path)

def secret_keys_from_paths(seed: bytes, paths, processes: int | None = None) -> list:
    """Derive every path independently, results in input order.

    With processes > 1 the paths are spread over a multiprocessing pool.
    The first error aborts the whole batch.
    """
    jobs = [(seed, path) for path in paths]
    if processes is None or processes <= 1 or len(jobs) <= 1:
        return [_derive_path_worker(job) for job in jobs]
    log.debug("deriving %d paths on %d processes", len(jobs), processes)
    with multiprocessing.Pool(processes) as pool:
        return pool.map(_derive_path_worker, jobs)

# ============================================================
#  EIP-2334 Paths
# ============================================================

def withdrawal_key_path(validator_index: int) -> str:
    """m/12381/3600/i/0"""
    _check_index(validator_index)
    return PATH_SEPARATOR.join(
        [MASTER_NODE, str(PURPOSE), str(COIN_TYPE), str(validator_index), "0"]
    )

def signing_key_path(validator_index: int) -> str:
    """m/12381/3600/i/0/0"""
    return withdrawal_key_path(validator_index) + PATH_SEPARATOR + "0"
