"""BLS12-381 hierarchical secret key derivation (EIP-2333 / EIP-2334)."""

from .errors import (
    DerivationError,
    EmptyPath,
    EmptyPathSegment,
    InvalidChildIndex,
    KeyDerivationError,
    MissingMasterNode,
    PathError,
    SeedTooShort,
    UnexpectedMasterNode,
)
from .keygen import (
    R,
    SEED_MIN_LEN,
    derive_child_sk,
    derive_master_sk,
    flip_bits,
    hkdf_mod_r,
    ikm_to_lamport_sk,
    os2ip,
    parent_sk_to_lamport_pk,
    sha256,
    to_b32,
)
from .path import (
    parse_path,
    secret_key_from_path,
    secret_keys_from_paths,
    signing_key_path,
    withdrawal_key_path,
)

derive_master_key = derive_master_sk
derive_child_key = derive_child_sk
derive_key_from_path = secret_key_from_path

__all__ = [
    # EIP-2333
    "derive_master_sk", "derive_child_sk",
    "derive_master_key", "derive_child_key",
    "ikm_to_lamport_sk", "flip_bits", "parent_sk_to_lamport_pk", "hkdf_mod_r",
    "to_b32", "os2ip", "sha256", "R", "SEED_MIN_LEN",
    # EIP-2334
    "secret_key_from_path", "derive_key_from_path", "secret_keys_from_paths",
    "parse_path", "signing_key_path", "withdrawal_key_path",
    # Errors
    "KeyDerivationError", "SeedTooShort", "DerivationError", "PathError",
    "EmptyPath", "EmptyPathSegment", "UnexpectedMasterNode",
    "MissingMasterNode", "InvalidChildIndex",
]
