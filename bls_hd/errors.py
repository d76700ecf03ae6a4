"""Exceptions raised while deriving BLS12-381 secret keys.

Constructor arguments are kept in ``args`` so the errors survive pickling
across multiprocessing workers; messages are built in ``__str__``.
"""


class KeyDerivationError(Exception):
    """Base class for all key derivation errors."""


class SeedTooShort(KeyDerivationError, ValueError):
    def __init__(self, length: int, minimum: int = 32):
        self.length = length
        self.minimum = minimum
        super().__init__(length, minimum)

    def __str__(self):
        return f"seed is too short: {self.length} bytes, need at least {self.minimum}"


class DerivationError(KeyDerivationError, RuntimeError):
    """Raised when the underlying hash/KDF fails to produce its output."""


# ============================================================
#  Path errors
# ============================================================

class PathError(KeyDerivationError, ValueError):
    """Raised when an HD path does not follow the m/i1/i2/... grammar."""


class EmptyPath(PathError):
    def __str__(self):
        return "path must not be empty"


class EmptyPathSegment(PathError):
    def __init__(self, position: int):
        self.position = position
        super().__init__(position)

    def __str__(self):
        return f"path segment {self.position} is empty"


class UnexpectedMasterNode(PathError):
    def __init__(self, position: int):
        self.position = position
        super().__init__(position)

    def __str__(self):
        return f"unexpected master node in segment {self.position}"


class MissingMasterNode(PathError):
    def __init__(self, segment: str):
        self.position = 0
        self.segment = segment
        super().__init__(segment)

    def __str__(self):
        return f"missing master node at segment 0, got {self.segment!r}"


class InvalidChildIndex(PathError):
    def __init__(self, segment, position: int | None = None):
        self.segment = segment
        self.position = position
        super().__init__(segment, position)

    def __str__(self):
        where = "child index" if self.position is None else f"child node at segment {self.position}"
        return f"invalid {where}, value {self.segment!r}: expected an integer in [0, 2**32)"
