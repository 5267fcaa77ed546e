"""Error results returned by the registry."""

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    """Expected, recoverable failure kinds."""

    # creation
    INVALID_URL = "invalid_url"
    INVALID_VALIDITY = "invalid_validity"
    INVALID_CODE_FORMAT = "invalid_code_format"
    CODE_TAKEN = "code_taken"
    GENERATION_EXHAUSTED = "generation_exhausted"
    # resolution / deletion
    NOT_FOUND = "not_found"
    EXPIRED = "expired"


@dataclass(frozen=True)
class RegistryError:
    """A failed registry operation.

    Returned (not raised) so callers must handle each kind explicitly.
    """

    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return self.message
