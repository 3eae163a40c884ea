from dataclasses import dataclass
from typing import Optional

from base64_reducer.errors import InvalidConstraints


def estimate_base64_length(byte_count: int) -> int:
    """
    Length of the padded base64 text for *byte_count* bytes, without
    encoding anything.
    """
    return (byte_count + 2) // 3 * 4


def validate_limits(
    max_base64_chars: Optional[int] = None,
    max_binary_bytes: Optional[int] = None,
) -> None:
    if max_base64_chars is None and max_binary_bytes is None:
        raise InvalidConstraints(
            "At least one of max_base64_chars or max_binary_bytes must be specified."
        )
    if max_base64_chars is not None and max_base64_chars <= 0:
        raise InvalidConstraints("max_base64_chars must be > 0")
    if max_binary_bytes is not None and max_binary_bytes <= 0:
        raise InvalidConstraints("max_binary_bytes must be > 0")


@dataclass(frozen=True)
class Constraints:
    """Output ceilings; an absent ceiling imposes nothing, present ones are ANDed."""

    max_binary_bytes: Optional[int] = None
    max_base64_chars: Optional[int] = None

    def validate(self) -> None:
        validate_limits(self.max_base64_chars, self.max_binary_bytes)

    def allows(self, binary_length: int) -> bool:
        if self.max_binary_bytes is not None and binary_length > self.max_binary_bytes:
            return False
        if (
            self.max_base64_chars is not None
            and estimate_base64_length(binary_length) > self.max_base64_chars
        ):
            return False
        return True


def is_within_limits(attempt, constraints: Constraints) -> bool:
    return constraints.allows(len(attempt.binary_data))
