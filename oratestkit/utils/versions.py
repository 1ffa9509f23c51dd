"""Version string comparison and Oracle version number helpers.

Oracle versions are handled in two shapes: dotted strings such as
``"19.3.0.0.0"`` and the packed integers used for prerequisite thresholds,
where 18.5 is ``1805000000``.
"""

import re
from enum import Enum, auto
from typing import Any, Optional, Sequence, Union

__all__ = (
    "VersionOrdering",
    "compare_version_strings",
    "encode_version",
    "is_soda_supported",
    "meets_version_prerequisites",
    "parse_version",
)

_LEADING_INTEGER_RE = re.compile(r"^\s*([+-]?[0-9]+)")
_INTEGER_PART_RE = re.compile(r"\s*[+-]?[0-9]+\s*")
_VERSION_PARTS = 5
_VERSION_WEIGHTS = (100000000, 1000000, 10000, 100, 1)

SODA_MIN_VERSION = 1805000000
SODA_CLIENT_METADATA_VERSION = 1909000000
ORACLE_20_VERSION = 2000000000


class VersionOrdering(Enum):
    """Result of comparing two version strings."""

    GREATER = auto()
    LESS = auto()
    EQUAL = auto()
    NOT_COMPARABLE = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def at_least(self) -> bool:
        """True when the left-hand version is greater than or equal to the right."""
        return self in {VersionOrdering.GREATER, VersionOrdering.EQUAL}


def _parse_token(token: str) -> Union[int, float]:
    # Lenient parse: "5beta" -> 5, anything without leading digits -> NaN
    match = _LEADING_INTEGER_RE.match(token)
    if match is None:
        return float("nan")
    return int(match.group(1))


def compare_version_strings(version1: Any, version2: Any) -> VersionOrdering:
    """Compare two dotted version strings.

    Tokens are compared numerically, left to right, up to the length of the
    shorter version. When every compared token matches, the version with
    fewer tokens ranks higher, so ``"12.2"`` is greater than ``"12.2.0.0.0"``.
    Tokens without leading digits parse to NaN and never decide the result.

    Args:
        version1: Left-hand version.
        version2: Right-hand version.

    Returns:
        The ordering of ``version1`` relative to ``version2``, or
        ``NOT_COMPARABLE`` when either input is not a string.
    """
    if not isinstance(version1, str) or not isinstance(version2, str):
        return VersionOrdering.NOT_COMPARABLE

    tokens1 = version1.split(".")
    tokens2 = version2.split(".")
    for raw1, raw2 in zip(tokens1, tokens2):
        t1, t2 = _parse_token(raw1), _parse_token(raw2)
        if t1 > t2:
            return VersionOrdering.GREATER
        if t1 < t2:
            return VersionOrdering.LESS
    if len(tokens1) < len(tokens2):
        return VersionOrdering.GREATER
    if len(tokens1) > len(tokens2):
        return VersionOrdering.LESS
    return VersionOrdering.EQUAL


def parse_version(version: str) -> "tuple[int, ...]":
    """Parse a dotted Oracle version string into integer parts.

    Raises:
        ValueError: If a part is not an ASCII integer.
    """
    parts = version.strip().split(".")
    if not all(_INTEGER_PART_RE.fullmatch(part) for part in parts):
        msg = f"Invalid version string: {version!r}"
        raise ValueError(msg)
    return tuple(int(part) for part in parts)


def encode_version(parts: "Sequence[int]") -> int:
    """Pack version parts into a single comparable integer.

    Args:
        parts: ``(major, minor, update, port_release, port_update)``; missing
            trailing parts count as zero and extra parts are ignored.

    Returns:
        The packed version, e.g. ``1805000000`` for ``(18, 5)``.
    """
    padded = (tuple(parts) + (0,) * _VERSION_PARTS)[:_VERSION_PARTS]
    return sum(part * weight for part, weight in zip(padded, _VERSION_WEIGHTS))


def meets_version_prerequisites(
    client_version: Optional[int], server_version: int, min_client: int, min_server: int
) -> bool:
    """Check packed client and server versions against minimums.

    A ``client_version`` of None means no client library is loaded (thin
    mode) and never blocks the check.
    """
    if client_version is not None and client_version < min_client:
        return False
    return server_version >= min_server


def is_soda_supported(client_version: Optional[int], server_version: Optional[int]) -> bool:
    """Decide whether SODA tests can run for a client and server pairing.

    SODA needs the Oracle Client libraries, so a missing client version is
    unsupported.
    """
    if client_version is None or server_version is None:
        return False
    if client_version < SODA_MIN_VERSION or server_version < SODA_MIN_VERSION:
        return False
    if server_version >= ORACLE_20_VERSION and client_version < ORACLE_20_VERSION:
        return False
    return not (client_version >= SODA_CLIENT_METADATA_VERSION and server_version < SODA_CLIENT_METADATA_VERSION)
