import re
from typing import NamedTuple

import semver

from kdm.utils.errors import VersionParseError

LESS, EQUAL, GREATER = -1, 0, 1

_VERSION_RE = re.compile(
    r"^v?(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:-([0-9A-Za-z.-]+))?(?:\+([0-9A-Za-z.-]+))?$"
)


class VersionInfo(NamedTuple):
    major: int
    minor: int
    micro: int
    releaselevel: str
    serial: str


class Version:
    """Comparable version parsed from a management-plane or Kubernetes version string.

    Accepts an optional leading ``v``, a missing minor/patch component
    (``2.3`` == ``2.3.0``), pre-release suffixes (``-rc1``, ``-rancher1-1``)
    and build metadata (``+build.5``). Ordering follows semantic version
    precedence.
    """

    _version: str

    info: VersionInfo

    def __init__(self, version: str, version_info: VersionInfo = None) -> None:
        self._version = version
        if version_info is None:
            version_info = Version.parse(version)
        self.info = version_info

    @classmethod
    def parse(cls, version: str) -> VersionInfo:
        """Parse a version string."""
        if not isinstance(version, str):
            raise VersionParseError(f"Version must be a string, got {type(version).__name__}")
        _match = _VERSION_RE.match(version.strip())
        if _match is None:
            raise VersionParseError(f"Invalid version string: {version!r}")
        _temp = _match.groups()
        return VersionInfo(
            int(_temp[0]),
            int(_temp[1] or 0),
            int(_temp[2] or 0),
            _temp[3] or "",
            _temp[4] or "",
        )

    @classmethod
    def from_str(cls, version: str) -> "Version":
        return cls(version, cls.parse(version))

    def __str__(self) -> str:
        return self._version

    def __repr__(self) -> str:
        return f"Version<{self._version}>"

    @property
    def semver(self) -> semver.Version:
        return semver.Version(
            self.info.major,
            self.info.minor,
            self.info.micro,
            prerelease=self.info.releaselevel or None,
            build=self.info.serial or None,
        )

    def compare(self, other: "Version") -> int:
        return self.semver.compare(other.semver)


def compare(a: str, b: str) -> int:
    """Compare two version strings, returning LESS, EQUAL or GREATER.

    Raises:
        VersionParseError: if either side is not a version string.
    """
    result = Version.from_str(a).compare(Version.from_str(b))
    if result < 0:
        return LESS
    if result > 0:
        return GREATER
    return EQUAL


def gte(a: str, b: str) -> bool:
    return compare(a, b) != LESS


def lt(a: str, b: str) -> bool:
    return compare(a, b) == LESS


def gt(a: str, b: str) -> bool:
    return compare(a, b) == GREATER


def major_version_of(version: str) -> str:
    """Return the ``vX.Y`` prefix of a Kubernetes version tag.

    ``v1.20.4-rancher1-1`` -> ``v1.20``
    """
    if not isinstance(version, str):
        raise VersionParseError(f"Version must be a string, got {type(version).__name__}")
    parts = version.split(".")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise VersionParseError(f"Cannot extract major version from {version!r}")
    return ".".join(parts[:2])
