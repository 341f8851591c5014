"""
Semantic-version ordering for disk image versions.

Versions are compared by semver precedence: major.minor.patch first, then
pre-release, with build metadata ignored. The leading ``v`` is required, and
the bare ``v1`` / ``v1.2`` shorthands are completed with zeros. A shorthand
may not carry a pre-release or build suffix, so ``v1.2-beta`` is malformed.

Malformed versions are tolerated rather than rejected: they compare equal to
one another and lower than every well-formed version.
"""

import logging
import re

import semver

logger = logging.getLogger(__name__)

_SHORTHAND = re.compile(r"(0|[1-9]\d*)(\.(0|[1-9]\d*))?")


def parse_version(version: str) -> semver.Version | None:
    """Return the parsed version, or ``None`` when it is not valid semver."""
    if version.startswith("v"):
        candidate = version[1:]
        if _SHORTHAND.fullmatch(candidate):
            return semver.Version.parse(candidate, optional_minor_and_patch=True)
        try:
            return semver.Version.parse(candidate)
        except ValueError:
            pass
    logger.debug("Malformed disk image version", extra={"version": version})
    return None


def compare_versions(left: str, right: str) -> int:
    """Return -1, 0 or 1 as ``left`` is lower than, equal to, or higher than ``right``."""
    left_parsed = parse_version(left)
    right_parsed = parse_version(right)

    if left_parsed is None and right_parsed is None:
        return 0
    if left_parsed is None:
        return -1
    if right_parsed is None:
        return 1
    return left_parsed.compare(right_parsed)
