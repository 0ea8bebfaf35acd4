"""Output file names for built binaries."""

import re
from datetime import datetime

from unitybuild.core.errors import VersionFormatError

_INTEGER = re.compile(r"[+-]?[0-9]+")


def bump_version(version: str) -> str:
    """Increment the last dot-separated component of version.

    >>> bump_version("1.2.9")
    '1.2.10'
    """
    parts = version.split(".")
    if not _INTEGER.fullmatch(parts[-1]):
        raise VersionFormatError(
            f"Last component of version {version!r} is not an integer"
        )
    parts[-1] = str(int(parts[-1]) + 1)
    return ".".join(parts)


def generate_name(
    app_version: str,
    product_name: str,
    now: datetime,
    extension: str = "apk",
) -> str:
    """Build the file name for a binary.

    The name is ``{product}.{version + 1}.{day}.{month}.{year}.{ext}``
    with spaces removed from the product name. The bumped version only
    appears in the file name; the project's version is not changed.

    Args:
        app_version: Application version, e.g. "1.2.9"
        product_name: Application product name
        now: Local time of the build
        extension: File extension without the dot

    Raises:
        VersionFormatError: If the last version component is not an
            integer
    """
    return (
        f"{product_name.replace(' ', '')}.{bump_version(app_version)}."
        f"{now.day}.{now.month}.{now.year}.{extension}"
    )
