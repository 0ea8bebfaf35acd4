"""Exception taxonomy for build orchestration.

Every error here is fatal to a run. A build that the pipeline reports
as failed is not an exception: it is recorded as ``exit_code = 1`` in
output.json.
"""


class UnityBuildError(Exception):
    """Base class for all fatal build orchestration errors."""


class ConfigError(UnityBuildError):
    """settings.json or a project settings asset is missing or malformed."""


class MissingArgumentError(UnityBuildError):
    """The -teleroot flag is absent or has no value after it."""


class VersionFormatError(UnityBuildError, ValueError):
    """The last component of the application version is not an integer."""


class UnsupportedPlatformError(UnityBuildError):
    """A platform outside the known build variants was requested."""


class ResultError(UnityBuildError):
    """output.json could not be read back after a build."""


__all__ = [
    "UnityBuildError",
    "ConfigError",
    "MissingArgumentError",
    "VersionFormatError",
    "UnsupportedPlatformError",
    "ResultError",
]
