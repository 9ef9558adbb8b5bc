"""Version information for tempgram-automation."""

__version__ = "0.3.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Release information
__title__ = "tempgram-automation"
__description__ = "End-to-end browser and email scenarios for Tempgram"
__author__ = "Tempgram QA Team"
__license__ = "MIT"


def get_version() -> str:
    """Return the current version string."""
    return __version__
