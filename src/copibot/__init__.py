"""CopiBot: Spanish intent patterns for a WhatsApp sales and support bot."""

import importlib.metadata


def _get_version() -> str:
    """
    Retrieve the package version from metadata.

    Returns:
        The version string, or a development version if not installed.

    """
    try:
        return importlib.metadata.version("copibot")
    except importlib.metadata.PackageNotFoundError:
        # Running from a source checkout without an install
        return "0.0.0-dev"


__version__ = _get_version()
