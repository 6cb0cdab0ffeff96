"""Version of the installed porthsim distribution."""

from importlib.metadata import PackageNotFoundError, version


def get_version() -> str:
    """Installed package version, or ``0.0.0`` when running from a bare checkout."""
    try:
        return version("porthsim")
    except PackageNotFoundError:
        return "0.0.0"
