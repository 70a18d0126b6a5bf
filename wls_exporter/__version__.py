"""
Version of the weblogic-exporter distribution.

Installed packages report the version recorded in their metadata; a source
checkout reads it from the ``[project]`` table of pyproject.toml.
"""

try:
    from importlib.metadata import version

    __version__ = version("weblogic-exporter")
except Exception:
    # Running from a checkout that was never pip-installed
    import tomllib
    from pathlib import Path

    try:
        with open(Path(__file__).resolve().parents[1] / "pyproject.toml", "rb") as f:
            __version__ = tomllib.load(f)["project"]["version"]
    except Exception:
        __version__ = "0.0.0-dev"
