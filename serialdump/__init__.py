"""Serialdump - Java Object Serialization Stream decoder."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("serialdump")
except PackageNotFoundError:
    __version__ = "(local)"
