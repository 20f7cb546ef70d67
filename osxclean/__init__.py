"""Uninstall macOS applications and clean junk files from system locations."""

__version__ = "0.1.0"