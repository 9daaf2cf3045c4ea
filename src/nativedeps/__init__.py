"""nativedeps - native shared-library dependency validation for bundled binaries."""

__version__ = "0.3.0"
