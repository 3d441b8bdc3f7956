"""BLOBDASH - side-scrolling jump-and-crouch runner."""

__version__ = "0.1.0"
