"""Content-addressable resource pool for uploaded application artifacts."""

__version__ = "1.0.0"
