"""Tour management API: content-negotiated tour resources with JSON Patch updates."""

__version__ = "1.0.0"
