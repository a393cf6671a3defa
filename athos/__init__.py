"""Mount Athos Explorer - adaptive progress and recommendation service."""

__version__ = "0.1.0"
