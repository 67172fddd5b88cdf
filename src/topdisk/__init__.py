"""topdisk - live per-disk I/O dashboard for storage pools."""

__version__ = "0.1.0"
