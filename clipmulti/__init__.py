"""clipmulti: clipboard history with slots, pinning and a shared JSON store."""

__version__ = "0.1.0"
