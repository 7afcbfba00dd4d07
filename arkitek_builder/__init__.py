"""Arkitek Builder: cluster link registry and iPXE boot script generator."""

__version__ = "1.0.0"
