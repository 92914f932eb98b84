"""Carrier adapters.

Import concrete clients from their modules; this package stays import-light.
"""

__all__ = []
