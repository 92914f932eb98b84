"""Payment gateway adapters.

Import concrete gateways from their modules; this package stays import-light.
"""

__all__ = []
