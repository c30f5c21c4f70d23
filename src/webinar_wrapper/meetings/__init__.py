"""
Meeting providers.

Keep package import side-effects to a minimum to avoid circular imports.
Do not import factory/adapters here.
"""

__all__ = [
    "interface",
    "credentials",
    "factory",
    "zoom_adapter",
    "google_adapter",
]
