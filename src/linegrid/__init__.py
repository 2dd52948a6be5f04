"""Client-side model of the editor's line-grid UI protocol."""

__all__ = [
    "adapters",
    "config",
    "grid",
    "redraw",
    "render",
    "runtime",
    "session",
]

__version__ = "0.1.0"
