"""Textual integration: a character-cell render sink and a replay viewer."""

from .controller import TextualGridRenderer, TextualUIHooks, rgb, style_for

__all__ = ["TextualGridRenderer", "TextualUIHooks", "rgb", "style_for"]
