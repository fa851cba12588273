"""intentbus - priority intent queue, handler dispatch and text-to-intent matching."""

__version__ = "0.1.0"
__logo__ = "⇢"
