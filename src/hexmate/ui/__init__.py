"""
UI package for the terminal editor.

This package implements the curses front end: the WindowManager that draws
buffers, hover panel, decorations and convert dialog, and the InputHandler
that maps keys to editor and conversion actions.
"""

from .window import WindowManager
from .input_handler import InputHandler

__all__ = ['WindowManager', 'InputHandler']
