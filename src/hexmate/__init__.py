"""
HexMate: numeric literal conversion for a terminal text editor.
"""

__version__ = '0.1.0'
