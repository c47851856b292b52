"""
fnr_gui - Desktop front end for the fnr engine
"""

from .gui_entry import main

__all__ = ["main"]
