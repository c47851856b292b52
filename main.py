#!/usr/bin/env python3
"""
fnr - Main Entry

Starts the desktop search and rename window.

Usage:
    python main.py
"""

import sys
from pathlib import Path

# Ensure the current directory is in the Python path
sys.path.insert(0, str(Path(__file__).parent))


def main():
    """Main entry point"""
    try:
        from fnr_gui import main as gui_main
    except ImportError as e:
        print(f"Error: Unable to start GUI, please ensure PySide6 is installed")
        print(f"Detailed error: {e}")
        print("\nInstall command: pip install PySide6")
        return 1
    return gui_main()


if __name__ == "__main__":
    sys.exit(main())
