#!/usr/bin/env python3
"""
mts-ls CLI - Entry point for the MapTool macro script language server.

This module allows running the server as:
    python -m mts_language_server serve
    mts-ls serve  (when installed via pip)
"""

from mts_language_server.cli import main

if __name__ == "__main__":
    main()
