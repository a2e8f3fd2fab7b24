#!/usr/bin/env python3
"""
blockwfc CLI - Entry point for the block placement solver.

This module allows running the solver as:
    python -m block_wfc --size 3x3x1
    blockwfc --size 3x3x1  (when installed via pip)
"""

from block_wfc.cli import main

if __name__ == "__main__":
    main()
