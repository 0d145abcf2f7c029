#!/usr/bin/env python3
"""
Convenience wrapper for running Gas Watch from a source checkout.
Delegates to the gaswatch package; after installing, prefer: gaswatch
"""

from gaswatch.cli import main

if __name__ == "__main__":
    main()
