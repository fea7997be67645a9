"""
Entry point for running the lnbdist CLI as a module.

Usage: python -m lnbdist.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
