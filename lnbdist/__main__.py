"""
Entry point for running lnbdist as a module.

Usage: python -m lnbdist [command] [options]
"""

from lnbdist.cli.parser import main

if __name__ == "__main__":
    main()
