"""
lnbdist - distribution tooling for the lnb binary.

Installs the prebuilt lnb binary from a published platform package,
describes and renders the Homebrew formula, and manages release versions.
"""

__version__ = "0.1.0"
