"""Command implementations for the lnbdist CLI."""
