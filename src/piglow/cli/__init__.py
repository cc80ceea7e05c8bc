"""Command line interface for piglow."""
