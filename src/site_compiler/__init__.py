"""Compile website configurations into Next.js projects and route edits against them."""

__version__ = "0.1.0"
