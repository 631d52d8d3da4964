"""mdbook-chapter-path: resolve chapter links by chapter name in mdBook books."""

__version__ = "0.1.0"
