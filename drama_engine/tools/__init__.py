"""Command-line tools for drama catalogs."""
