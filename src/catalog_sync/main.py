"""Main entry point for the catalog-sync CLI.

Usage:
    python -m catalog_sync.main --help
    catalog-sync --help  # If installed via pip/uv
"""

from catalog_sync.cli import main

if __name__ == "__main__":
    main()
