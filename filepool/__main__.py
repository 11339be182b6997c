"""Main entry point when executing filepool as a package.

This allows running the package using python -m filepool.
"""

from filepool.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
