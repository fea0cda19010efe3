"""Module entry point for ``python -m finestat``."""

from finestat.cli import main

if __name__ == "__main__":
    main()
