"""Allow running ccg with ``python -m ccg``."""

from ccg.cli import main

if __name__ == "__main__":
    main()
