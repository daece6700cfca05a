"""Allow ``python -m notesearch``."""

from notesearch.cli import main

if __name__ == "__main__":
    main()
