"""Main entry point for scriptdesk CLI when run as a module."""

from scriptdesk.cli.main import main

if __name__ == "__main__":  # pragma: no cover
    main()
