"""Entry point for the 'python -m aclcore' command."""

from aclcore.cli import main

if __name__ == "__main__":
    main()
