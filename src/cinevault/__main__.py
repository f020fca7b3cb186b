"""Entry point for 'python -m cinevault' command."""

from cinevault.cli import main

if __name__ == "__main__":
    main()
