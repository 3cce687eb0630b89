"""Module entrypoint for ``python -m mathkeys``."""

from .cli import main


if __name__ == "__main__":
    main()
