"""Module wrapper so running ``python -m assemblomatic.cli`` matches the console script."""

from assemblomatic.cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
