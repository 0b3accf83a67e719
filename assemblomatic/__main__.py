"""
Module entry-point that makes the package runnable with

    python -m assemblomatic

The behaviour is identical to the *assemblomatic-cli* console script because
the Click group imported below performs all dispatching.
"""

from assemblomatic.cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
