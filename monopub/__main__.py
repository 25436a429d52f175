"""Entry point for `python -m monopub`."""

from monopub.cli.app import main

if __name__ == "__main__":
    main()
