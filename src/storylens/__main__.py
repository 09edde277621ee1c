"""Allow ``python -m storylens``."""

from storylens.cli.main import cli

if __name__ == "__main__":
    cli()
