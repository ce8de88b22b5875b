"""Allow running vreport as ``python -m vreport``."""

from vreport.cli import cli

if __name__ == "__main__":
    cli()
