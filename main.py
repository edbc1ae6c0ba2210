"""CLI entrypoint for the noise loop renderer."""

import sys

from noiseloop.cli import main


if __name__ == "__main__":
    sys.exit(main())
