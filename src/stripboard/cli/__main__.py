"""Allow ``python -m stripboard.cli``."""

from stripboard.cli.main import main

main()
