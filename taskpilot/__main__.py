"""Allow ``python -m taskpilot``."""

from taskpilot.cli import main

main()
