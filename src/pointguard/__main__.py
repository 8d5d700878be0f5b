"""Allow ``python -m pointguard``; the clipboard relay is launched this way."""

from pointguard.cli import main

main()
