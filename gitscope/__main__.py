"""Allow ``python -m gitscope``."""

from .cli import main

main()
