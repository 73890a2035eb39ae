"""Module entrypoint for ``python -m dartline``.

All argument parsing and session setup happen in ``dartline.cli``.
"""

import sys

from .cli import main


if __name__ == "__main__":
    sys.exit(main())
