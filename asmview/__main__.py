"""Module entrypoint for ``python -m asmview``.

All argument parsing and session setup happen in ``asmview.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
