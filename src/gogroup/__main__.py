from __future__ import annotations

import sys


def main() -> int:
    if sys.version_info < (3, 11):
        raise SystemExit(
            "gogroup requires Python 3.11+. "
            f"Current interpreter: {sys.executable} (Python {sys.version.split()[0]})"
        )
    from .cli import main as cli_main

    return cli_main()


if __name__ == "__main__":
    raise SystemExit(main())
