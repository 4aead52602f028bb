"""Entry point for `python -m opencode_session`."""

import sys


def main():
    from opencode_session.app import run
    sys.exit(run())


if __name__ == "__main__":
    main()
