"""Process entry point: `python main.py <rpc address 1> <rpc address 2> [-t N]`."""

import sys

from ebc.cli import main

if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
