import sys

from pagelist_toolkit.cli import main

if __name__ == "__main__":
    sys.exit(main())
