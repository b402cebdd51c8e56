import sys

from pylocalstate.cli import main

if __name__ == "__main__":
    sys.exit(main())
