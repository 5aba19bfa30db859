import sys

from diagram_capture.cli import main

if __name__ == "__main__":
    sys.exit(main())
