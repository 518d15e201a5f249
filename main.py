#This file is for development purposes only

import sys

from release_report.cli import main

if __name__ == "__main__":
    sys.exit(main())
