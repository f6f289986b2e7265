# main.py - luckyfive command-line entry point
import sys

from luckyfive.main import main

if __name__ == "__main__":
    sys.exit(main())
