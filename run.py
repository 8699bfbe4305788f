"""Entry point for the learnfeed content pipeline."""

import sys

from learnfeed.cli import main

if __name__ == "__main__":
    sys.exit(main())
