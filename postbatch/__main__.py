import sys

from postbatch.cli import run_cli

sys.exit(run_cli())
