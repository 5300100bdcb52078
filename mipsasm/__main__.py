import sys

from mipsasm.cli import main

sys.exit(main())
