import sys

from dpllsat.cli import main

sys.exit(main())
