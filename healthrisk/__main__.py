import sys

from healthrisk.cli import main

sys.exit(main())
