"""Run the wallet CLI with ``python -m ethwallet``."""

import sys

from ethwallet.cli import main

sys.exit(main())
