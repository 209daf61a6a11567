"""Allow ``python -m transfer_sim``."""

import sys

from transfer_sim.cli import main

sys.exit(main())
