#!/usr/bin/env python3
"""Run the transfer simulator from a source checkout.

Same as the ``transfer-sim`` console script; see ``transfer_sim.cli``.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from transfer_sim.cli import main

if __name__ == "__main__":
    sys.exit(main())
