"""
Run the scenario runner as `python -m ethereum_refunds_tools`.
"""

import sys

from . import main

sys.exit(main())
