# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Root conftest.py so copilot_logfacade imports from a plain checkout."""

import sys
from pathlib import Path

_package_root = Path(__file__).parent
if str(_package_root) not in sys.path:
    sys.path.insert(0, str(_package_root))
