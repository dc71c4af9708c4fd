#!/usr/bin/env python
"""
Vibe Status Hub - Reporter Script

Sends task status to a running hub. Editor hooks typically call:

    python report_status.py update-by-path --status running
    python report_status.py update-by-path --status completed
"""

import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from status_hub.cli import main

if __name__ == "__main__":
    sys.exit(main())
