#!/usr/bin/env python3
"""
Compose session CLI launcher.

Usage:
  python scripts/compose_cli.py -f docker-compose.yml up
  python scripts/compose_cli.py -f docker-compose.yml logs web
"""

import sys
from pathlib import Path

# Add the project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from compose_session.cli import main

if __name__ == "__main__":
    main()
