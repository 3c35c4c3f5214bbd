"""
Pytest configuration for nutrilog.
Puts the project root and this directory on sys.path so tests can import the
``app``, ``domain``, ``repositories`` and ``services`` packages and share
factories through ``test_fixtures``.
"""

import sys
from pathlib import Path

tests_dir = Path(__file__).parent
project_root = tests_dir.parent
for path in (project_root, tests_dir):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))
