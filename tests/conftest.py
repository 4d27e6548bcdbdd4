"""
Pytest configuration and fixtures for Cordscribe tests.
"""

import os
import sys
import tempfile
from pathlib import Path

# Keep test runs from filling the project's logs/ directory
os.environ.setdefault("CORDSCRIBE_LOG_DIR", tempfile.mkdtemp(prefix="cordscribe-test-logs-"))

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))
