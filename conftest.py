"""
Pytest configuration for the segmentation test suite.

This file ensures the project root is in the Python path
so tests can import coin_segmentation and tests.fixtures.
"""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))
