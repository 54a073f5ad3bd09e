"""
Pytest configuration for the ftmsim test suite.
"""

import os
import sys

# Add the parent directory to Python path so we can import the package without installing it
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))
