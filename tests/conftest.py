"""
Pytest configuration for cardmoves tests.

Provides:
- Project root on the import path, so tests run from a plain checkout
- Hypothesis profiles (select with HYPOTHESIS_PROFILE, default "default")
"""

import os
import sys

from hypothesis import settings

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

settings.register_profile("default", max_examples=100, print_blob=True)
settings.register_profile("ci", max_examples=500, print_blob=True, derandomize=True)
settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "default"))
