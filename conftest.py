# Test discovery helper: keep the repository root on sys.path so that the
# suite and dgen helpers import from kinqy_tests/ under pytest as well as
# when a test module is run directly.
import os
import sys

ROOT = os.path.dirname(os.path.abspath(__file__))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
