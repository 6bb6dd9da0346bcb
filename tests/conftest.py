"""
pytest configuration for the resistor_qc test suite.
- Adds the repository root to sys.path so `resistor_qc` and `run` import from a plain checkout.
"""
import os
import sys

_tests_dir = os.path.dirname(__file__)
sys.path.insert(0, os.path.join(_tests_dir, ".."))
