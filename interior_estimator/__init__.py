"""
Interior Estimator
Measurement-to-cost engine and paginated estimate documents for interior works.
"""

__version__ = "1.0.0"

from pathlib import Path

# Package paths
PACKAGE_ROOT = Path(__file__).parent
RULES_DIR = PACKAGE_ROOT / "rules"
