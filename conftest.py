# conftest.py
# Makes the awair_exporter package importable from a source checkout
import sys
from pathlib import Path

ROOT_PATH = Path(__file__).parent
if str(ROOT_PATH) not in sys.path:
    sys.path.insert(0, str(ROOT_PATH))
