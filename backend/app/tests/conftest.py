# Ensure the repository root (models, utils, adif_io) and backend/ (the `app` package) are importable
import sys
from pathlib import Path

# tests/ -> app/ -> backend/ -> repository root
BACKEND_DIR = Path(__file__).resolve().parents[2]
ROOT_DIR = BACKEND_DIR.parent
for p in (ROOT_DIR, BACKEND_DIR):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))
