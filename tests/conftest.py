import sys
from pathlib import Path

# Ensure the flat top-level packages are importable for tests
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))
