import os
import tempfile

import pytest

# Output and scratch directories are created at import time, so point them at a
# throwaway location before any test module imports slidecast
_SANDBOX = tempfile.mkdtemp(prefix="slidecast-tests-")
os.environ.setdefault("SLIDECAST_OUTPUT_DIR", os.path.join(_SANDBOX, "videos"))
os.environ.setdefault("SLIDECAST_WORK_DIR", os.path.join(_SANDBOX, "work"))
os.environ.setdefault("OUTPUT_CLEANUP_ENABLED", "false")


@pytest.fixture(autouse=True)
def reset_log_context():
    """Keep request/job ids from leaking between tests"""
    from slidecast.core import clear_context

    clear_context()
    yield
    clear_context()
