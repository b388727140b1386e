import logging

import pytest


@pytest.fixture(autouse=True)
def reset_stepsolve_logging():
    """Drop handlers the CLI attaches so they do not outlive captured streams."""
    yield
    logging.getLogger("stepsolve").handlers.clear()
