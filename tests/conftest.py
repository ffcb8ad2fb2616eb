"""Test configuration for pytest."""

import logging
import os
import pytest


@pytest.fixture(autouse=True)
def configure_test_logging():
    """Configure logging for tests to be minimal."""
    os.environ['IMGCOMPARE_LOG_LEVEL'] = 'WARNING'

    logging.getLogger().setLevel(logging.WARNING)

    # The batch and cluster modules warn about every skipped image
    for logger_name in ['imgcompare.dedup.batch', 'imgcompare.dedup.cluster']:
        logging.getLogger(logger_name).setLevel(logging.ERROR)
