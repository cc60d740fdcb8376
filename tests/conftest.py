import pytest
from loguru import logger


@pytest.fixture
def debug_messages():
    """Collect the messages logged at DEBUG level or above during a test."""
    messages = []
    handler_id = logger.add(messages.append, level="DEBUG", format="{message}")
    yield messages
    logger.remove(handler_id)
