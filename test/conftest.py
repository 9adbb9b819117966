import pytest
from loguru import logger

from rfplane.device import MagnesiumRadioCtrl
from rfplane.rpc import MockRPCClient
from rfplane.tree import PropertyTree


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "slow: marks test as slow running test")
    config.addinivalue_line(
        "markers", "hardware: marks test that require physical hardware"
    )


@pytest.fixture
def tree():
    return PropertyTree()


@pytest.fixture
def rpcc():
    return MockRPCClient()


@pytest.fixture
def radio(tree):
    """Slot A control object, no session attached."""
    return MagnesiumRadioCtrl(tree, slot="A", db_idx=0, rpc_prefix="db_0_")


@pytest.fixture
def attached_radio(radio, rpcc):
    radio.attach_remote_session(rpcc, {})
    return radio


@pytest.fixture
def log_records():
    """Collect loguru records emitted during a test."""
    records = []
    handler_id = logger.add(lambda msg: records.append(msg.record), level="TRACE")
    yield records
    logger.remove(handler_id)

