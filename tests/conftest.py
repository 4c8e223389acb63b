import pytest
from click.testing import CliRunner
from loguru import logger


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging():
    """Drops sinks added by the command line so later tests stay silent."""
    yield
    logger.remove()
    logger.disable("manify")
