"""Root test configuration."""

import logging

import pytest
import structlog
from stagehand.config.settings import Settings
from stagehand.specs.custom_resource import CustomResource
from stagehand.stores import InMemoryClusterStore


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


@pytest.fixture
def settings():
    """Settings independent of the developer's environment."""
    return Settings(_env_file=None)


@pytest.fixture
def store():
    """Empty in-memory secret and workload-status store."""
    return InMemoryClusterStore()


@pytest.fixture
def make_cr():
    """Build a CustomResource from components and spec fields."""

    def _make(components=None, milestone=None, **spec):
        return CustomResource.model_validate(
            {
                "metadata": {"name": "demo", "namespace": "content"},
                "spec": {"components": components or [], **spec},
                "status": {"milestone": milestone},
            }
        )

    return _make
