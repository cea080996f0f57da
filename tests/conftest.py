"""Shared pytest configuration."""


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "slow: large-tree tests excluded by run_tests.py unless --all is given"
    )
