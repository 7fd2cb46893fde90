import logging

import pytest


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    # keep a developer's EXPRTREE_* environment out of the tests
    for name in ("TREE_FILE", "FILE_SUFFIX", "LOG_LEVEL", "HISTORY_FILE"):
        monkeypatch.delenv(f"EXPRTREE_{name}", raising=False)
    logging.getLogger("exprtree").setLevel(logging.DEBUG)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    if report.when == "call":
        print(f"TEST: {item.name} - {'PASSED' if report.passed else 'FAILED'}")
