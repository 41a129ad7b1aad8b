"""Command line switches for the key generation heavy parts of the test suite."""
import pytest

# marker: (option, run when the option is set, skip reason)
_GATED_MARKERS = {
    "slow": ("--skip-slow", False, "Slow test: runs without --skip-slow"),
    "extreme": ("--run-extreme", True, "Extreme test: runs with --run-extreme"),
}


def pytest_addoption(parser):
    group = parser.getgroup("pubkeyutils")
    group.addoption("--skip-slow", action="store_true", default=False, help="skip real key and group generation")
    group.addoption("--run-extreme", action="store_true", default=False, help="run primality tests on huge numbers")


def pytest_collection_modifyitems(config, items):
    skipped = {
        marker: pytest.mark.skip(reason=reason)
        for marker, (option, wanted, reason) in _GATED_MARKERS.items()
        if config.getoption(option) != wanted
    }
    for item in items:
        for marker, skip in skipped.items():
            if marker in item.keywords:
                item.add_marker(skip)
