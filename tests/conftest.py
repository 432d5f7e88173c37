# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause
import logging

import pytest

from pydiverse.common.util.structlog import setup_logging

pytest_plugins = ["pytester"]

# Setup


def pytest_addoption(parser):
    parser.addoption(
        "--skip-beam",
        action="store_true",
        default=False,
        help="skip tests that run a Beam pipeline",
    )


def pytest_collection_modifyitems(config: pytest.Config, items):
    if config.getoption("--skip-beam"):
        skip = pytest.mark.skip(reason="--skip-beam given")
        for item in items:
            if "beam" in item.keywords:
                item.add_marker(skip)


setup_logging(log_level=logging.INFO)
