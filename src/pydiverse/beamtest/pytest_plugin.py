# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

# Fixtures registered through the `pytest11` entry point. Both fixtures run their
# runtime after a passing test body, so deferred assertions are evaluated as part of
# the test. After a failed test body nothing runs.

import pytest
from apache_beam.testing.test_pipeline import TestPipeline

from pydiverse.beamtest._internal.backend.local import LocalRuntime


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    # makes the outcome of each phase available to fixture teardown as `rep_<when>`
    outcome = yield
    rep = outcome.get_result()
    setattr(item, f"rep_{rep.when}", rep)


def _body_passed(request: pytest.FixtureRequest) -> bool:
    rep = getattr(request.node, "rep_call", None)
    return rep is not None and rep.passed


@pytest.fixture
def pipeline(request):
    """A Beam `TestPipeline` that is run after a passing test body."""
    p = TestPipeline()
    yield p
    if _body_passed(request):
        p.run()


@pytest.fixture
def local_runtime(request):
    """A `LocalRuntime` that is run after a passing test body."""
    rt = LocalRuntime()
    yield rt
    if _body_passed(request):
        rt.run()
