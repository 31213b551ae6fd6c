"""
Logging behaviour tests

packsynth runs inside host applications: it must leave their loguru
handlers alone and stay quiet until asked to talk.
"""

import importlib
import tempfile

import pytest
from loguru import logger

import packsynth
import packsynth.lib.log as log_module
from packsynth import EnvFlags, descriptor_synthesize, logging_disable, logging_enable


@pytest.fixture
def project_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def host_sink():
    """A host-application sink recording (logger name, message) pairs"""
    records = []
    handler_id = logger.add(lambda message: records.append(
        (message.record["name"], message.record["message"])
    ))
    yield records
    logger.remove(handler_id)


def synthesize(cwd, resolver):
    return descriptor_synthesize({"cwd": cwd}, EnvFlags(), resolver=resolver, verbosity=3)


class TestHostHandlers:
    def test_host_sink_survives_import(self, host_sink):
        """Importing packsynth never removes handlers it did not add"""
        importlib.reload(log_module)
        importlib.reload(packsynth)
        logger.info("host message")
        assert (__name__, "host message") in host_sink

    def test_silent_by_default(self, host_sink, project_dir, bare_resolver):
        synthesize(project_dir, bare_resolver)
        assert not [name for name, _ in host_sink if name.startswith("packsynth")]


class TestOptIn:
    def test_logging_enable_routes_records(self, project_dir, bare_resolver):
        received = []
        handler_id = logging_enable(lambda message: received.append(message.record["name"]))
        try:
            synthesize(project_dir, bare_resolver)
        finally:
            logging_disable(handler_id)

        assert received
        assert all(name.startswith("packsynth") for name in received)

    def test_verbosity_zero_stays_quiet(self, project_dir, bare_resolver):
        received = []
        handler_id = logging_enable(lambda message: received.append(message))
        try:
            descriptor_synthesize({"cwd": project_dir}, EnvFlags(), resolver=bare_resolver, verbosity=0)
        finally:
            logging_disable(handler_id)
        assert received == []
