"""
Shared fixtures
"""
import logging

import pytest

from aws_tag_sweeper.models import ResourceKind, ResourceRecord


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Fake credentials so nothing can reach a real AWS account"""
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SECURITY_TOKEN', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', 'us-east-1')
    monkeypatch.delenv('AWS_PROFILE', raising=False)


@pytest.fixture
def restore_logging():
    """Undo logging.config.dictConfig changes made by a test"""
    root = logging.getLogger()
    package_logger = logging.getLogger('aws_tag_sweeper')
    saved = (root.level, list(root.handlers), package_logger.level,
             list(package_logger.handlers), package_logger.propagate)
    yield
    root.setLevel(saved[0])
    root.handlers[:] = saved[1]
    package_logger.setLevel(saved[2])
    package_logger.handlers[:] = saved[3]
    package_logger.propagate = saved[4]


def make_record(identity, kind=ResourceKind.GENERIC, tags=None, locality='us-east-1', short_id=None):
    return ResourceRecord(
        identity=identity,
        kind=kind,
        locality=locality,
        tags=dict(tags or {}),
        short_id=short_id,
    )


class StubDiscoverer:
    """Discoverer double returning canned records per locality"""

    def __init__(self, name, records_by_locality=None, fail_in=()):
        self.name = name
        self.records_by_locality = records_by_locality or {}
        self.fail_in = set(fail_in)
        self.calls = []

    def discover(self, locality):
        self.calls.append(locality)
        if locality in self.fail_in:
            raise RuntimeError(f"{self.name} is unavailable in {locality}")
        return list(self.records_by_locality.get(locality, []))
