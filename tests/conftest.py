# tests/conftest.py
import pytest

from tests.helpers import FakeTransport


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()
