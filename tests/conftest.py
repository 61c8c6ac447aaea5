from typing import List, Tuple

import pytest

from pdb_gateway.models.server import PdbConfig


class FakeProvider:
    """Провайдер соединений: запоминает, к каким (host, port) обращались."""

    def __init__(self):
        self.calls: List[Tuple[str, int]] = []

    def get_connection(self, host: str, port: int):
        self.calls.append((host, port))
        return f"conn:{host}:{port}"


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def make_config():
    def _make(*urls: str, timeout: float = 5.0, soft_write_failure: bool = False) -> PdbConfig:
        return PdbConfig.from_values(list(urls), server_url_timeout=timeout, soft_write_failure=soft_write_failure)
    return _make
