from __future__ import annotations

import pytest

from litestar_dynamicmodel.config.model import reset_config


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Each test starts from the default environment-driven config."""

    monkeypatch.delenv("DYNMODEL_UNSAFE_POLICY", raising=False)
    monkeypatch.delenv("LITESTAR_DEBUG", raising=False)
    monkeypatch.delenv("DYNMODEL_CLI_IPDB", raising=False)
    reset_config()
    yield
    reset_config()
