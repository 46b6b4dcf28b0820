# Cosmos Collection Admin
# File: tests/test_sanity.py
# Version: v1

"""Basic sanity tests for configuration and wiring."""

from cosmos_collection_admin import __version__
from cosmos_collection_admin.config import AdminConfig
from cosmos_collection_admin.manager import CollectionManager


def test_config_from_env_minimal() -> None:
    config = AdminConfig.from_env()
    assert config is not None


def test_manager_from_config_uses_env_settings(monkeypatch) -> None:
    monkeypatch.delenv("COSMOS_CONNECTION_URI", raising=False)
    monkeypatch.setenv("COSMOS_HOST", "acct.documents.azure.com")
    monkeypatch.setenv("COSMOS_DATABASE", "shop")
    monkeypatch.setenv("COSMOS_COLLECTION", "orders")
    monkeypatch.setenv("COSMOS_PARTITION_KEY", "customerId")
    monkeypatch.setenv("COSMOS_MASTER_KEY", "c2VjcmV0LWtleQ==")
    monkeypatch.setenv("COSMOS_HTTP_TIMEOUT_SECONDS", "5")

    manager = CollectionManager.from_config(AdminConfig.from_env())

    assert manager.context.base_uri == "https://acct.documents.azure.com"
    assert manager.transport.timeout == 5.0
    assert manager.transport.api_version == "2015-12-16"


def test_version_is_a_string() -> None:
    assert isinstance(__version__, str)
