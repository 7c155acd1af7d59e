"""
Pytest configuration.

Adds the project root (for domain, repositories, services, api) and this
directory (for the in-memory fakes) to the Python path, and provides a
`store` fixture that substitutes an in-memory catalogue and click ledger for
the Supabase repositories used by the redirect service.
"""

import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(Path(__file__).parent))

from fakes import InMemoryStore  # noqa: E402


@pytest.fixture()
def store(monkeypatch: pytest.MonkeyPatch) -> InMemoryStore:
    import services.redirect_service as redirect_service

    fake = InMemoryStore()
    monkeypatch.setattr(redirect_service, "get_campaign_by_slug", fake.get_campaign_by_slug)
    monkeypatch.setattr(redirect_service, "list_sellers_with_contacts", fake.list_sellers_with_contacts)
    monkeypatch.setattr(redirect_service, "count_campaign_clicks", fake.count_campaign_clicks)
    monkeypatch.setattr(redirect_service, "count_seller_clicks", fake.count_seller_clicks)
    monkeypatch.setattr(redirect_service, "record_click", fake.record_click)
    return fake
