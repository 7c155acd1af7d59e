"""
Tests for the Supabase repositories using a stub query builder.

Checks the queries each repository issues and how rows, counts and error
responses are mapped, without a live database.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List, Optional
from uuid import UUID

import pytest

import repositories.campaign_repository as campaign_repository
import repositories.click_repository as click_repository
import repositories.seller_repository as seller_repository

CAMPAIGN_ID = "00000000-0000-0000-0000-000000000c01"
TEAM_ID = "00000000-0000-0000-0000-0000000000aa"
SELLER_A = "00000000-0000-0000-0000-00000000000a"
SELLER_B = "00000000-0000-0000-0000-00000000000b"


@dataclass
class StubResponse:
    data: List[dict] = field(default_factory=list)
    count: Optional[int] = None
    error: Any = None


class StubQuery:
    """Records every builder call and returns a canned response on execute()."""

    def __init__(self, client: "StubSupabase", table: str):
        self.client = client
        self.table = table
        self.calls: List[tuple] = []

    def __getattr__(self, name: str):
        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self

        return method

    def execute(self) -> StubResponse:
        return self.client.response


class StubSupabase:
    def __init__(self, response: StubResponse):
        self.response = response
        self.queries: List[StubQuery] = []

    def table(self, name: str) -> StubQuery:
        query = StubQuery(self, name)
        self.queries.append(query)
        return query


@pytest.fixture()
def stub(monkeypatch: pytest.MonkeyPatch):
    def install(response: StubResponse) -> StubSupabase:
        client = StubSupabase(response)
        for module in (campaign_repository, seller_repository, click_repository):
            monkeypatch.setattr(module, "get_supabase", lambda: client)
        return client

    return install


def test_get_campaign_by_slug_maps_row(stub) -> None:
    client = stub(
        StubResponse(
            data=[
                {
                    "id": CAMPAIGN_ID,
                    "team_id": TEAM_ID,
                    "slug": "promo",
                    "name": "Promo",
                    "is_active": True,
                    "greeting_message": "Oi!",
                    "created_at": "2025-01-01T00:00:00Z",
                }
            ]
        )
    )

    campaign = campaign_repository.get_campaign_by_slug("promo")

    assert campaign is not None
    assert campaign.campaign_id == UUID(CAMPAIGN_ID)
    assert campaign.team_id == UUID(TEAM_ID)
    assert campaign.is_active is True
    assert campaign.greeting_message == "Oi!"
    assert campaign.created_at == datetime(2025, 1, 1, tzinfo=timezone.utc)

    query = client.queries[0]
    assert query.table == "campaigns"
    assert ("eq", ("slug", "promo"), {}) in query.calls


def test_get_campaign_by_slug_returns_none_when_absent(stub) -> None:
    stub(StubResponse(data=[]))
    assert campaign_repository.get_campaign_by_slug("missing") is None


def test_error_response_raises(stub) -> None:
    stub(StubResponse(error="permission denied"))

    with pytest.raises(RuntimeError, match="permission denied"):
        campaign_repository.get_campaign_by_slug("promo")
    with pytest.raises(RuntimeError):
        seller_repository.list_sellers_with_contacts(UUID(TEAM_ID))
    with pytest.raises(RuntimeError):
        click_repository.record_click(UUID(CAMPAIGN_ID), UUID(SELLER_A))


def test_list_sellers_orders_sellers_and_contacts(stub) -> None:
    client = stub(
        StubResponse(
            data=[
                {
                    "id": SELLER_B,
                    "team_id": TEAM_ID,
                    "name": "B",
                    "weight": 1,
                    "created_at": "2025-01-02T00:00:00Z",
                    "seller_contacts": [],
                },
                {
                    "id": SELLER_A,
                    "team_id": TEAM_ID,
                    "name": "A",
                    "weight": None,
                    "created_at": "2025-01-01T00:00:00Z",
                    "seller_contacts": [
                        {
                            "id": "00000000-0000-0000-0000-0000000000f2",
                            "seller_id": SELLER_A,
                            "phone_number": "222",
                            "description": None,
                            "created_at": "2025-01-01T00:00:02Z",
                        },
                        {
                            "id": "00000000-0000-0000-0000-0000000000f1",
                            "seller_id": SELLER_A,
                            "phone_number": "111",
                            "description": "main",
                            "created_at": "2025-01-01T00:00:01Z",
                        },
                    ],
                },
            ]
        )
    )

    sellers = seller_repository.list_sellers_with_contacts(UUID(TEAM_ID))

    assert [s.name for s in sellers] == ["A", "B"]
    assert sellers[0].weight == 1
    assert [c.phone_number for c in sellers[0].contacts] == ["111", "222"]
    assert sellers[1].contacts == ()

    query = client.queries[0]
    assert query.table == "sellers"
    assert ("eq", ("team_id", TEAM_ID), {}) in query.calls
    assert ("order", ("created_at",), {}) in query.calls


def test_count_clicks_use_exact_counts(stub) -> None:
    client = stub(StubResponse(count=7))

    assert click_repository.count_campaign_clicks(UUID(CAMPAIGN_ID)) == 7
    assert click_repository.count_seller_clicks(UUID(CAMPAIGN_ID), UUID(SELLER_A)) == 7

    campaign_query, seller_query = client.queries
    assert ("select", ("id",), {"count": "exact"}) in campaign_query.calls
    assert ("eq", ("campaign_id", CAMPAIGN_ID), {}) in campaign_query.calls
    assert ("eq", ("seller_id", SELLER_A), {}) in seller_query.calls


def test_count_without_count_in_response_raises(stub) -> None:
    stub(StubResponse(count=None))

    with pytest.raises(RuntimeError):
        click_repository.count_campaign_clicks(UUID(CAMPAIGN_ID))


def test_record_click_inserts_one_row(stub) -> None:
    clicked_at = datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
    client = stub(
        StubResponse(
            data=[
                {
                    "id": 42,
                    "campaign_id": CAMPAIGN_ID,
                    "seller_id": SELLER_A,
                    "created_at": "2025-03-01T12:00:00+00:00",
                }
            ]
        )
    )

    click = click_repository.record_click(UUID(CAMPAIGN_ID), UUID(SELLER_A), clicked_at)

    assert click.click_id == 42
    assert click.created_at == clicked_at
    (name, args, _), = [call for call in client.queries[0].calls if call[0] == "insert"]
    assert args[0] == {
        "campaign_id": CAMPAIGN_ID,
        "seller_id": SELLER_A,
        "created_at": "2025-03-01T12:00:00+00:00",
    }


def test_record_click_requires_utc(stub) -> None:
    stub(StubResponse())

    with pytest.raises(ValueError):
        click_repository.record_click(UUID(CAMPAIGN_ID), UUID(SELLER_A), datetime(2025, 3, 1))
