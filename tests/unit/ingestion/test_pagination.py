"""Unit tests for linked and adaptive pagination."""

import pytest

from lupa.ingestion.client import FetchError
from lupa.ingestion.pagination import collect_adaptive, collect_linked
from lupa.ingestion.schemas.camara import RollCallListResponse

LISTING = "https://dadosabertos.camara.leg.br/api/v2/votacoes"


def page_url(number: int) -> str:
    return f"{LISTING}?pagina={number}"


def page(ids, last=None, next_=None):
    links = [{"rel": "self", "href": LISTING}]
    if next_:
        links.append({"rel": "next", "href": next_})
    if last:
        links.append({"rel": "last", "href": f"{LISTING}?itens=2&pagina={last}"})
    return {"dados": [{"id": str(i)} for i in ids], "links": links}


def ids(items):
    return [item.id for item in items]


class TestCollectLinked:
    """Tests for collect_linked()."""

    @pytest.mark.asyncio
    async def test_follows_next_links(self, fake_api, make_client):
        fake_api.add(page_url(1), page([1, 2], next_=page_url(2)))
        fake_api.add(page_url(2), page([3, 4], next_=page_url(3)))
        fake_api.add(page_url(3), page([5]))

        async with make_client() as client:
            items = await collect_linked(client, page_url(1), RollCallListResponse)

        assert ids(items) == ["1", "2", "3", "4", "5"]
        assert len(fake_api.requests) == 3

    @pytest.mark.asyncio
    async def test_error_mid_listing_propagates(self, fake_api, make_client):
        fake_api.add(page_url(1), page([1, 2], next_=page_url(2)))
        fake_api.add(page_url(2), 500)

        async with make_client() as client:
            with pytest.raises(FetchError):
                await collect_linked(client, page_url(1), RollCallListResponse)


class TestCollectAdaptive:
    """Tests for collect_adaptive()."""

    @pytest.mark.asyncio
    async def test_uses_last_link(self, fake_api, make_client):
        fake_api.add(page_url(1), page([1, 2], last=3))
        fake_api.add(page_url(2), page([3, 4], last=3))
        fake_api.add(page_url(3), page([5], last=3))

        async with make_client() as client:
            result = await collect_adaptive(client, page_url, RollCallListResponse, workers=3)

        assert ids(result.items) == ["1", "2", "3", "4", "5"]
        assert result.pages_fetched == 3
        assert result.complete
        assert page_url(4) not in fake_api.urls()

    @pytest.mark.asyncio
    async def test_declared_last_page_beyond_ceiling(self, fake_api, make_client):
        for n in range(1, 11):
            fake_api.add(page_url(n), page([n], last=10))

        async with make_client() as client:
            result = await collect_adaptive(client, page_url, RollCallListResponse, max_pages=5)

        assert ids(result.items) == [str(n) for n in range(1, 11)]
        assert result.pages_fetched == 10
        assert result.complete

    @pytest.mark.asyncio
    async def test_scans_until_empty_without_last_link(self, fake_api, make_client):
        fake_api.add(page_url(1), page([1]))
        fake_api.add(page_url(2), page([2]))
        for n in range(3, 7):
            fake_api.add(page_url(n), page([]))

        async with make_client() as client:
            result = await collect_adaptive(
                client, page_url, RollCallListResponse, workers=2, max_pages=6
            )

        assert ids(result.items) == ["1", "2"]
        assert result.pages_fetched == 2
        assert result.complete

    @pytest.mark.asyncio
    async def test_empty_first_page(self, fake_api, make_client):
        fake_api.add(page_url(1), page([]))

        async with make_client() as client:
            result = await collect_adaptive(client, page_url, RollCallListResponse)

        assert result.items == []
        assert len(fake_api.requests) == 1

    @pytest.mark.asyncio
    async def test_failed_page_is_retried(self, fake_api, make_client):
        attempts = {"count": 0}

        def flaky(request):
            attempts["count"] += 1
            return 502 if attempts["count"] == 1 else page([3], last=2)

        fake_api.add(page_url(1), page([1, 2], last=2))
        fake_api.add(page_url(2), flaky)

        async with make_client() as client:
            result = await collect_adaptive(client, page_url, RollCallListResponse, retries=1)

        assert ids(result.items) == ["1", "2", "3"]
        assert result.complete
        assert attempts["count"] == 2

    @pytest.mark.asyncio
    async def test_page_failing_every_attempt_is_reported(self, fake_api, make_client):
        fake_api.add(page_url(1), page([1], last=3))
        fake_api.add(page_url(2), 500)
        fake_api.add(page_url(3), page([3], last=3))

        async with make_client() as client:
            result = await collect_adaptive(client, page_url, RollCallListResponse, retries=2)

        assert ids(result.items) == ["1", "3"]
        assert result.failed_pages == [2]
        assert not result.complete
        assert fake_api.urls().count(page_url(2)) == 3

    @pytest.mark.asyncio
    async def test_first_page_error_propagates(self, fake_api, make_client):
        fake_api.add(page_url(1), 500)

        async with make_client() as client:
            with pytest.raises(FetchError):
                await collect_adaptive(client, page_url, RollCallListResponse)
