"""
End-to-end tests for run_listing_indexing.
"""
import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from bs4.builder import ParserRejectedMarkup

from listing_indexer import pipeline
from listing_indexer.core.exceptions import (
    EmptyResult,
    InvalidRequest,
    LayoutNotRecognized,
    ParseFailed,
    RetrievalFailed,
    SubmissionFailed,
)
from listing_indexer.pipeline import IndexingRun, error_payload, run_listing_indexing
from listing_indexer.scraping import layout_detector, listing_scraper
from listing_indexer.scraping.record_extractor import PLACEHOLDERS


@pytest.fixture
def create_container():
    return MagicMock(return_value="src-1")


@pytest.fixture
def submit():
    return AsyncMock(return_value="ok")


@pytest.mark.asyncio
async def test_scenario_a_all_fields_present(
    mercado_libre_html, html_session, search_url, create_container, submit
):
    run = await run_listing_indexing(
        search_url,
        owner_id="user-1",
        agent_id="agent-7",
        session=html_session(mercado_libre_html),
        create_container=create_container,
        submit=submit,
    )

    assert run.record_count == 3
    assert run.container_id == "src-1"
    create_container.assert_called_once_with(
        "user-1", "Listing of listado.example.com", "listing", "agent-7"
    )

    aggregate = await run.dispatch_task
    assert aggregate.total == 3
    assert aggregate.succeeded == 3

    texts = [call.args[1] for call in submit.await_args_list]
    assert all(call.args[0] == "src-1" for call in submit.await_args_list)
    assert len(texts) == 3
    for text in texts:
        assert not any(placeholder in text for placeholder in PLACEHOLDERS)
    assert (
        "Property: Departamento 3 ambientes en Palermo\n"
        "Location: Palermo, Capital Federal\n"
        "Price: US$ 185000\n"
        "Features: 3 ambientes 75 m² cubiertos\n"
        "Link: https://listado.example.com/MLA-1001-departamento"
    ) in texts


@pytest.mark.asyncio
async def test_scenario_b_unknown_layout(
    unknown_html, html_session, search_url, create_container, submit
):
    with pytest.raises(LayoutNotRecognized):
        await run_listing_indexing(
            search_url,
            owner_id="user-1",
            session=html_session(unknown_html),
            create_container=create_container,
            submit=submit,
        )

    create_container.assert_not_called()
    submit.assert_not_awaited()


@pytest.mark.asyncio
async def test_scenario_c_layout_without_currency(
    zonaprop_html, html_session, search_url, create_container, submit
):
    run = await run_listing_indexing(
        search_url,
        owner_id="user-1",
        session=html_session(zonaprop_html),
        create_container=create_container,
        submit=submit,
    )
    await run.dispatch_task

    records = listing_scraper.scrape_listing_html(zonaprop_html, search_url)
    assert run.record_count == len(records) == 2
    for record in records:
        assert record.currency == ""
        assert not record.uses_placeholders()
        assert record.url.startswith("https://listado.example.com/propiedades/")
    texts = [call.args[1] for call in submit.await_args_list]
    assert "Price: USD 120000" in texts[0] or "Price: USD 120000" in texts[1]


@pytest.mark.asyncio
async def test_scenario_d_retrieval_failure_stops_before_parsing(
    monkeypatch, html_session, search_url, create_container, submit
):
    parse_spy = MagicMock()
    monkeypatch.setattr(listing_scraper, "scrape_listing_html", parse_spy)

    with pytest.raises(RetrievalFailed) as excinfo:
        await run_listing_indexing(
            search_url,
            owner_id="user-1",
            session=html_session("<html>Not found</html>", status=404),
            create_container=create_container,
            submit=submit,
        )

    assert excinfo.value.status == 404
    parse_spy.assert_not_called()
    create_container.assert_not_called()


@pytest.mark.parametrize("body", ["   ", "No listings today"])
@pytest.mark.asyncio
async def test_blank_or_plain_text_page_is_not_recognized(
    body, html_session, search_url, create_container, submit
):
    with pytest.raises(LayoutNotRecognized):
        await run_listing_indexing(
            search_url,
            owner_id="user-1",
            session=html_session(body),
            create_container=create_container,
            submit=submit,
        )

    create_container.assert_not_called()


@pytest.mark.asyncio
async def test_rejected_markup_is_a_parse_failure(
    monkeypatch, html_session, search_url, create_container, submit
):
    def rejecting_parser(markup, features):
        raise ParserRejectedMarkup("markup rejected")

    monkeypatch.setattr(layout_detector, "BeautifulSoup", rejecting_parser)

    with pytest.raises(ParseFailed):
        await run_listing_indexing(
            search_url,
            owner_id="user-1",
            session=html_session("<html><body></body></html>"),
            create_container=create_container,
            submit=submit,
        )


@pytest.mark.parametrize("url, owner_id", [("", "user-1"), ("https://site.test", ""), (None, None)])
@pytest.mark.asyncio
async def test_missing_parameters(url, owner_id, html_session, mercado_libre_html, create_container):
    session = html_session(mercado_libre_html)

    with pytest.raises(InvalidRequest):
        await run_listing_indexing(
            url, owner_id=owner_id, session=session, create_container=create_container
        )

    assert session.requests == []


@pytest.mark.asyncio
async def test_empty_batch_is_an_error(monkeypatch, search_url, create_container, submit):
    monkeypatch.setattr(pipeline, "scrape_listing_page", AsyncMock(return_value=[]))

    with pytest.raises(EmptyResult):
        await run_listing_indexing(
            search_url, owner_id="user-1", create_container=create_container, submit=submit
        )

    create_container.assert_not_called()


@pytest.mark.asyncio
async def test_base_url_overrides_page_url(mercado_libre_html, html_session, create_container, submit):
    run = await run_listing_indexing(
        "https://cache.example.org/snapshot.html",
        owner_id="user-1",
        base_url="https://listado.example.com/inmuebles/venta",
        session=html_session(mercado_libre_html),
        create_container=create_container,
        submit=submit,
    )
    await run.dispatch_task

    texts = " ".join(call.args[1] for call in submit.await_args_list)
    assert "https://listado.example.com/MLA-1001-departamento" in texts
    assert "cache.example.org" not in texts


@pytest.mark.asyncio
async def test_partial_indexing_failure_does_not_affect_run(
    mercado_libre_html, html_session, search_url, create_container
):
    calls = []

    async def flaky_submit(container_id, text):
        calls.append(text)
        if len(calls) == 1:
            raise SubmissionFailed("rate limited", status=429)
        return "ok"

    run = await run_listing_indexing(
        search_url,
        owner_id="user-1",
        session=html_session(mercado_libre_html),
        create_container=create_container,
        submit=flaky_submit,
    )

    aggregate = await run.dispatch_task
    assert run.record_count == 3
    assert len(calls) == 3
    assert aggregate.succeeded == 2
    assert aggregate.failed == 1


@pytest.mark.asyncio
async def test_run_returns_before_indexing_finishes(
    mercado_libre_html, html_session, search_url, create_container
):
    release = asyncio.Event()

    async def slow_submit(container_id, text):
        await release.wait()
        return "ok"

    run = await run_listing_indexing(
        search_url,
        owner_id="user-1",
        session=html_session(mercado_libre_html),
        create_container=create_container,
        submit=slow_submit,
    )

    assert run.as_dict() == {
        "message": "Processing started for 3 listings.",
        "propertiesFound": 3,
        "sourceId": "src-1",
    }
    assert not run.dispatch_task.done()

    release.set()
    aggregate = await run.dispatch_task
    assert aggregate.succeeded == 3


def test_indexing_run_equality_ignores_task():
    assert IndexingRun(2, "src-1", dispatch_task=MagicMock()) == IndexingRun(2, "src-1")


def test_error_payload_names_failure_kind():
    assert error_payload(LayoutNotRecognized("no cards")) == {
        "error": "LayoutNotRecognized",
        "message": "no cards",
    }
    assert error_payload(RetrievalFailed("status 404", status=404))["error"] == "RetrievalFailed"
    assert error_payload(ValueError("oops")) == {"error": "InternalError", "message": "oops"}
