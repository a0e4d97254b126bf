"""Tests for the aggregation pipeline: fan-out isolation, merge order, filters, sorting"""

import pytest

from conftest import BrokenStore, StubAdapter, make_listing

from healthjobs.config.settings import Settings
from healthjobs.core.errors import StoreUnavailable
from healthjobs.core.models import SearchFilters
from healthjobs.core.pipeline import AggregationPipeline, sort_listings
from healthjobs.core.store import InMemoryJobStore


def sources():
    return [
        StubAdapter("Source A", [make_listing("a1", band="Band 5", salary_min=30000)]),
        StubAdapter("Source B", [make_listing("b1", location="Glasgow", description="Visa sponsorship offered")]),
        StubAdapter("Source C", [make_listing("c1", band="Band 6", salary_min=40000)]),
    ]


async def test_merge_order_store_then_sources(store, test_settings):
    await store.create_job({"id": "db1", "title": "Stored"})
    adapters = [
        StubAdapter("Source A", [make_listing("a1")]),
        StubAdapter("Source B", [make_listing("b1")]),
        StubAdapter("Source C", [make_listing("c1")]),
    ]
    pipeline = AggregationPipeline(store, adapters, test_settings)

    results = await pipeline.search(SearchFilters())

    assert [j.id for j in results] == ["db1", "a1", "b1", "c1"]
    assert [j.source for j in results] == ["Database", "Source A", "Source B", "Source C"]


async def test_salaried_rows_reorder_within_their_own_slots(store, test_settings):
    await store.create_job({"id": "db1", "title": "Stored"})
    pipeline = AggregationPipeline(store, sources(), test_settings)

    results = await pipeline.search(SearchFilters())

    assert [j.id for j in results] == ["db1", "c1", "b1", "a1"]


async def test_one_failing_source_does_not_fail_search(store, test_settings):
    await store.create_job({"id": "db1", "title": "Stored"})
    await store.create_job({"id": "db2", "title": "Stored too"})
    adapters = sources()
    adapters[1] = StubAdapter("Source B", error=RuntimeError("upstream exploded"))
    pipeline = AggregationPipeline(store, adapters, test_settings)

    results = await pipeline.search(SearchFilters())

    assert {j.id for j in results} == {"db1", "db2", "a1", "c1"}


async def test_source_deadline_degrades_slow_source(store):
    adapters = [
        StubAdapter("Fast", [make_listing("f1")]),
        StubAdapter("Slow", [make_listing("s1")], delay=1.0),
    ]
    settings = Settings(_env_file=None, SOURCE_DEADLINE=0.05)
    pipeline = AggregationPipeline(store, adapters, settings)

    results = await pipeline.search(SearchFilters())

    assert [j.id for j in results] == ["f1"]


async def test_keyword_matches_already_in_baseline_are_not_duplicated(store, test_settings):
    await store.create_job({"id": "db1", "title": "Staff Nurse", "location": "Leeds"})
    await store.create_job({"id": "db2", "title": "Nurse Practitioner", "external_id": "ext-9"})
    pipeline = AggregationPipeline(store, [], test_settings)

    results = await pipeline.search(SearchFilters(keyword="nurse"))

    assert [(j.id, j.source) for j in results] == [
        ("db2", "Database"),
        ("db1", "Database"),
    ]


async def test_keyword_search_rows_beyond_baseline_are_tagged(test_settings):
    store = InMemoryJobStore(limit=1)
    await store.create_job({"id": "db1", "title": "Staff Nurse"})
    await store.create_job({"id": "db2", "title": "Porter"})
    pipeline = AggregationPipeline(store, [], test_settings)

    # The baseline only holds the newest row
    results = await pipeline.search(SearchFilters(keyword="nurse"))

    assert [(j.id, j.source) for j in results] == [("db2", "Database"), ("db1", "Database Search")]

    results = await pipeline.search(SearchFilters(keyword="educator", band="Band 9"))
    assert results == []


async def test_keyword_store_search_failure_is_skipped(test_settings):
    store = BrokenStore(failures=0, search_fails=True)
    await store.create_job({"id": "db1", "title": "Staff Nurse"})
    pipeline = AggregationPipeline(store, sources(), test_settings)

    results = await pipeline.search(SearchFilters(keyword="nurse"))

    assert "db1" in {j.id for j in results}


async def test_filters_band_location_visa(store, test_settings):
    pipeline = AggregationPipeline(store, sources(), test_settings)

    assert [j.id for j in await pipeline.search(SearchFilters(band="Band 5"))] == ["a1"]
    assert len(await pipeline.search(SearchFilters(band="all-bands"))) == 3
    assert [j.id for j in await pipeline.search(SearchFilters(location="glas"))] == ["b1"]
    assert [j.id for j in await pipeline.search(SearchFilters(visa_sponsorship=True))] == ["b1"]


async def test_store_failure_falls_back_to_plain_store_fetch(test_settings):
    store = BrokenStore(failures=1)
    await store.create_job({"id": "db1", "title": "Stored"})
    pipeline = AggregationPipeline(store, sources(), test_settings)

    results = await pipeline.search(SearchFilters())

    assert [j.id for j in results] == ["db1"]


async def test_store_and_fallback_failure_raises(test_settings):
    pipeline = AggregationPipeline(BrokenStore(failures=2), sources(), test_settings)

    with pytest.raises(StoreUnavailable):
        await pipeline.search(SearchFilters())


async def test_cross_source_dedup_is_opt_in(store):
    adapters = [
        StubAdapter("Source A", [make_listing("a1", title="Staff Nurse")]),
        StubAdapter("Source B", [make_listing("b1", title="staff nurse ")]),
    ]

    plain = AggregationPipeline(store, adapters, Settings(_env_file=None))
    assert [j.id for j in await plain.search(SearchFilters())] == ["a1", "b1"]

    deduped = AggregationPipeline(store, adapters, Settings(_env_file=None, DEDUPLICATE_ACROSS_SOURCES=True))
    assert [j.id for j in await deduped.search(SearchFilters())] == ["a1"]


def test_sort_featured_first_then_salary():
    listings = [
        make_listing("plain-low", salary_min=25000),
        make_listing("featured-none", featured=True),
        make_listing("plain-high", salary_min=45000),
        make_listing("featured-high", featured=True, salary_min=50000),
        make_listing("featured-low", featured=True, salary_min=30000),
    ]

    assert [j.id for j in sort_listings(listings)] == [
        "featured-none",
        "featured-high",
        "featured-low",
        "plain-high",
        "plain-low",
    ]


def test_sort_is_stable_for_equal_keys():
    listings = [
        make_listing("first", salary_min=30000),
        make_listing("no-salary"),
        make_listing("second", salary_min=30000),
        make_listing("third", salary_min=30000),
    ]

    assert [j.id for j in sort_listings(listings)] == ["first", "no-salary", "second", "third"]


async def test_featured_across_sources(store, test_settings):
    adapters = [
        StubAdapter("Source A", [make_listing(f"a{i}", salary_min=30000 + i) for i in range(5)]),
        StubAdapter("Source B", error=RuntimeError("down")),
        StubAdapter("Source C", [make_listing("c1", salary_min=90000), make_listing("c2")]),
    ]
    pipeline = AggregationPipeline(store, adapters, test_settings)

    featured = await pipeline.get_featured(limit=4)

    assert [j.id for j in featured] == ["c1", "a2", "a1", "a0"]
    assert all(j.featured for j in featured)
    assert featured[0].source == "Source C"


async def test_featured_falls_back_to_store(store, test_settings):
    await store.create_job({"id": "db1", "title": "Stored", "featured": True})
    pipeline = AggregationPipeline(store, [StubAdapter("Empty")], test_settings)

    featured = await pipeline.get_featured()

    assert [j.id for j in featured] == ["db1"]
