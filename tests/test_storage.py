"""
Tests for the key-value collections, run against every backend.
"""
import asyncio

import pytest

from shortcode_app.database.connection import Base, create_db_engine, create_session_factory
from shortcode_app.models import CollectionRecord  # noqa: F401
from shortcode_app.storage.factory import CollectionBackend, CollectionFactory, CollectionSet
from shortcode_app.storage.strategies import InMemoryCollection, SQLCollection, matches


@pytest.fixture(params=["sql", "memory"])
def make_collection(request, tmp_path):
    if request.param == "memory":
        yield lambda name: InMemoryCollection(name)
        return

    engine = create_db_engine(f"sqlite:///{tmp_path / 'storage.db'}")
    Base.metadata.create_all(bind=engine)
    session_factory = create_session_factory(engine)
    yield lambda name: SQLCollection(name, session_factory)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


class TestCollections:

    def test_get_missing_key(self, make_collection):
        assert asyncio.run(make_collection("shortcodes").get("nope")) is None

    def test_set_then_get(self, make_collection):
        collection = make_collection("shortcodes")

        stored = asyncio.run(collection.set("abc123", {"redirect": "https://example.com", "status": 302}))
        fetched = asyncio.run(collection.get("abc123"))

        assert stored.key == "abc123"
        assert fetched.key == "abc123"
        assert fetched.collection == "shortcodes"
        assert fetched.props == {"redirect": "https://example.com", "status": 302}
        assert fetched.created is not None

    def test_set_replaces_existing_key(self, make_collection):
        collection = make_collection("users")

        asyncio.run(collection.set("u1", {"name": "first"}))
        asyncio.run(collection.set("u1", {"name": "second"}))

        assert asyncio.run(collection.get("u1")).props == {"name": "second"}
        assert len(asyncio.run(collection.filter(lambda props: True))) == 1

    def test_namespaces_are_independent(self, make_collection):
        shortcodes = make_collection("shortcodes")
        creations = make_collection("shortcodeCreations")

        asyncio.run(shortcodes.set("abc123", {"redirect": "https://example.com", "status": 301}))

        assert asyncio.run(creations.get("abc123")) is None
        assert asyncio.run(creations.filter(lambda props: True)) == []

    def test_filter_with_nested_criteria(self, make_collection):
        users = make_collection("users")
        asyncio.run(users.set("u1", {"_github_auth": {"profile": {"id": 1, "login": "one"}}}))
        asyncio.run(users.set("u2", {"_github_auth": {"profile": {"id": 2, "login": "two"}}}))

        found = asyncio.run(users.filter(matches({"_github_auth": {"profile": {"id": 2}}})))

        assert [record.key for record in found] == ["u2"]

    def test_returned_props_are_copies(self, make_collection):
        collection = make_collection("shortcodes")
        asyncio.run(collection.set("abc123", {"redirect": "https://example.com", "status": 301}))

        fetched = asyncio.run(collection.get("abc123"))
        fetched.props["status"] = 999

        assert asyncio.run(collection.get("abc123")).props["status"] == 301


class TestMatches:

    def test_partial_match(self):
        predicate = matches({"a": {"b": 1}})
        assert predicate({"a": {"b": 1, "c": 2}, "d": 3})

    def test_missing_key(self):
        assert not matches({"a": {"b": 1}})({"a": {"c": 1}})

    def test_type_mismatch(self):
        assert not matches({"a": {"b": 1}})({"a": "b"})

    def test_empty_criteria_matches_everything(self):
        assert matches({})({"anything": True})


class TestCollectionFactory:

    def test_sql_requires_session_factory(self):
        with pytest.raises(ValueError):
            CollectionFactory.create(CollectionBackend.SQL, "users")

    def test_collection_set_names(self):
        collections = CollectionSet.create(CollectionBackend.MEMORY)

        assert collections.users.name == "users"
        assert collections.shortcodes.name == "shortcodes"
        assert collections.shortcode_creations.name == "shortcodeCreations"
        assert collections.shortcode_invocations.name == "shortcodeInvocations"
