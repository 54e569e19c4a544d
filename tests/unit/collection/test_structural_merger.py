"""Unit tests for collection.structural_merger module."""

import copy

from postman_sync.collection.diff_reporter import collect_keys
from postman_sync.collection.models import CollectionTree
from postman_sync.collection.structural_merger import CollectionMerger, merge_collections
from tests.fixtures.sample_collections import (
    APIKEY_AUTH,
    BEARER_AUTH,
    EXISTING_WITH_METADATA,
    GENERATED,
    make_event,
    make_folder,
    make_request,
    make_tree,
)


class TestMergeCollections:
    """Test cases for merge_collections function."""

    def test_new_request_appended(self):
        """A request missing from the destination folder should be appended."""
        existing = make_tree([make_folder("orders", items=[make_request("List orders")])])
        incoming = make_tree([make_folder("orders", items=[make_request("Create order", method="POST")])])

        merged = merge_collections(existing, incoming)

        names = [node.name for node in merged.item[0].item]
        assert names == ["List orders", "Create order"]

    def test_new_folder_created(self):
        """A folder missing from the destination should be created with its contents."""
        existing = make_tree([make_folder("orders")])
        incoming = make_tree([make_folder("users", items=[make_request("Get user")])])

        merged = merge_collections(existing, incoming)

        assert [node.name for node in merged.item] == ["orders", "users"]
        assert merged.item[1].item[0].name == "Get user"

    def test_aliased_folder_not_duplicated(self):
        """Folder names that normalize equally should merge into one folder."""
        existing = make_tree([make_folder("Order Controller", items=[make_request("a")])])
        incoming = make_tree([make_folder("order-controller", items=[make_request("b")])])

        merged = merge_collections(existing, incoming)

        assert len(merged.item) == 1
        assert merged.item[0].name == "Order Controller"
        assert [n.name for n in merged.item[0].item] == ["a", "b"]

    def test_duplicate_request_keeps_existing_body(self):
        """A request on both sides keeps its persisted URL and body."""
        existing = make_tree([make_request("Get user", url="/v1/users/{{id}}")])
        incoming = make_tree([make_request("get_user", url="/v2/users/:id")])

        merged = merge_collections(existing, incoming)

        assert len(merged.item) == 1
        assert merged.item[0].url == "/v1/users/{{id}}"

    def test_duplicate_request_absorbs_new_metadata(self):
        """A request on both sides gains incoming events and, if missing, auth."""
        existing = make_tree([make_request("Call", event=[make_event(script_id="old")])])
        incoming = make_tree([make_request("Call", event=[make_event(script_id="new")], auth=APIKEY_AUTH)])

        merged = merge_collections(existing, incoming)

        request = merged.item[0]
        assert [e['script']['id'] for e in request.event] == ["old", "new"]
        assert request.auth == APIKEY_AUTH

    def test_existing_metadata_wins(self):
        """Persisted folder and collection metadata should win over incoming."""
        existing = make_tree(
            [make_folder("svc", auth=BEARER_AUTH, variable=[{'key': 'k', 'value': 'A'}])],
            auth=BEARER_AUTH,
        )
        incoming = make_tree(
            [make_folder("svc", auth=APIKEY_AUTH, variable=[{'key': 'k', 'value': 'B'}])],
            auth=APIKEY_AUTH,
        )

        merged = merge_collections(existing, incoming)

        assert merged.auth == BEARER_AUTH
        assert merged.item[0].auth == BEARER_AUTH
        assert merged.item[0].variable == [{'key': 'k', 'value': 'A'}]

    def test_request_scoped_to_destination_folder(self):
        """Duplicate detection should only look at the destination folder."""
        existing = make_tree([
            make_folder("a", items=[make_request("Ping")]),
            make_folder("b"),
        ])
        incoming = make_tree([make_folder("b", items=[make_request("Ping")])])

        merged = merge_collections(existing, incoming)

        assert [n.name for n in merged.item[1].item] == ["Ping"]

    def test_untitled_folder_name(self):
        """Incoming folders without a name should be created as 'Untitled'."""
        existing = make_tree()
        incoming = make_tree([make_folder("", items=[make_request("x")])])

        merged = merge_collections(existing, incoming)

        assert merged.item[0].name == "Untitled"


class TestMergeNeverDeletes:
    """Property-style checks that merging is purely additive."""

    def test_every_existing_key_survives(self):
        """Every request and folder key of the persisted tree should remain."""
        existing = CollectionTree.from_dict(EXISTING_WITH_METADATA)
        incoming = CollectionTree.from_dict(copy.deepcopy(GENERATED))

        merged = merge_collections(existing, incoming)

        existing_keys = collect_keys(existing.item)
        merged_keys = collect_keys(merged.item)
        assert existing_keys.requests <= merged_keys.requests
        assert existing_keys.folders <= merged_keys.folders
        assert "POST::deleteuser" in merged_keys.requests
        assert "POST::createorder" in merged_keys.requests

    def test_inputs_not_mutated(self):
        """Neither input tree should be modified by the merge."""
        existing = CollectionTree.from_dict(EXISTING_WITH_METADATA)
        incoming = CollectionTree.from_dict(copy.deepcopy(GENERATED))

        merged = merge_collections(existing, incoming)
        merged.item[0].item[0].item.clear()

        assert existing.to_dict() == EXISTING_WITH_METADATA
        assert incoming.to_dict() == GENERATED

    def test_counters(self):
        """The merger should count what it added and what it found."""
        existing = CollectionTree.from_dict(EXISTING_WITH_METADATA)
        incoming = CollectionTree.from_dict(copy.deepcopy(GENERATED))
        merger = CollectionMerger()

        merger.merge(existing, incoming)

        assert merger.added_requests == 1
        assert merger.added_folders == 0
        assert merger.merged_requests == 2
