"""Unit tests for collection.keys module."""

import pytest

from postman_sync.collection.keys import (
    canonical_url,
    event_identity,
    folder_key,
    normalize,
    request_key,
)
from postman_sync.collection.models import FolderNode, RequestNode


class TestNormalize:
    """Test cases for normalize function."""

    @pytest.mark.parametrize("value,expected", [
        ("Get All Orders", "getallorders"),
        ("  get\tall\norders ", "getallorders"),
        ("get_all__orders", "getallorders"),
        ("get-all--orders", "getallorders"),
        ("Order Controller", "order"),
        ("ORDER_CONTROLLER", "order"),
        ("ordercontroller", "order"),
        ("controller-for-orders", "controllerfororders"),
    ])
    def test_normalizes_names(self, value, expected):
        """normalize should lower-case and strip whitespace, separators and suffix."""
        assert normalize(value) == expected

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_input_normalizes_to_empty_string(self, value):
        """normalize should treat None and empty strings as empty."""
        assert normalize(value) == ""

    @pytest.mark.parametrize("value", [
        "Order Controller",
        "controllercontroller",
        "Controller Controller",
        "MixedCase_with-Separators and spaces",
        "",
        "Ünïcödé Service",
    ])
    def test_is_idempotent(self, value):
        """normalize applied twice should equal normalize applied once."""
        assert normalize(normalize(value)) == normalize(value)

    def test_repeated_suffix_is_fully_stripped(self):
        """A trailing run of controller tokens should be removed in one pass."""
        assert normalize("controllercontroller") == ""
        assert normalize("Order ControllerController") == "order"


class TestCanonicalUrl:
    """Test cases for canonical_url function."""

    def test_string_returned_as_is(self):
        """canonical_url should return string URLs unchanged."""
        assert canonical_url("{{baseUrl}}/orders") == "{{baseUrl}}/orders"

    def test_raw_field_preferred(self):
        """canonical_url should return the raw field when present."""
        url = {'raw': 'https://api.example.com/orders', 'host': ['ignored']}
        assert canonical_url(url) == 'https://api.example.com/orders'

    def test_structured_url_assembled(self):
        """canonical_url should join protocol, host labels and path segments."""
        url = {'protocol': 'https', 'host': ['api', 'example', 'com'], 'path': ['v1', 'users']}
        assert canonical_url(url) == 'https://api.example.com/v1/users'

    def test_missing_parts_omitted(self):
        """canonical_url should omit absent protocol and path."""
        assert canonical_url({'host': ['localhost']}) == 'localhost'
        assert canonical_url({'path': ['health']}) == '/health'

    def test_string_host_and_path(self):
        """canonical_url should accept scalar host and path values."""
        assert canonical_url({'host': 'example.com', 'path': 'status'}) == 'example.com/status'

    @pytest.mark.parametrize("url", [None, "", {}])
    def test_empty_values(self, url):
        """canonical_url should return an empty string for absent URLs."""
        assert canonical_url(url) == ""


class TestRequestKey:
    """Test cases for request_key function."""

    def test_uses_method_and_normalized_name(self):
        """request_key should combine method and normalized name."""
        node = RequestNode(name="Get All Orders", request={'method': 'GET', 'url': '/orders'})
        assert request_key(node) == "GET::getallorders"

    def test_method_defaults_to_get(self):
        """request_key should default the method to GET."""
        node = RequestNode(name="Health", request={'url': '/health'})
        assert request_key(node) == "GET::health"

    def test_blank_name_falls_back_to_url(self):
        """request_key should use the canonical URL when the name is blank."""
        node = RequestNode(
            name="   ",
            request={'method': 'POST', 'url': {'protocol': 'https', 'host': ['api'], 'path': ['Users']}},
        )
        assert request_key(node) == "POST::https://api/users"

    def test_bare_string_request(self):
        """request_key should handle the bare URL string request form."""
        node = RequestNode(name="", request="https://api.example.com/ping")
        assert request_key(node) == "GET::https://api.example.com/ping"

    def test_folder_has_no_request_key(self):
        """request_key should return None for folders."""
        assert request_key(FolderNode(name="orders")) is None


class TestFolderKey:
    """Test cases for folder_key function."""

    def test_controller_aliases_collide(self):
        """Controller-suffixed spellings of a name should share one key."""
        assert folder_key("Order Controller") == folder_key("ordercontroller")
        assert folder_key("ordercontroller") == folder_key("ORDER_CONTROLLER")

    def test_prefix(self):
        """folder_key should be prefixed to never collide with request keys."""
        assert folder_key("Orders") == "FOLDER::orders"

    def test_none_name(self):
        """folder_key should treat a missing name as empty."""
        assert folder_key(None) == "FOLDER::"


class TestEventIdentity:
    """Test cases for event_identity function."""

    def test_uses_script_id_when_present(self):
        """event_identity should key on listen and script id."""
        entry = {'listen': 'prerequest', 'script': {'id': 'x1', 'exec': ['a()']}}
        assert event_identity(entry) == "prerequest:x1"

    def test_same_content_same_identity(self):
        """Events without ids should match when type and source match."""
        a = {'listen': 'test', 'script': {'type': 'text/javascript', 'exec': ['a()', 'b()']}}
        b = {'listen': 'test', 'script': {'type': 'text/javascript', 'exec': ['a()', 'b()']}}
        assert event_identity(a) == event_identity(b)

    def test_different_content_different_identity(self):
        """Events without ids should differ when the source differs."""
        a = {'listen': 'test', 'script': {'type': 'text/javascript', 'exec': ['a()']}}
        b = {'listen': 'test', 'script': {'type': 'text/javascript', 'exec': ['b()']}}
        assert event_identity(a) != event_identity(b)

    def test_listen_is_part_of_identity(self):
        """The same script on different hooks should be distinct."""
        a = {'listen': 'test', 'script': {'id': 'x1'}}
        b = {'listen': 'prerequest', 'script': {'id': 'x1'}}
        assert event_identity(a) != event_identity(b)

    def test_missing_script(self):
        """event_identity should tolerate an entry without a script."""
        assert event_identity({'listen': 'test'}).startswith("test::")
