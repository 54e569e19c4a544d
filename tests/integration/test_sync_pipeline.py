"""Integration test: spec files to Postman payload.

Runs SyncCommand with the real spec loader, converter wrapper, reconciler and
API wrapper. Only the external boundaries are faked: the converter CLI
(subprocess.run) and the HTTP session.

Scenario:
- Two services on disk, one Swagger 2.0 and one OpenAPI YAML
- Postman already holds a collection with scripts and auth on a controller
  folder whose generated name differs only by the "Controller" suffix
- One persisted request is no longer generated
"""

import json
import os

import pytest
from unittest.mock import MagicMock, Mock, patch
from contextlib import nullcontext

from postman_sync.cli.config import SyncConfig
from postman_sync.cli.models import ExitCode
from postman_sync.cli.sync_command import SyncCommand
from postman_sync.postman_client.api_wrapper import APIWrapper
from postman_sync.postman_client.auth import Credentials
from postman_sync.spec_source.converter import OpenAPIConverter
from postman_sync.spec_source.incoming_builder import IncomingBuilder
from tests.fixtures.sample_collections import (
    BEARER_AUTH,
    make_collection,
    make_event,
    make_folder,
    make_request,
)

# What the converter CLI produces for each service, keyed by spec title
CONVERTED = {
    'Orders': [make_folder("Orders", items=[
        make_request("List orders"),
        make_request("Create order", method="POST"),
    ])],
    'Users': [make_folder("users", items=[make_request("Get user")])],
}

PERSISTED = make_collection(
    name="IMAGELINE_MIDDLEWARE",
    variable=[{'key': 'baseUrl', 'value': 'https://prod'}],
    items=[
        make_folder("orders", items=[
            make_folder("OrdersController", auth=BEARER_AUTH, items=[
                make_request("List orders", event=[make_event(listen="test", script_id="x1")]),
                make_request("Cancel order", method="POST"),
            ]),
        ]),
    ],
)


def fake_converter(args, **kwargs):
    """Stand-in for the openapi2postmanv2 CLI."""
    with open(args[args.index("-s") + 1], encoding='utf-8') as f:
        spec = json.load(f)
    assert 'swagger' not in spec
    with open(args[args.index("-o") + 1], 'w', encoding='utf-8') as f:
        json.dump({'info': {'name': spec['info']['title']}, 'item': CONVERTED[spec['info']['title']]}, f)
    return Mock(returncode=0, stdout="", stderr="")


def create_response(status_code, json_data):
    response = Mock()
    response.status_code = status_code
    response.text = json.dumps(json_data)
    response.json.return_value = json_data
    return response


class TestSyncPipeline:
    """Integration tests for a full sync run."""

    @pytest.fixture
    def workspace(self, tmp_path):
        orders_dir = tmp_path / "services" / "orders" / "designtime"
        users_dir = tmp_path / "services" / "users" / "designtime"
        orders_dir.mkdir(parents=True)
        users_dir.mkdir(parents=True)
        (orders_dir / "Orders_API.json").write_text(json.dumps({
            'swagger': '2.0',
            'info': {'title': 'Orders', 'version': 'v1'},
            'paths': {},
        }))
        (users_dir / "Users_API.yaml").write_text(
            "openapi: 3.0.1\ninfo:\n  title: Users\n  version: 2.0.0\npaths: {}\n"
        )
        return tmp_path

    def run_sync(self, workspace, prune, dry_run=False):
        config = SyncConfig(
            collection_uid="123-abc",
            source_glob_pattern=os.path.join(str(workspace), "services/**/designtime/*_API.*"),
            prune_mode=prune,
        )
        authenticator = Mock()
        authenticator.get_credentials.return_value = Credentials(
            base_url="https://api.getpostman.com", api_key="PMAK-test"
        )
        output = MagicMock()
        output.spinner.side_effect = lambda message: nullcontext()

        with patch('postman_sync.postman_client.api_wrapper.requests.Session') as mock_session_cls, \
                patch('postman_sync.spec_source.converter.subprocess.run', side_effect=fake_converter):
            session = mock_session_cls.return_value
            session.request.side_effect = lambda method, url, json=None, timeout=None: (
                create_response(200, {'collection': PERSISTED}) if method == 'GET'
                else create_response(200, {'collection': {'uid': '123-abc'}})
            )

            cmd = SyncCommand(
                config,
                api=APIWrapper(authenticator),
                builder=IncomingBuilder(OpenAPIConverter()),
                output_handler=output,
            )
            exit_code = cmd.run(dry_run=dry_run)

        return exit_code, session, cmd

    def test_replace_run(self, workspace):
        """Replace drops the removed request and keeps scripts and auth."""
        exit_code, session, cmd = self.run_sync(workspace, prune=True)

        assert exit_code == ExitCode.SUCCESS
        put_calls = [c for c in session.request.call_args_list if c[0][0] == 'PUT']
        assert len(put_calls) == 1
        body = put_calls[0][1]['json']['collection']

        assert [node['name'] for node in body['item']] == ["orders", "users"]
        controller = body['item'][0]['item'][0]
        assert controller['name'] == "Orders"
        assert controller['auth'] == BEARER_AUTH
        assert [r['name'] for r in controller['item']] == ["List orders", "Create order"]
        assert controller['item'][0]['event'][0]['script']['id'] == "x1"
        assert body['variable'] == [{'key': 'baseUrl', 'value': 'https://prod'}]

        assert cmd.summary.removed_requests == ["POST::cancelorder"]
        assert cmd.summary.removed_folders == []

    def test_merge_run(self, workspace):
        """Merge keeps the persisted structure and adds what is new."""
        exit_code, session, cmd = self.run_sync(workspace, prune=False)

        assert exit_code == ExitCode.SUCCESS
        body = [c for c in session.request.call_args_list if c[0][0] == 'PUT'][0][1]['json']['collection']

        controller = body['item'][0]['item'][0]
        assert controller['name'] == "OrdersController"
        assert [r['name'] for r in controller['item']] == ["List orders", "Cancel order", "Create order"]
        assert [node['name'] for node in body['item']] == ["orders", "users"]

    def test_dry_run_only_reads(self, workspace):
        exit_code, session, cmd = self.run_sync(workspace, prune=True, dry_run=True)

        assert exit_code == ExitCode.SUCCESS
        assert [c[0][0] for c in session.request.call_args_list] == ['GET']
        assert cmd.summary.dry_run is True
