"""
Tests for the command line interface.
"""

import json
from types import SimpleNamespace

import pytest
from unittest.mock import AsyncMock, patch

from conftest import FakeStore
from post_classifier.cli import EXIT_FAILURE, EXIT_SUCCESS, create_parser, load_posts_file, main
from post_classifier.errors import ConfigurationError, StoreConnectionError
from post_classifier.store.seed_data import SEED_POST_GROUPS


@pytest.fixture(autouse=True)
def quiet_cli():
    """Keep the CLI from touching .env files and the project logger."""
    with patch("post_classifier.cli.load_dotenv"), patch("post_classifier.cli.setup_logging"):
        yield


def fake_services(store=None, caller=None, reactor=None):
    return SimpleNamespace(store=store, caller=caller, reactor=reactor, close=AsyncMock())


def patch_services(services=None, **kwargs):
    if services is None:
        return patch("post_classifier.cli.build_services", new_callable=AsyncMock, **kwargs)
    return patch("post_classifier.cli.build_services", new_callable=AsyncMock, return_value=services)


class TestParser:
    """Tests for create_parser."""

    def test_analyze_defaults_to_complete(self):
        args = create_parser().parse_args(["analyze"])
        assert args.mode == "complete"
        assert args.file is None

    def test_seed_options(self):
        args = create_parser().parse_args(["seed", "groups", "--dry-run", "-n", "1"])
        assert args.target == "groups"
        assert args.dry_run is True
        assert args.limit == 1

    def test_serve_defaults(self):
        args = create_parser().parse_args(["serve"])
        assert (args.host, args.port) == ("127.0.0.1", 8000)

    def test_invalid_mode(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["analyze", "summarize"])


class TestLoadPostsFile:
    def test_records_and_strings(self, tmp_path):
        path = tmp_path / "posts.json"
        path.write_text(json.dumps(["plain post", {"id": "1", "content": "record post"}, {"id": "2"}]))
        assert load_posts_file(path) == ["plain post", "record post"]

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "posts.json"
        path.write_text('{"posts": []}')
        with pytest.raises(ValueError):
            load_posts_file(path)


class TestMain:
    """Tests for main() exit codes and command dispatch."""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == EXIT_SUCCESS
        assert "usage: post-classifier" in capsys.readouterr().out

    def test_analyze_title(self, make_caller, tmp_path, capsys):
        caller, _ = make_caller(['{"title": "Bitcoin Breaks Records"}'])
        services = fake_services(caller=caller)
        path = tmp_path / "posts.json"
        path.write_text(json.dumps(["BTC prints a new ATH"]))

        with patch_services(services) as build:
            assert main(["analyze", "title", "--file", str(path)]) == EXIT_SUCCESS

        assert build.await_args.kwargs == {"with_store": False}
        output = capsys.readouterr().out
        assert "Bitcoin Breaks Records" in output
        services.close.assert_awaited_once()

    def test_analyze_complete(self, make_caller, tmp_path, capsys):
        def reply(request):
            system = request["messages"][0]["content"]
            if system.startswith("You are a title"):
                return '{"title": "Bitcoin Breaks Records"}'
            if system.startswith("You are a post categorization"):
                return '{"categories": ["Cryptocurrency"], "subcategories": ["Bitcoin"]}'
            return '{"sentiment": "BULLISH"}'

        caller, _ = make_caller(reply)
        path = tmp_path / "posts.json"
        path.write_text(json.dumps([{"id": "1", "content": "BTC at ATH"}]))

        with patch_services(fake_services(caller=caller)):
            assert main(["analyze", "--file", str(path)]) == EXIT_SUCCESS

        output = capsys.readouterr().out
        assert "Analysis completed for 1 posts (0 with errors)" in output

    def test_missing_api_key_fails(self):
        with patch_services(side_effect=ConfigurationError("OPENAI_API_KEY is required")):
            assert main(["analyze", "sentiment"]) == EXIT_FAILURE

    def test_seed_groups(self):
        store = FakeStore()
        with patch_services(fake_services(store=store)):
            assert main(["seed", "groups", "--limit", "1"]) == EXIT_SUCCESS
        assert store.load("post-groups") == SEED_POST_GROUPS[:1]

    def test_seed_groups_dry_run(self):
        store = FakeStore()
        with patch_services(fake_services(store=store)):
            assert main(["seed", "groups", "--dry-run"]) == EXIT_SUCCESS
        assert store.set_calls == []

    def test_seed_posts_from_file(self, tmp_path):
        store = FakeStore()
        path = tmp_path / "posts.json"
        path.write_text(json.dumps([{"id": "a", "content": "x"}]))

        with patch_services(fake_services(store=store)):
            assert main(["seed", "posts", "-f", str(path)]) == EXIT_SUCCESS

        assert store.load("posts") == [{"id": "a", "content": "x"}]

    def test_seed_posts_malformed_file(self, tmp_path):
        path = tmp_path / "posts.json"
        path.write_text("[oops")

        with patch_services(fake_services(store=FakeStore())):
            assert main(["seed", "posts", "-f", str(path)]) == EXIT_FAILURE

    def test_verify_empty_fails(self):
        with patch_services(fake_services(store=FakeStore())):
            assert main(["seed", "verify"]) == EXIT_FAILURE

    def test_verify_and_clear(self):
        store = FakeStore({"post-groups": json.dumps(SEED_POST_GROUPS)})
        with patch_services(fake_services(store=store)):
            assert main(["seed", "verify"]) == EXIT_SUCCESS
            assert main(["seed", "clear"]) == EXIT_SUCCESS
        assert "post-groups" not in store.data

    def test_store_unreachable(self):
        with patch_services(side_effect=StoreConnectionError("refused")):
            assert main(["seed", "verify"]) == EXIT_FAILURE

    def test_groups_refresh(self, make_caller, capsys):
        store = FakeStore({"post-groups": json.dumps(SEED_POST_GROUPS[:1])})

        def reply(request):
            if request["messages"][0]["content"].startswith("You are a title"):
                return '{"title": "Bitcoin Milestones Recap"}'
            return '{"neutralSummary": "Mixed takes on Bitcoin history."}'

        caller, _ = make_caller(reply)
        with patch_services(fake_services(store=store, caller=caller)):
            assert main(["groups", "refresh"]) == EXIT_SUCCESS

        assert "Refreshed 1 post group(s)" in capsys.readouterr().out
        assert store.load("post-groups")[0]["title"] == "Bitcoin Milestones Recap"

    def test_dedupe_runs_reactor(self):
        with patch("post_classifier.cli.run_deduplication_reactor", new_callable=AsyncMock) as run:
            assert main(["dedupe"]) == EXIT_SUCCESS
        run.assert_awaited_once()

    def test_dedupe_interrupted(self):
        with patch(
            "post_classifier.cli.run_deduplication_reactor",
            new_callable=AsyncMock,
            side_effect=KeyboardInterrupt,
        ):
            assert main(["dedupe"]) == EXIT_SUCCESS

    def test_dedupe_store_unreachable(self):
        with patch(
            "post_classifier.cli.run_deduplication_reactor",
            new_callable=AsyncMock,
            side_effect=StoreConnectionError("refused"),
        ):
            assert main(["dedupe"]) == EXIT_FAILURE

    def test_serve(self):
        with patch("uvicorn.run") as run:
            assert main(["serve", "--port", "9000"]) == EXIT_SUCCESS
        run.assert_called_once_with("post_classifier.api.main:app", host="127.0.0.1", port=9000)
