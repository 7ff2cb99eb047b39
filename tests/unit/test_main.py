# tests/unit/test_main.py - v2
"""Tests for main.py: CLI parsing, commands and error messages."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import patch

import pytest

from topicforge.config.settings import ConfigurationError, Settings
from topicforge.core.models import Topic
from topicforge.main import _build_parser, main
from tests.conftest import topic_payload


@pytest.fixture
def cli(service):
    """Run main() against the in-memory service fixture."""
    settings = Settings(_env_file=None, store_backend="memory", maintenance_delay_s=0)
    with patch("topicforge.main.load_settings", return_value=settings), \
            patch("topicforge.main._setup_logging"), \
            patch("topicforge.main._open_service", return_value=service):
        yield main


# ---------------------------------------------------------------------------
# Parser tests
# ---------------------------------------------------------------------------

class TestBuildParser:
    def test_version_flag(self, capsys):
        parser = _build_parser()
        with pytest.raises(SystemExit) as exc_info:
            parser.parse_args(["--version"])
        assert exc_info.value.code == 0

    def test_expand_subcommand(self):
        args = _build_parser().parse_args(["expand", "entropy", "videos"])
        assert args.command == "expand"
        assert args.category == "videos"

    def test_expand_rejects_unknown_category(self):
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["expand", "entropy", "podcasts"])

    def test_populate_defaults(self):
        args = _build_parser().parse_args(["populate", "titles.txt"])
        assert args.titles_file == Path("titles.txt")
        assert args.limit is None
        assert args.delay is None

    def test_suggest_limit(self):
        args = _build_parser().parse_args(["suggest", "quant", "--limit", "3"])
        assert args.limit == 3


# ---------------------------------------------------------------------------
# Command tests
# ---------------------------------------------------------------------------

class TestMain:
    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out.lower()

    def test_invalid_configuration(self, capsys):
        with patch(
            "topicforge.main.load_settings",
            side_effect=ConfigurationError("RELATED_TOPICS_MIN must be <= RELATED_TOPICS_MAX"),
        ):
            assert main(["find", "entropy"]) == 2
        assert "Invalid configuration" in capsys.readouterr().err

    def test_resolve_prints_topic(self, cli, scripted_llm, capsys):
        scripted_llm.queue(topic_payload())
        assert cli(["resolve", "Quantum Entanglement"]) == 0
        out = capsys.readouterr().out
        assert "Quantum Entanglement  (quantum-entanglement)" in out
        assert "Foundations" in out
        assert "Related: Quantum Mechanics" in out

    def test_resolve_json(self, cli, scripted_llm, capsys):
        scripted_llm.queue(topic_payload())
        assert cli(["resolve", "Entropy", "--json"]) == 0
        topic = Topic.model_validate_json(capsys.readouterr().out)
        assert topic.slug == "entropy"

    def test_resolve_generation_failure(self, cli, scripted_llm, capsys):
        scripted_llm.queue("not json")
        assert cli(["resolve", "Entropy"]) == 1
        assert "Topic 'Entropy' could not be generated" in capsys.readouterr().err

    def test_find_missing(self, cli, capsys):
        assert cli(["find", "entropy"]) == 1
        assert "Topic not found" in capsys.readouterr().err

    def test_detail_failure_message(self, cli, scripted_llm, capsys):
        scripted_llm.queue(topic_payload(), {"caption": "missing points"})
        assert cli(["detail", "Entropy", "Heat death"]) == 1
        assert "Content unavailable, try again" in capsys.readouterr().err

    def test_detail_success(self, cli, scripted_llm, capsys):
        scripted_llm.queue(topic_payload(), {"caption": "Heat death", "points": ["Max entropy"]})
        assert cli(["detail", "Entropy", "Heat death"]) == 0
        assert "  - Max entropy" in capsys.readouterr().out

    def test_expand_empty_section(self, cli, scripted_llm, capsys):
        scripted_llm.queue(topic_payload())
        assert cli(["expand", "Entropy", "books"]) == 0
        assert "No books found for Entropy" in capsys.readouterr().out

    def test_suggest(self, cli, scripted_llm, capsys):
        scripted_llm.queue(topic_payload())
        cli(["resolve", "Entropy"])
        capsys.readouterr()
        assert cli(["suggest", "ent"]) == 0
        assert capsys.readouterr().out.strip() == "Entropy\tentropy"

    def test_populate(self, cli, scripted_llm, tmp_path, capsys):
        titles = tmp_path / "titles.txt"
        titles.write_text("Entropy\n\nHeat\n", encoding="utf-8")
        scripted_llm.queue(topic_payload(), topic_payload())
        assert cli(["populate", str(titles)]) == 0
        out = capsys.readouterr().out
        assert "Created:   2" in out

    def test_populate_missing_file(self, cli, tmp_path):
        assert cli(["populate", str(tmp_path / "missing.txt")]) == 1

    def test_backfill_slugs(self, cli, memory_store, capsys):
        asyncio.run(memory_store.insert(Topic(title="Entropy", slug="undefined", summary="s")))
        assert cli(["backfill-slugs"]) == 0
        assert "Slugs assigned: 1 of 1" in capsys.readouterr().out
