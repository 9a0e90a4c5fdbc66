import json

import pytest
from pydantic import ValidationError

from knowledge_docs.shared.config import (
    ChunkingConfig,
    SourceConfig,
    get_config,
    load_config,
    reload_config,
)


def test_chunking_defaults():
    cfg = ChunkingConfig()

    assert (cfg.chunk_size, cfg.chunk_overlap, cfg.ordering) == (1000, 200, "text_first")


@pytest.mark.parametrize(
    "size,overlap",
    [(100, 100), (100, 150), (0, 0), (100, -1)],
)
def test_invalid_chunking_config_is_rejected(size, overlap):
    with pytest.raises(ValidationError):
        ChunkingConfig(chunk_size=size, chunk_overlap=overlap)


def test_source_defaults_and_validation():
    source = SourceConfig(name=" docs ", type="local", path="./docs")

    assert source.name == "docs"
    assert source.patterns == ["**/*.md", "**/*.mdx"]
    with pytest.raises(ValidationError):
        SourceConfig(name="", type="local", path="./docs")
    with pytest.raises(ValidationError):
        SourceConfig(name="x", type="ftp", path="./docs")


def test_load_config_from_yaml(tmp_path, monkeypatch):
    config_file = tmp_path / "custom.yaml"
    config_file.write_text(
        "chunking:\n"
        "  chunk_size: 500\n"
        "  chunk_overlap: 50\n"
        "search:\n"
        "  max_results: 3\n"
        "sources:\n"
        "  - name: team-docs\n"
        "    type: git\n"
        "    path: https://example.com/team/docs.git\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("CONFIG_PATH", str(config_file))
    monkeypatch.delenv("DOCS_EXTRA_SOURCES", raising=False)

    config, settings = load_config()

    assert settings.config_path == str(config_file)
    assert config.chunking.chunk_size == 500
    assert config.search.max_results == 3
    assert config.search.min_score == 0.3
    assert [s.name for s in config.sources] == ["team-docs"]


def test_missing_file_falls_back_to_default_local_source(tmp_path, monkeypatch):
    monkeypatch.setenv("CONFIG_PATH", str(tmp_path / "absent.yaml"))
    monkeypatch.setenv("DOCS_PATH", str(tmp_path / "docs"))
    monkeypatch.setenv("DOCS_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv(
        "DOCS_EXTRA_SOURCES",
        json.dumps([{"name": "extra", "type": "git", "path": "https://example.com/x.git"}]),
    )

    config, _ = load_config()

    assert [s.name for s in config.sources] == ["local-docs", "extra"]
    assert config.sources[0].path == str(tmp_path / "docs")
    assert "**/node_modules/**" in config.sources[0].exclude_patterns
    assert config.provider.cache_dir == str(tmp_path / "cache")


def test_malformed_extra_sources_are_ignored(tmp_path, monkeypatch):
    monkeypatch.setenv("CONFIG_PATH", str(tmp_path / "absent.yaml"))
    monkeypatch.setenv("DOCS_EXTRA_SOURCES", "{not json")

    config, _ = load_config()

    assert [s.name for s in config.sources] == ["local-docs"]


def test_invalid_yaml_overlap_fails_loading(tmp_path, monkeypatch):
    config_file = tmp_path / "bad.yaml"
    config_file.write_text("chunking:\n  chunk_size: 100\n  chunk_overlap: 100\n", encoding="utf-8")
    monkeypatch.setenv("CONFIG_PATH", str(config_file))

    with pytest.raises(ValidationError):
        load_config()


def test_reload_config_picks_up_changes(tmp_path, monkeypatch):
    config_file = tmp_path / "live.yaml"
    config_file.write_text("chunking:\n  chunk_size: 400\n  chunk_overlap: 40\n", encoding="utf-8")
    monkeypatch.setenv("CONFIG_PATH", str(config_file))
    monkeypatch.delenv("DOCS_EXTRA_SOURCES", raising=False)

    reload_config()
    assert get_config().chunking.chunk_size == 400

    config_file.write_text("chunking:\n  chunk_size: 800\n  chunk_overlap: 40\n", encoding="utf-8")
    reload_config()
    assert get_config().chunking.chunk_size == 800


def test_repository_development_config_loads(monkeypatch):
    monkeypatch.delenv("CONFIG_PATH", raising=False)
    monkeypatch.delenv("DOCS_EXTRA_SOURCES", raising=False)
    monkeypatch.setenv("ENV", "development")

    config, _ = load_config()

    assert config.chunking.chunk_size == 1000
    assert config.chunking.chunk_overlap == 200
    assert config.sources[0].name == "local-docs"
