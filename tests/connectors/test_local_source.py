"""
Tests for LocalDocumentationSource.

Covers file discovery with excludes, stable ids, frontmatter-driven metadata
and single-document lookup.
"""

import pytest

from knowledge_docs.connectors import SourceError, create_source
from knowledge_docs.connectors.local import LocalDocumentationSource
from knowledge_docs.shared.config import DEFAULT_EXCLUDES, SourceConfig


def _source(path, **overrides):
    config = SourceConfig(
        name="local-docs",
        type="local",
        path=str(path),
        exclude_patterns=list(DEFAULT_EXCLUDES),
        **overrides,
    )
    return LocalDocumentationSource(config)


class TestDiscovery:
    def test_finds_markdown_and_skips_excluded_dirs(self, docs_tree):
        source = _source(docs_tree)
        source.connect()

        docs = source.fetch_documents()

        assert [d.id for d in docs] == [
            "local-docs:api/client_reference.md",
            "local-docs:guides/getting-started.md",
            "local-docs:notes.mdx",
        ]
        assert source.get_document_count() == 3

    def test_custom_patterns(self, docs_tree):
        source = _source(docs_tree, patterns=["guides/*.md"])
        source.connect()

        assert [d.id for d in source.fetch_documents()] == [
            "local-docs:guides/getting-started.md"
        ]

    def test_missing_path_raises(self, tmp_path):
        source = _source(tmp_path / "nope")

        with pytest.raises(SourceError):
            source.connect()
        assert source.connected is False


class TestDocumentMetadata:
    def test_frontmatter_document(self, docs_tree):
        source = _source(docs_tree)
        source.connect()
        doc = source.fetch_document("guides/getting-started.md")

        assert doc.title == "Getting Started"
        assert doc.type == "markdown"
        assert not doc.content.startswith("---")
        assert doc.content.startswith("# Getting Started")
        assert doc.metadata["category"] == "guide"
        assert doc.metadata["framework"] == "fastapi"
        assert doc.metadata["tags"] == ["install", "setup", "bash"]
        assert doc.metadata["path"] == "guides/getting-started.md"
        assert doc.metadata["source"] == "local-docs"

    def test_inferred_metadata(self, docs_tree):
        source = _source(docs_tree, default_language="python")
        source.connect()
        by_id = {d.id: d for d in source.fetch_documents()}

        api = by_id["local-docs:api/client_reference.md"]
        assert api.title == "Client"
        assert api.metadata["category"] == "api-reference"
        assert api.metadata["tags"] == ["python"]
        assert api.metadata["language"] == "python"

        notes = by_id["local-docs:notes.mdx"]
        assert notes.title == "Notes"
        assert notes.metadata["category"] is None

    def test_default_category(self, docs_tree):
        source = _source(docs_tree, default_category="concept")
        source.connect()

        assert source.fetch_document("notes.mdx").metadata["category"] == "concept"

    def test_frontmatter_cannot_override_computed_fields(self, docs_tree):
        (docs_tree / "override.md").write_text(
            "---\ntags: python\nsource: elsewhere\npath: other.md\norder: 2\n---\nBody text.\n",
            encoding="utf-8",
        )
        source = _source(docs_tree)
        source.connect()

        doc = source.fetch_document("override.md")

        assert doc.metadata["tags"] == ["python"]
        assert doc.metadata["source"] == "local-docs"
        assert doc.metadata["path"] == "override.md"
        assert doc.metadata["order"] == 2
        assert doc.metadata["excerpt"] == "Body text."

    def test_fetch_document_by_id_and_unknown(self, docs_tree):
        source = _source(docs_tree)
        source.connect()

        doc = source.fetch_document("local-docs:api/client_reference.md")

        assert doc is not None
        assert doc.id == "local-docs:api/client_reference.md"
        assert source.fetch_document("missing.md") is None


def test_create_source_by_type(tmp_path):
    local = create_source(SourceConfig(name="a", type="local", path=str(tmp_path)))
    url = create_source(SourceConfig(name="b", type="url", path="https://example.com"))

    assert isinstance(local, LocalDocumentationSource)
    assert url is None
