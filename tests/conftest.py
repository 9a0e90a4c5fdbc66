# Shared pytest fixtures

import os
import sys
from pathlib import Path

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set test environment
os.environ["ENV"] = "development"


@pytest.fixture()
def docs_tree(tmp_path):
    """A small documentation tree with frontmatter, code and an excluded directory."""
    root = tmp_path / "docs"
    (root / "guides").mkdir(parents=True)
    (root / "api").mkdir()
    (root / "node_modules" / "pkg").mkdir(parents=True)

    (root / "guides" / "getting-started.md").write_text(
        "---\n"
        "title: Getting Started\n"
        "framework: fastapi\n"
        "tags: [Install, setup]\n"
        "---\n"
        "# Getting Started\n\n"
        "Install the package with pip before running the server.\n\n"
        "```bash\npip install knowledge-docs\n```\n\n"
        "Then start the server and open the dashboard.\n",
        encoding="utf-8",
    )
    (root / "api" / "client_reference.md").write_text(
        "# Client\n\n"
        "The client exposes a search method returning scored chunks.\n\n"
        "```python\nclient.search('retry policy')\n```\n",
        encoding="utf-8",
    )
    (root / "notes.mdx").write_text("Plain notes about retry policy tuning.\n", encoding="utf-8")
    (root / "node_modules" / "pkg" / "README.md").write_text("# vendored\n", encoding="utf-8")
    return root
