# Markdown frontmatter and metadata extraction for documentation files

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

import yaml

from knowledge_docs.ingestion.code_blocks import extract_code_blocks
from knowledge_docs.shared.observability import get_logger

logger = get_logger(__name__)

# YAML frontmatter pattern: matches --- delimited block at start of document
_FRONTMATTER_PATTERN = re.compile(r"^---\s*\n(.*?)\n---\s*(?:\n|$)", re.DOTALL)

_H1_PATTERN = re.compile(r"^#\s+(.+)$", re.MULTILINE)

# Checked in order; first keyword hit in the relative path wins
_CATEGORY_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("api-reference", ("api", "reference")),
    ("tutorial", ("tutorial",)),
    ("guide", ("guide", "how-to")),
    ("example", ("example",)),
    ("concept", ("concept", "explanation")),
    ("troubleshooting", ("troubleshoot", "faq")),
    ("changelog", ("changelog", "release")),
    ("readme", ("readme",)),
]


@dataclass
class ParsedMarkdown:
    content: str
    data: Dict = field(default_factory=dict)
    excerpt: Optional[str] = None


def extract_frontmatter(raw_text: str) -> Tuple[Dict, str]:
    """
    Extract YAML frontmatter from markdown document.

    Frontmatter must be at the very start of the document, delimited by --- markers.
    Example:
        ---
        title: "Getting Started"
        tags: [install, setup]
        ---

        ## Content starts here

    Args:
        raw_text: Raw markdown text, potentially with YAML frontmatter

    Returns:
        Tuple of (metadata_dict, content_without_frontmatter)
        If no valid frontmatter found, returns ({}, raw_text)
    """
    match = _FRONTMATTER_PATTERN.match(raw_text)
    if not match:
        return {}, raw_text

    try:
        metadata = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        logger.warning("Failed to parse YAML frontmatter, skipping", error=str(e))
        return {}, raw_text

    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        logger.warning(
            "Frontmatter is not a mapping, skipping",
            frontmatter_type=type(metadata).__name__,
        )
        return {}, raw_text

    return metadata, raw_text[match.end() :]


def parse_markdown(raw_text: str) -> ParsedMarkdown:
    """Split frontmatter from body; the excerpt is the first paragraph of the body."""
    data, content = extract_frontmatter(raw_text)
    excerpt = None
    for paragraph in content.split("\n\n"):
        paragraph = paragraph.strip()
        if paragraph and not paragraph.startswith("#"):
            excerpt = paragraph
            break
    return ParsedMarkdown(content=content, data=data, excerpt=excerpt)


def determine_category(
    relative_path: str, frontmatter: Dict, default: Optional[str] = None
) -> Optional[str]:
    if frontmatter.get("category"):
        return str(frontmatter["category"])

    path_lower = relative_path.lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in path_lower for keyword in keywords):
            return category

    return default


def extract_title(parsed: ParsedMarkdown, file_name: str) -> str:
    """
    Title priority:
    1. Frontmatter 'title'
    2. First H1 in the body
    3. File name, dashes/underscores to spaces, words capitalized
    """
    title = parsed.data.get("title")
    if title:
        if isinstance(title, list):
            title = title[0]
        return str(title).strip()

    h1 = _H1_PATTERN.search(parsed.content)
    if h1:
        return h1.group(1).strip()

    return re.sub(r"\b\w", lambda m: m.group(0).upper(), re.sub(r"[-_]", " ", file_name))


def extract_tags(frontmatter: Dict, content: str) -> List[str]:
    """Frontmatter tags and keywords, plus every fenced code language except 'text'."""
    tags: List[str] = []

    def _add(value) -> None:
        tag = str(value).lower()
        if tag not in tags:
            tags.append(tag)

    for key in ("tags", "keywords"):
        values = frontmatter.get(key)
        if values is None:
            continue
        if not isinstance(values, list):
            values = [values]
        for value in values:
            if value is not None:
                _add(value)

    _, code_blocks = extract_code_blocks(content)
    for block in code_blocks:
        if block.language and block.language != "text":
            _add(block.language)

    return tags


def flatten_frontmatter(data: Dict) -> Dict:
    """Keep scalar frontmatter values; dates become ISO strings."""
    flat = {}
    for key, value in data.items():
        if isinstance(value, (str, int, float, bool)):
            flat[key] = value
        elif isinstance(value, (datetime, date)):
            flat[key] = value.isoformat()
    return flat
