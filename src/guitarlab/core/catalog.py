"""Catalog and backlink builder.

Scans the markdown content tree of every category and builds:
- one CatalogItem per lesson file, with a stable ID derived from the
  leading number of its filename ("01_picking.md" in technique -> "tech_01")
- forward links found in the lesson text: wiki references ([[tech_01]] or
  [[tech_01|label]]) and relative markdown links ([text](../theory/02_x.md))
- backlinks, the transpose of the forward links across the whole catalog

The catalog is rebuilt on every call; nothing is persisted.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import quote, unquote

import structlog

from guitarlab.config.app_config import CategoryConfig, load_app_config

logger = structlog.get_logger(__name__)

# [[id]] or [[id|label]]
WIKI_LINK_RE = re.compile(r"\[\[([^\]|]+)(?:\|[^\]]*)?\]\]")

# [text](target) or [text](target "title")
MD_LINK_RE = re.compile(r"\[[^\]]*\]\(\s*<?([^)\s>]+)>?(?:\s+\"[^\"]*\")?\s*\)")

LEADING_NUMBER_RE = re.compile(r"^(\d+)")
TITLE_PREFIX_RE = re.compile(r"^\d+_?")


class ContentError(Exception):
    """Base error for content access."""


class UnknownCategoryError(ContentError):
    """Raised when a category is not configured."""

    def __init__(self, category: str):
        self.category = category
        super().__init__(f"Unknown category '{category}'")


class ContentNotFoundError(ContentError):
    """Raised when an article file does not exist."""

    def __init__(self, category: str, filename: str):
        self.category = category
        self.filename = filename
        super().__init__(f"Article '{filename}' not found in '{category}'")


class PathTraversalError(ContentError):
    """Raised when a requested path resolves outside its category root."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"Illegal path '{filename}'")


@dataclass
class CatalogItem:
    """One lesson in the catalog."""

    id: str
    filename: str
    title: str
    category: str
    forward_links: list[str] = field(default_factory=list)
    backlinks: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "filename": self.filename,
            "title": self.title,
            "category": self.category,
            "forwardLinks": list(self.forward_links),
            "backlinks": list(self.backlinks),
        }


def article_id_for(filename: str, prefix: str) -> str:
    """Derive an article ID from a lesson filename.

    Example:
        >>> article_id_for("03_power_chords.md", "tech")
        'tech_03'
    """
    match = LEADING_NUMBER_RE.match(Path(filename).name)
    num = match.group(1) if match else "00"
    return f"{prefix}_{num}"


def title_for(filename: str) -> str:
    """Strip the extension and leading number from a lesson filename."""
    stem = Path(filename).name
    if stem.endswith(".md"):
        stem = stem[: -len(".md")]
    return TITLE_PREFIX_RE.sub("", stem, count=1)


def list_markdown_files(root: Path) -> list[Path]:
    """Recursively list markdown files under root, as sorted relative paths.

    A missing root yields an empty list.
    """
    if not root.is_dir():
        return []
    files = [p.relative_to(root) for p in root.rglob("*.md") if p.is_file()]
    return sorted(files, key=lambda p: p.as_posix())


def extract_wiki_links(content: str) -> list[str]:
    """Extract [[id]] / [[id|label]] references, deduplicated in order."""
    links: list[str] = []
    for match in WIKI_LINK_RE.finditer(content):
        target = match.group(1).strip()
        if target and target not in links:
            links.append(target)
    return links


def extract_markdown_links(
    content: str,
    source_path: Path,
    path_index: dict[Path, str],
) -> list[str]:
    """Extract relative .md links and map them to article IDs.

    Args:
        content: Markdown text
        source_path: Absolute path of the file containing the links
        path_index: Resolved file path -> article ID

    Returns:
        IDs of the linked articles that exist in path_index
    """
    links: list[str] = []
    for match in MD_LINK_RE.finditer(content):
        target = match.group(1)
        if "://" in target or target.startswith(("mailto:", "#", "/")):
            continue
        target = unquote(target.split("#", 1)[0].split("?", 1)[0])
        if not target.endswith(".md"):
            continue
        resolved = (source_path.parent / target).resolve()
        article_id = path_index.get(resolved)
        if article_id and article_id not in links:
            links.append(article_id)
    return links


def build_catalog(
    categories: dict[str, CategoryConfig] | None = None,
) -> dict[str, list[CatalogItem]]:
    """Scan all content directories and build the linked catalog.

    Args:
        categories: Category configuration. Defaults to the app config.

    Returns:
        Category name -> list of CatalogItem (sorted by relative path)
    """
    if categories is None:
        categories = load_app_config().categories

    # Pass 1: locate files and assign IDs
    located: list[tuple[CategoryConfig, Path, Path, str]] = []
    path_index: dict[Path, str] = {}
    for cat in categories.values():
        root = Path(cat.content_dir).resolve()
        for rel_path in list_markdown_files(root):
            article_id = article_id_for(rel_path.name, cat.prefix)
            abs_path = root / rel_path
            located.append((cat, rel_path, abs_path, article_id))
            path_index[abs_path] = article_id

    # Pass 2: read content and extract forward links
    catalog: dict[str, list[CatalogItem]] = {name: [] for name in categories}
    item_map: dict[str, CatalogItem] = {}
    for cat, rel_path, abs_path, article_id in located:
        forward_links: list[str] = []
        try:
            content = abs_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error("catalog.read_failed", path=str(abs_path), error=str(e))
        else:
            forward_links = extract_wiki_links(content)
            for linked in extract_markdown_links(content, abs_path, path_index):
                if linked not in forward_links:
                    forward_links.append(linked)

        item = CatalogItem(
            id=article_id,
            filename=quote(rel_path.as_posix(), safe=""),
            title=title_for(rel_path.name),
            category=cat.name,
            forward_links=forward_links,
        )
        catalog[cat.name].append(item)
        item_map[article_id] = item

    # Pass 3: invert forward links into backlinks
    for item in item_map.values():
        for target_id in item.forward_links:
            target = item_map.get(target_id)
            if target is not None and item.id not in target.backlinks:
                target.backlinks.append(item.id)

    logger.debug(
        "catalog.built",
        categories=len(catalog),
        items=sum(len(items) for items in catalog.values()),
    )
    return catalog


def find_item(catalog: dict[str, list[CatalogItem]], article_id: str) -> CatalogItem | None:
    """Find a catalog item by article ID."""
    for items in catalog.values():
        for item in items:
            if item.id == article_id:
                return item
    return None


def resolve_article_path(
    category: str,
    filename: str,
    categories: dict[str, CategoryConfig] | None = None,
) -> Path:
    """Resolve a lesson file inside its category root.

    Raises:
        UnknownCategoryError: If the category is not configured
        PathTraversalError: If the path escapes the category root
        ContentNotFoundError: If the file does not exist
    """
    if categories is None:
        categories = load_app_config().categories

    cat = categories.get(category)
    if cat is None:
        raise UnknownCategoryError(category)

    root = Path(cat.content_dir).resolve()
    try:
        path = (root / filename).resolve()
    except (OSError, ValueError) as e:
        # Embedded NUL bytes and names the OS refuses to resolve
        raise ContentNotFoundError(category, filename) from e

    if path != root and root not in path.parents:
        raise PathTraversalError(filename)

    try:
        is_file = path.is_file()
    except (OSError, ValueError) as e:
        raise ContentNotFoundError(category, filename) from e
    if not is_file:
        raise ContentNotFoundError(category, filename)

    return path


def read_article(
    category: str,
    filename: str,
    categories: dict[str, CategoryConfig] | None = None,
) -> str:
    """Read the raw markdown of one lesson.

    Raises:
        UnknownCategoryError, PathTraversalError, ContentNotFoundError
        OSError: If the file exists but cannot be read
    """
    path = resolve_article_path(category, filename, categories)
    return path.read_text(encoding="utf-8")
