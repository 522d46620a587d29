"""Tests for the catalog and backlink builder."""

import pytest

from guitarlab.core.catalog import (
    ContentNotFoundError,
    PathTraversalError,
    UnknownCategoryError,
    article_id_for,
    build_catalog,
    extract_wiki_links,
    find_item,
    read_article,
    resolve_article_path,
    title_for,
)


class TestIdsAndTitles:
    """Tests for ID and title derivation from filenames."""

    def test_id_uses_leading_number(self):
        """ID joins the prefix and the leading number."""
        assert article_id_for("03_power_chords.md", "tech") == "tech_03"

    def test_id_keeps_leading_zeros(self):
        """Leading zeros are kept verbatim."""
        assert article_id_for("007_bond_riff.md", "dinner") == "dinner_007"

    def test_id_without_number_defaults_to_00(self):
        """File without a number gets 00."""
        assert article_id_for("intro.md", "ghost") == "ghost_00"

    def test_id_ignores_directories(self):
        """Only the basename contributes to the ID."""
        assert article_id_for("12_section/04_slides.md", "tech") == "tech_04"

    def test_title_strips_number_and_extension(self):
        """Title drops the number prefix and .md."""
        assert title_for("01_picking_basics.md") == "picking_basics"

    def test_title_without_underscore(self):
        """Title drops leading digits with no separator."""
        assert title_for("05tapping.md") == "tapping"


class TestWikiLinks:
    """Tests for [[id]] extraction."""

    def test_plain_and_labelled_links(self):
        """Both [[id]] and [[id|label]] yield the id."""
        text = "See [[tech_01]] and [[theory_02|the intervals lesson]]."
        assert extract_wiki_links(text) == ["tech_01", "theory_02"]

    def test_links_are_deduplicated_in_order(self):
        """Repeated links appear once, first occurrence wins."""
        text = "[[tech_02]] [[tech_01]] [[tech_02]]"
        assert extract_wiki_links(text) == ["tech_02", "tech_01"]

    def test_ids_are_trimmed(self):
        """Whitespace around the id is stripped."""
        assert extract_wiki_links("[[ tech_01 | label ]]") == ["tech_01"]

    def test_no_links(self):
        """Single brackets are not links."""
        assert extract_wiki_links("plain text [single] (parens)") == []


class TestBuildCatalog:
    """Tests for build_catalog over a content tree."""

    def test_categories_present_even_when_missing(self, content_tree):
        """Every configured category is a key, even without a directory."""
        catalog = build_catalog()

        assert set(catalog) == {"technique", "theory", "ghost", "dinner"}
        assert catalog["ghost"] == []

    def test_items_sorted_by_relative_path(self, content_tree):
        """Items are ordered by relative path."""
        catalog = build_catalog()

        ids = [item.id for item in catalog["technique"]]
        assert ids == ["tech_01", "tech_02", "tech_03"]

    def test_nested_file_filename_is_url_encoded(self, content_tree):
        """Nested filename is the encoded relative path."""
        catalog = build_catalog()

        item = find_item(catalog, "tech_03")
        assert item.filename == "advanced%2F03_power_chords.md"
        assert item.title == "power_chords"
        assert item.category == "technique"

    def test_forward_links_combine_both_link_styles(self, content_tree):
        """Forward links merge wiki and markdown links."""
        catalog = build_catalog()

        assert find_item(catalog, "tech_01").forward_links == ["tech_02", "theory_01"]
        # wiki links first, then resolved markdown links
        assert find_item(catalog, "tech_02").forward_links == ["tech_02", "tech_01"]

    def test_markdown_link_resolves_across_categories(self, content_tree):
        """Relative markdown link reaches another category."""
        catalog = build_catalog()

        # ../../theory/01_intervals.md#fifths; the https link is ignored
        assert find_item(catalog, "tech_03").forward_links == ["theory_01"]

    def test_backlinks_are_transpose_of_forward_links(self, content_tree):
        """Backlinks list every lesson that links here."""
        catalog = build_catalog()

        assert find_item(catalog, "tech_01").backlinks == ["tech_02", "theory_01"]
        assert find_item(catalog, "theory_01").backlinks == ["tech_01", "tech_03"]
        assert find_item(catalog, "dinner_01").backlinks == []

    def test_backlink_appears_once_per_source(self, content_tree):
        """A source linking twice is listed once."""
        catalog = build_catalog()

        # tech_01 mentions tech_02 twice
        assert find_item(catalog, "tech_02").backlinks.count("tech_01") == 1

    def test_self_reference_is_harmless(self, content_tree):
        """Self link shows up in the lesson's own backlinks."""
        catalog = build_catalog()

        assert "tech_02" in find_item(catalog, "tech_02").backlinks

    def test_unknown_targets_are_kept_but_get_no_item(self, content_tree):
        """Dangling link stays in forward links only."""
        catalog = build_catalog()

        assert "missing_99" in find_item(catalog, "theory_01").forward_links
        assert find_item(catalog, "missing_99") is None

    def test_to_dict_uses_camel_case(self, content_tree):
        """to_dict emits camelCase keys."""
        data = find_item(build_catalog(), "tech_01").to_dict()

        assert data["forwardLinks"] == ["tech_02", "theory_01"]
        assert data["backlinks"] == ["tech_02", "theory_01"]

    def test_empty_tree(self, workspace):
        """No content gives empty lists."""
        catalog = build_catalog()

        assert all(items == [] for items in catalog.values())


class TestReadArticle:
    """Tests for article lookup and path safety."""

    def test_read_existing_article(self, content_tree):
        """Existing lesson returns its markdown."""
        text = read_article("technique", "01_picking.md")
        assert text.startswith("# Picking")

    def test_read_nested_article(self, content_tree):
        """Nested lesson is readable by relative path."""
        text = read_article("technique", "advanced/03_power_chords.md")
        assert "Power chords" in text

    def test_unknown_category(self, content_tree):
        """Unknown category raises UnknownCategoryError."""
        with pytest.raises(UnknownCategoryError):
            read_article("jazz", "01_picking.md")

    def test_missing_file(self, content_tree):
        """Missing file raises ContentNotFoundError."""
        with pytest.raises(ContentNotFoundError):
            read_article("technique", "99_nothing.md")

    def test_directory_is_not_an_article(self, content_tree):
        """Directory name is treated as not found."""
        with pytest.raises(ContentNotFoundError):
            read_article("technique", "advanced")

    def test_nul_byte_is_not_found(self, content_tree):
        """Embedded NUL raises ContentNotFoundError."""
        with pytest.raises(ContentNotFoundError):
            resolve_article_path("technique", "01\x00.md")

    def test_overlong_name_is_not_found(self, content_tree):
        """Name beyond the OS limit raises ContentNotFoundError."""
        with pytest.raises(ContentNotFoundError):
            resolve_article_path("technique", "a" * 300 + ".md")

    def test_parent_traversal_rejected(self, content_tree):
        """../ out of the category raises PathTraversalError."""
        (content_tree / "secret.md").write_text("secret")

        with pytest.raises(PathTraversalError):
            resolve_article_path("technique", "../secret.md")

    def test_sibling_category_traversal_rejected(self, content_tree):
        """Reaching a sibling category is traversal too."""
        with pytest.raises(PathTraversalError):
            resolve_article_path("technique", "../theory/01_intervals.md")

    def test_absolute_path_rejected(self, content_tree):
        """Absolute path outside the root is rejected."""
        with pytest.raises(PathTraversalError):
            resolve_article_path("technique", str(content_tree / "theory" / "01_intervals.md"))
