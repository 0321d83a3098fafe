"""
Blob naming and content type tests.

Sanitization must be total (any input gives a valid key) and idempotent.
"""

import re

import pytest

from services.blob_naming import (
    CONTENT_TYPES,
    sanitize_filename,
    generate_blob_name,
    resolve_content_type,
)

KEY_PATTERN = re.compile(r"^[0-9]+-[A-Za-z0-9._-]+$")

AWKWARD_NAMES = [
    "report.pdf",
    "my report (final).pdf",
    "../../etc/passwd",
    "C:\\Users\\me\\notes.txt",
    "résumé.docx",
    "数据.xlsx",
    "😀.png",
    "a b\tc\nd",
    "...",
    "--",
    "name_with_underscores.txt",
    "",
]


class TestSanitizeFilename:

    def test_safe_name_unchanged(self):
        assert sanitize_filename("report-2024.v2.pdf") == "report-2024.v2.pdf"

    def test_spaces_and_parens_replaced(self):
        assert sanitize_filename("my report (final).pdf") == "my_report__final_.pdf"

    def test_path_separators_become_underscores(self):
        assert sanitize_filename("../../etc/passwd") == ".._.._etc_passwd"
        assert sanitize_filename("dir\\file.txt") == "dir_file.txt"

    def test_each_non_ascii_character_replaced_once(self):
        assert sanitize_filename("résumé.docx") == "r_sum_.docx"

    def test_empty_name_falls_back(self):
        assert sanitize_filename("") == "file"
        assert sanitize_filename(None) == "file"

    @pytest.mark.parametrize("name", AWKWARD_NAMES)
    def test_idempotent(self, name):
        once = sanitize_filename(name)
        assert sanitize_filename(once) == once

    @pytest.mark.parametrize("name", AWKWARD_NAMES)
    def test_only_safe_characters(self, name):
        assert re.fullmatch(r"[A-Za-z0-9._-]+", sanitize_filename(name))


class TestGenerateBlobName:

    def test_format(self):
        assert generate_blob_name("report.pdf", 1714060800123) == "1714060800123-report.pdf"

    @pytest.mark.parametrize("name", AWKWARD_NAMES)
    def test_always_matches_key_pattern(self, name):
        assert KEY_PATTERN.match(generate_blob_name(name, 1714060800123))

    def test_distinct_timestamps_give_distinct_keys(self):
        assert generate_blob_name("a.txt", 1) != generate_blob_name("a.txt", 2)


class TestResolveContentType:

    @pytest.mark.parametrize("ext,expected", sorted(CONTENT_TYPES.items()))
    def test_known_extensions(self, ext, expected):
        assert resolve_content_type(f"file{ext}") == expected

    def test_extension_is_case_insensitive(self):
        assert resolve_content_type("SCAN.PDF") == "application/pdf"
        assert resolve_content_type("Photo.JpEg") == "image/jpeg"

    @pytest.mark.parametrize("name", ["archive.tar.gz", "README", "data.csv", "", None, ".pdf"])
    def test_unknown_falls_back_to_octet_stream(self, name):
        assert resolve_content_type(name) == "application/octet-stream"

    def test_table_has_fourteen_entries(self):
        assert len(CONTENT_TYPES) == 14
