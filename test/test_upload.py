import io
from pathlib import Path

import pytest

from utho_storage import BytesContent, FileContent, InvalidArgumentError, build_upload_form, split_path
from utho_storage.upload import resolve_content


class TestSplitPath:
    """Test suite for splitting combined upload paths."""

    def test_root_file(self) -> None:
        assert split_path("file.txt") == ("", "file.txt")

    def test_single_directory(self) -> None:
        assert split_path("documents/file.txt") == ("documents", "file.txt")

    def test_nested_directories(self) -> None:
        assert split_path("a/b/c/report.pdf") == ("a/b/c", "report.pdf")

    def test_leading_slash_is_ignored(self) -> None:
        assert split_path("/file.txt") == ("", "file.txt")
        assert split_path("/docs/file.txt") == ("docs", "file.txt")

    def test_trailing_slash_has_no_filename(self) -> None:
        assert split_path("docs/") == ("docs", "")

    def test_filenames_never_contain_slashes(self) -> None:
        for i in range(1, 11):
            directory, filename = split_path(f"documents/file{i}.txt")
            assert directory == "documents"
            assert filename == f"file{i}.txt"
            assert "/" not in filename

    def test_repeated_slashes_collapse(self) -> None:
        assert split_path("docs//a.txt") == ("docs", "a.txt")
        assert split_path("a///b//c.txt") == ("a/b", "c.txt")
        assert split_path("//file.txt") == ("", "file.txt")

    def test_non_string_path(self) -> None:
        with pytest.raises(InvalidArgumentError):
            split_path(None)  # type: ignore[arg-type]


class TestResolveContent:
    """Test suite for upload content resolution."""

    def test_bytes_like(self) -> None:
        assert resolve_content(b"abc") == BytesContent(b"abc")
        assert resolve_content(bytearray(b"abc")) == BytesContent(b"abc")
        assert resolve_content(memoryview(b"abc")) == BytesContent(b"abc")

    def test_variants_pass_through(self) -> None:
        content = BytesContent(b"abc", content_type="text/plain")
        assert resolve_content(content) is content

    def test_file_handle_named_after_file(self, tmp_path: Path) -> None:
        local_file = tmp_path / "photo.png"
        local_file.write_bytes(b"\x89PNG")
        with local_file.open("rb") as handle:
            resolved = resolve_content(handle)
            assert isinstance(resolved, FileContent)
            assert resolved.filename == "photo.png"

    @pytest.mark.parametrize("content", [123, "plain text", None, {"data": b"x"}])
    def test_unsupported_content(self, content: object) -> None:
        with pytest.raises(InvalidArgumentError, match="bytes or a readable file-like object"):
            resolve_content(content)


class TestBuildUploadForm:
    """Test suite for the multipart upload builder."""

    def test_root_upload_omits_path_field(self) -> None:
        form = build_upload_form(b"Hello, World!", "file.txt")

        assert form.directory == ""
        assert form.filename == "file.txt"
        assert form.fields == {}

        body, headers = form.encode()
        assert b'name="path"' not in body
        assert b'name="file"; filename="file.txt"' in body
        assert headers["Content-Type"].startswith("multipart/form-data; boundary=")

    def test_directory_upload_sends_path_once(self) -> None:
        form = build_upload_form(b"Hello, World!", "documents/file.txt")

        assert form.directory == "documents"
        assert form.filename == "file.txt"
        assert form.fields == {"path": "documents"}

        body, _ = form.encode()
        assert body.count(b'name="path"') == 1
        assert b'name="path"\r\n\r\ndocuments\r\n' in body
        assert b"documents/file.txt" not in body
        assert b'filename="file.txt"' in body

    def test_boundary_matches_body(self) -> None:
        body, headers = build_upload_form(b"data", "docs/a.bin").encode()
        boundary = headers["Content-Type"].split("boundary=")[1]
        assert body.startswith(f"--{boundary}\r\n".encode())
        assert body.rstrip().endswith(f"--{boundary}--".encode())

    def test_bytes_default_to_octet_stream(self) -> None:
        form = build_upload_form(b"Hello", "report.pdf")
        assert form.content_type == "application/octet-stream"

        body, _ = form.encode()
        assert b"Content-Type: application/octet-stream" in body
        assert b"Hello" in body

    def test_explicit_content_type_wins(self) -> None:
        form = build_upload_form(BytesContent(b"{}", content_type="application/json"), "data.json")
        assert form.content_type == "application/json"

    def test_file_handle_content_type_is_inferred(self, tmp_path: Path) -> None:
        local_file = tmp_path / "notes.txt"
        local_file.write_bytes(b"some notes")

        with local_file.open("rb") as handle:
            form = build_upload_form(handle, "docs/notes.txt")

        assert form.data == b"some notes"
        assert form.content_type == "text/plain"
        assert form.filename == "notes.txt"

    def test_anonymous_handle_uses_target_name(self) -> None:
        form = build_upload_form(io.BytesIO(b"\x89PNG"), "images/pic.png")
        assert form.content_type == "image/png"
        assert form.filename == "pic.png"

    def test_text_handle_is_utf8_encoded(self) -> None:
        form = build_upload_form(io.StringIO("héllo"), "greeting.txt")
        assert form.data == "héllo".encode("utf-8")

    def test_directory_target_takes_handle_name(self, tmp_path: Path) -> None:
        local_file = tmp_path / "report.csv"
        local_file.write_bytes(b"a,b\n1,2\n")

        with local_file.open("rb") as handle:
            form = build_upload_form(handle, "exports/")

        assert form.directory == "exports"
        assert form.filename == "report.csv"
        assert form.content_type == "text/csv"

    def test_missing_object_name_fails(self) -> None:
        with pytest.raises(InvalidArgumentError, match="object name"):
            build_upload_form(b"data", "exports/")
        with pytest.raises(InvalidArgumentError, match="object name"):
            build_upload_form(b"data", "")

    def test_invalid_content_fails_before_encoding(self) -> None:
        with pytest.raises(InvalidArgumentError):
            build_upload_form(42, "file.txt")
