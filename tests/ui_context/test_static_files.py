import io
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from ui_context.static_files import (
    NO_CONDITIONAL,
    content_type_header,
    copy_resource,
    format_http_date,
    guess_content_type,
    last_modified,
    parse_http_date,
    resource_modified,
)
from web_container.types import ResponseBuffer


class _FailingOutput(io.BytesIO):
    def write(self, data) -> int:
        raise OSError("connection reset")


class ContentTypeTests(unittest.TestCase):
    def test_registry_type_is_preferred(self) -> None:
        self.assertEqual("text/css", guess_content_type("/css/theme.css"))
        self.assertEqual("image/svg+xml", guess_content_type("/img/logo.svg"))

    def test_configured_override_wins(self) -> None:
        self.assertEqual(
            "application/x-custom",
            guess_content_type("/data/file.CSS", {".css": "application/x-custom"}),
        )

    def test_builtin_table_used_when_registry_has_no_type(self) -> None:
        with patch("ui_context.static_files.mimetypes.guess_type", return_value=(None, None)):
            self.assertEqual("text/css", guess_content_type("/a.css"))
            self.assertEqual("application/javascript", guess_content_type("/a.js"))
            self.assertEqual("image/png", guess_content_type("/a.png"))
            self.assertEqual("text/html", guess_content_type("/index.html"))
            self.assertIsNone(guess_content_type("/blob.unknownbinaryextension"))

    def test_content_type_header_sets_charset_for_text(self) -> None:
        self.assertEqual("text/css; charset=utf-8", content_type_header("text/css"))
        self.assertEqual(
            "application/javascript; charset=utf-8",
            content_type_header("application/javascript"),
        )
        self.assertEqual("image/png", content_type_header("image/png"))


class FreshnessTests(unittest.TestCase):
    def test_equal_timestamps_are_not_modified(self) -> None:
        self.assertFalse(resource_modified(1_700_000_000.0, 1_700_000_000))

    def test_sub_second_precision_is_truncated(self) -> None:
        self.assertFalse(resource_modified(1_700_000_000.9, 1_700_000_000))

    def test_newer_resource_is_modified(self) -> None:
        self.assertTrue(resource_modified(1_700_000_000.0, 1_699_999_999))

    def test_missing_conditional_is_modified(self) -> None:
        self.assertTrue(resource_modified(1_700_000_000.0, NO_CONDITIONAL))
        self.assertTrue(resource_modified(1.0, NO_CONDITIONAL))

    def test_unknown_resource_timestamp_is_modified(self) -> None:
        self.assertTrue(resource_modified(0.0, 1_700_000_000))

    def test_http_dates_round_trip_in_seconds(self) -> None:
        header = format_http_date(1_700_000_000)
        self.assertTrue(header.endswith("GMT"))
        self.assertEqual(1_700_000_000, parse_http_date(header))

    def test_absent_or_malformed_dates_mean_no_conditional(self) -> None:
        self.assertEqual(NO_CONDITIONAL, parse_http_date(None))
        self.assertEqual(NO_CONDITIONAL, parse_http_date(""))
        self.assertEqual(NO_CONDITIONAL, parse_http_date("yesterday"))

    def test_last_modified_reads_file_mtime(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            asset = Path(temp_dir) / "app.js"
            asset.write_bytes(b"x")
            os.utime(asset, (1_600_000_000, 1_600_000_000))

            self.assertEqual(1_600_000_000, int(last_modified(asset)))

    def test_last_modified_falls_back_to_stat(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            asset = Path(temp_dir) / "app.js"
            asset.write_bytes(b"x")
            os.utime(asset, (1_600_000_000, 1_600_000_000))

            with patch("ui_context.static_files.open", side_effect=OSError("busy"), create=True):
                self.assertEqual(1_600_000_000, int(last_modified(asset)))

    def test_last_modified_is_zero_when_unavailable(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            self.assertEqual(0, last_modified(Path(temp_dir) / "gone.js"))


class CopyResourceTests(unittest.TestCase):
    def test_copy_is_byte_exact_across_chunks(self) -> None:
        payload = bytes(range(256)) * 13 + b"tail"
        with tempfile.TemporaryDirectory() as temp_dir:
            asset = Path(temp_dir) / "blob.bin"
            asset.write_bytes(payload)
            output = ResponseBuffer()

            written = copy_resource(asset, output, chunk_size=1024)

            self.assertEqual(len(payload), written)
            self.assertEqual(payload, output.payload)
            self.assertTrue(output.closed)

    def test_empty_file_copies_zero_bytes(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            asset = Path(temp_dir) / "empty.css"
            asset.write_bytes(b"")

            self.assertEqual(0, copy_resource(asset, io.BytesIO()))

    def test_streams_are_closed_when_write_fails(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            asset = Path(temp_dir) / "app.js"
            asset.write_bytes(b"console.log('ok');")
            opened = []

            def _recording_open(*args, **kwargs):
                handle = open(*args, **kwargs)
                opened.append(handle)
                return handle

            output = _FailingOutput()
            with patch("ui_context.static_files.open", side_effect=_recording_open, create=True):
                with self.assertRaises(OSError):
                    copy_resource(asset, output)

            self.assertTrue(output.closed)
            self.assertEqual(1, len(opened))
            self.assertTrue(opened[0].closed)


if __name__ == "__main__":
    unittest.main()
