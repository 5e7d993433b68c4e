"""
Tests for eml_extractor/modules/attachment_walker.py

Covers naming (sanitizing, path components, collisions), nested multipart
descent, and the best-effort handling of broken or unwritable parts.
"""

import logging
import unittest
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

from eml_extractor.modules.attachment_walker import (
    ATTACHMENTS_DIR,
    AttachmentWalker,
    ExistingFiles,
    attachment_filename,
    extract_attachments,
)
from eml_builders import (
    add_headers,
    alternative,
    attachment_part,
    build_mixed_email,
    build_plain_email,
    build_raw,
    parse,
)


class AttachmentTestCase(unittest.TestCase):

    def setUp(self):
        self._tmp = TemporaryDirectory()
        self.output_dir = Path(self._tmp.name)
        self.attachments_dir = self.output_dir / ATTACHMENTS_DIR

    def tearDown(self):
        self._tmp.cleanup()


class TestExtractAttachments(AttachmentTestCase):

    def test_saves_decoded_payloads(self):
        raw = build_mixed_email(attachments=[("notes.txt", b"hello notes"), ("data.bin", b"\x00\xff\x10")])
        attachments = extract_attachments(parse(raw), self.output_dir)

        self.assertEqual([a.filename for a in attachments], ["notes.txt", "data.bin"])
        self.assertEqual((self.attachments_dir / "notes.txt").read_bytes(), b"hello notes")
        self.assertEqual((self.attachments_dir / "data.bin").read_bytes(), b"\x00\xff\x10")
        self.assertEqual(attachments[0].size, len(b"hello notes"))
        self.assertEqual(attachments[1].path, "attachments/data.bin")

    def test_duplicate_names_get_numeric_suffix(self):
        raw = build_mixed_email(attachments=[("report.pdf", b"first"), ("report.pdf", b"second")])
        attachments = extract_attachments(parse(raw), self.output_dir)

        self.assertEqual([a.filename for a in attachments], ["report.pdf", "report_1.pdf"])
        self.assertEqual((self.attachments_dir / "report.pdf").read_bytes(), b"first")
        self.assertEqual((self.attachments_dir / "report_1.pdf").read_bytes(), b"second")

    def test_existing_files_are_never_overwritten(self):
        self.attachments_dir.mkdir()
        (self.attachments_dir / "report.pdf").write_bytes(b"from an earlier run")

        raw = build_mixed_email(attachments=[("report.pdf", b"new")])
        attachments = extract_attachments(parse(raw), self.output_dir)

        self.assertEqual(attachments[0].filename, "report_1.pdf")
        self.assertEqual((self.attachments_dir / "report.pdf").read_bytes(), b"from an earlier run")

    def test_single_part_message_has_no_attachments(self):
        self.assertEqual(extract_attachments(parse(build_plain_email()), self.output_dir), [])
        self.assertFalse(self.attachments_dir.exists())

    def test_directory_not_created_without_attachments(self):
        raw = build_mixed_email(attachments=[])
        self.assertEqual(extract_attachments(parse(raw), self.output_dir), [])
        self.assertFalse(self.attachments_dir.exists())

    def test_multipart_without_boundary(self):
        raw = build_raw("Subject: x\nContent-Type: multipart/mixed", "junk\n")
        self.assertEqual(extract_attachments(parse(raw), self.output_dir), [])

    def test_logs_each_saved_attachment(self):
        raw = build_mixed_email(attachments=[("a.txt", b"12345")])
        with self.assertLogs("eml_extractor.modules.attachment_walker", level=logging.INFO) as logs:
            extract_attachments(parse(raw), self.output_dir)
        self.assertIn("Extracted attachment: a.txt (5 bytes)", logs.output[0])


class TestNestedAttachments(AttachmentTestCase):

    def test_attachments_inside_nested_multiparts(self):
        related = MIMEMultipart("related")
        related.attach(MIMEText("<p>see logo</p>", "html"))
        related.attach(attachment_part("logo.png", b"\x89PNG", "image/png"))

        msg = add_headers(MIMEMultipart("mixed"))
        msg.attach(alternative("body", None))
        msg.attach(related)
        msg.attach(attachment_part("after.txt", b"tail"))

        attachments = extract_attachments(parse(msg.as_bytes()), self.output_dir)
        self.assertEqual([a.filename for a in attachments], ["logo.png", "after.txt"])
        self.assertEqual((self.attachments_dir / "logo.png").read_bytes(), b"\x89PNG")

    def test_inline_parts_are_not_saved(self):
        msg = add_headers(MIMEMultipart("mixed"))
        inline = MIMEText("inline text", "plain")
        inline.add_header("Content-Disposition", "inline", filename="inline.txt")
        msg.attach(inline)

        self.assertEqual(extract_attachments(parse(msg.as_bytes()), self.output_dir), [])

    def test_malformed_content_type_is_still_a_leaf(self):
        raw = build_raw(
            """
Subject: odd
Content-Type: multipart/mixed; boundary="XX"
""",
            "--XX\n"
            "Content-Type: nonsense\n"
            'Content-Disposition: attachment; filename="odd.dat"\n'
            "\n"
            "payload\n"
            "--XX--\n",
        )
        attachments = extract_attachments(parse(raw), self.output_dir)
        self.assertEqual([a.filename for a in attachments], ["odd.dat"])

    def test_depth_limit(self):
        inner = MIMEMultipart("mixed")
        inner.attach(attachment_part("deep.bin", b"deep"))
        outer = MIMEMultipart("mixed")
        outer.attach(inner)

        walker = AttachmentWalker(self.attachments_dir, max_depth=0)
        with self.assertLogs("eml_extractor.modules.attachment_walker", level=logging.WARNING):
            attachments = walker.walk(parse(outer.as_bytes()))
        self.assertEqual(attachments, [])


class TestBrokenParts(AttachmentTestCase):

    def test_unnamed_attachment_is_skipped(self):
        raw = build_mixed_email(attachments=[(None, b"anonymous"), ("named.txt", b"kept")])
        attachments = extract_attachments(parse(raw), self.output_dir)
        self.assertEqual([a.filename for a in attachments], ["named.txt"])

    def test_broken_base64_is_saved_undecoded(self):
        raw = build_raw(
            """
Subject: bad base64
Content-Type: multipart/mixed; boundary="XX"
""",
            "--XX\n"
            "Content-Type: application/octet-stream\n"
            'Content-Disposition: attachment; filename="bad.bin"\n'
            "Content-Transfer-Encoding: base64\n"
            "\n"
            "abc\n"
            "--XX--\n",
        )
        with self.assertLogs("eml_extractor.modules.attachment_walker", level=logging.WARNING):
            attachments = extract_attachments(parse(raw), self.output_dir)

        self.assertEqual(len(attachments), 1)
        self.assertEqual((self.attachments_dir / "bad.bin").read_bytes(), b"abc")

    def test_write_failure_skips_attachment_and_continues(self):
        raw = build_mixed_email(attachments=[("first.txt", b"1"), ("second.txt", b"2")])
        real_write_bytes = Path.write_bytes

        def failing_write(path, data):
            if path.name == "first.txt":
                raise PermissionError("read-only")
            return real_write_bytes(path, data)

        with patch.object(Path, "write_bytes", autospec=True, side_effect=failing_write):
            with self.assertLogs("eml_extractor.modules.attachment_walker", level=logging.WARNING) as logs:
                attachments = extract_attachments(parse(raw), self.output_dir)

        self.assertEqual([a.filename for a in attachments], ["second.txt"])
        self.assertTrue(any("Failed to save attachment first.txt" in line for line in logs.output))

    def test_unwritable_directory_raises(self):
        raw = build_mixed_email(attachments=[("a.txt", b"x")])
        with patch.object(Path, "mkdir", side_effect=PermissionError("denied")):
            with self.assertRaises(OSError):
                extract_attachments(parse(raw), self.output_dir)


class TestAttachmentFilename(unittest.TestCase):

    def _part(self, filename):
        return attachment_part(filename, b"x")

    def test_plain_name(self):
        self.assertEqual(attachment_filename(self._part("report.pdf")), "report.pdf")

    def test_unsafe_characters_replaced(self):
        self.assertEqual(attachment_filename(self._part("Q3 report: final?.pdf")), "Q3_report__final_.pdf")

    def test_path_separators_become_underscores(self):
        self.assertEqual(attachment_filename(self._part("a/b.pdf")), "a_b.pdf")
        self.assertEqual(attachment_filename(self._part("../../etc/passwd")), ".._.._etc_passwd")
        self.assertEqual(attachment_filename(self._part("..\\..\\evil.exe")), ".._.._evil.exe")

    def test_dot_only_names_are_rejected(self):
        for name in ("..", ".", "..."):
            with self.subTest(name=name):
                self.assertEqual(attachment_filename(self._part(name)), "")

    def test_encoded_word_filename(self):
        part = self._part("=?UTF-8?B?cmVwb3J0LnBkZg==?=")
        self.assertEqual(attachment_filename(part), "report.pdf")

    def test_rfc2231_filename(self):
        part = attachment_part(None, b"x")
        part.replace_header("Content-Disposition", "attachment; filename*=utf-8''r%C3%A9sum%C3%A9.pdf")
        # Non-ASCII word characters are not whitelisted
        self.assertEqual(attachment_filename(part), "r_sum_.pdf")

    def test_no_filename(self):
        self.assertEqual(attachment_filename(attachment_part(None, b"x")), "")

    def test_content_type_name_is_the_fallback(self):
        part = attachment_part(None, b"x")
        part.set_param("name", "fallback.txt")
        self.assertEqual(attachment_filename(part), "fallback.txt")


class TestRawEightBitHeaders(AttachmentTestCase):
    """Headers carrying raw UTF-8 bytes (RFC 6532) instead of encoded-words"""

    def _message(self, content_type, disposition):
        return parse(build_raw(
            """
Subject: 8-bit names
Content-Type: multipart/mixed; boundary="XX"
""",
            "--XX\n"
            "Content-Type: text/plain\n"
            "\n"
            "body\n"
            "--XX\n"
            f"Content-Type: {content_type}\n"
            f"Content-Disposition: {disposition}\n"
            "Content-Transfer-Encoding: base64\n"
            "\n"
            "JVBERg==\n"
            "--XX--\n",
        ))

    def test_raw_utf8_filename_in_disposition(self):
        msg = self._message('application/pdf; name="résumé.pdf"', 'attachment; filename="résumé.pdf"')
        attachments = extract_attachments(msg, self.output_dir)

        self.assertEqual([a.filename for a in attachments], ["r_sum_.pdf"])
        self.assertEqual((self.attachments_dir / "r_sum_.pdf").read_bytes(), b"%PDF")

    def test_raw_utf8_name_in_content_type_only(self):
        msg = self._message('application/pdf; name="résumé.pdf"', "attachment")
        attachments = extract_attachments(msg, self.output_dir)
        self.assertEqual([a.filename for a in attachments], ["r_sum_.pdf"])


class TestExistingFiles(unittest.TestCase):

    def test_membership_checks_the_filesystem(self):
        with TemporaryDirectory() as tmp:
            directory = Path(tmp)
            (directory / "present.txt").write_text("x")
            taken = ExistingFiles(directory)

            self.assertIn("present.txt", taken)
            self.assertNotIn("absent.txt", taken)


if __name__ == "__main__":
    unittest.main()
