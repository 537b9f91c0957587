"""
Reserved macro tag codec tests

Tests that bare macro tags are disguised before rendering and restored
exactly afterwards, while ordinary text is left alone.
"""

import re

import pytest

from mdstorage.lib import escaping
from mdstorage.lib.escaping import (
    TagCodec,
    placeholder_generate,
    tagPattern_build,
    tags_escape,
    tags_unescape,
)


DOCUMENTS = [
    "",
    "plain text without tags",
    "<ac:rich-text-body>\nBody\n</ac:rich-text-body>\n",
    "Inline <ac:emoticon> and </ac:emoticon> tags",
    "<ac:structured-macro ac:name=\"info\"> has attributes",
    "a: b <div:x> <acx:foo> ac:rich-text-body",
    "`<ac:code>` in inline code and\n\n```\n<ac:task>\n```\n",
]


class TestPlaceholder:
    """Test placeholder generation"""

    def test_placeholder_uses_tag_name_characters(self):
        """The engine must read an escaped tag as an ordinary HTML tag"""
        placeholder = placeholder_generate("doc")
        assert re.fullmatch(r"[A-Za-z0-9-]+", placeholder)

    def test_placeholder_absent_from_document(self, monkeypatch):
        """A colliding candidate is discarded"""
        candidates = iter(["aaaa", "bbbb"])
        monkeypatch.setattr(escaping.secrets, "token_hex", lambda n: next(candidates))

        document = "text containing -mdstorage-COLON-aaaa- literally"
        assert placeholder_generate(document) == "-mdstorage-COLON-bbbb-"

    def test_custom_prefix(self):
        """The readable prefix leads the placeholder"""
        assert placeholder_generate("", prefix="X").startswith("-X-")


class TestTagsEscape:
    """Test the escape pass"""

    def test_opening_and_closing_tags_escaped(self):
        """Both tag forms lose their colon"""
        escaped = tags_escape("<ac:layout></ac:layout>", "-P-")
        assert escaped == "<ac-P-layout></ac-P-layout>"

    def test_tags_with_attributes_untouched(self):
        """Tags carrying attributes are not reserved"""
        document = '<ac:structured-macro ac:name="info">'
        assert tags_escape(document, "-P-") == document

    def test_other_namespaces_untouched(self):
        """Only configured namespaces are escaped"""
        document = "<ri:page> <acx:foo> <div:x>"
        assert tags_escape(document, "-P-") == document

    def test_custom_namespaces(self):
        """An explicit namespace list replaces the default"""
        pattern = tagPattern_build(["ri"])
        escaped = tags_escape("<ri:page> <ac:layout>", "-P-", pattern)
        assert escaped == "<ri-P-page> <ac:layout>"

    def test_plain_colons_untouched(self):
        """Colons outside tag brackets are left alone"""
        document = "time: 10:30, see ac:rich-text-body"
        assert tags_escape(document, "-P-") == document

    def test_non_tag_name_characters_untouched(self):
        """Names an HTML tag can't carry are not escaped"""
        for document in ["<ac:task_list>", "<ac:a.b>", "</ac:x@y>"]:
            assert tags_escape(document, "-P-") == document

    def test_hyphenated_names_escaped(self):
        """Hyphens and digits are valid in reserved tag names"""
        assert tags_escape("<ac:h2-body>", "-P-") == "<ac-P-h2-body>"


class TestRoundTrip:
    """Test escape then unescape reproduces the document"""

    @pytest.mark.parametrize("document", DOCUMENTS)
    def test_round_trip(self, document):
        """Decoding the encoded document gives it back"""
        codec = TagCodec.codec_createFor(document)
        assert codec.decode(codec.encode(document)) == document

    def test_unescape_restores_only_placeholders(self):
        """Every placeholder occurrence becomes a colon"""
        assert tags_unescape("<ac-P-x> a-P-b", "-P-") == "<ac:x> a:b"

    def test_codec_placeholder_not_in_document(self):
        """The codec placeholder is fresh and used by encode"""
        document = DOCUMENTS[2]
        codec = TagCodec.codec_createFor(document)
        assert codec.placeholder not in document
        assert codec.placeholder in codec.encode(document)
