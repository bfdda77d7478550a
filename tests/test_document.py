"""
Tests for rocket document reading.
"""
import zipfile

import pytest

from conftest import BODY_TUBE, make_document
from ork_import.contracts import DocumentError, FieldParseError
from ork_import.document import (
    parse_bool,
    parse_document,
    parse_float,
    parse_int,
    read_document,
    stage_components,
)


class TestReadDocument:
    def test_zip_container(self, ork_file):
        root = read_document(ork_file)
        assert root.name == "openrocket"
        assert [c.name for c in stage_components(root)] == ["nosecone", "bodytube"]

    def test_zip_entry_in_subdirectory(self, rocket_xml, tmp_path):
        path = tmp_path / "nested.ork"
        with zipfile.ZipFile(path, "w") as archive:
            archive.writestr("design/rocket.ork", rocket_xml)
        assert len(stage_components(read_document(path))) == 2

    def test_zip_without_rocket_entry(self, tmp_path):
        path = tmp_path / "empty.ork"
        with zipfile.ZipFile(path, "w") as archive:
            archive.writestr("other.xml", "<openrocket/>")
        with pytest.raises(DocumentError):
            read_document(path)

    def test_gzip(self, gzip_ork_file):
        assert len(stage_components(read_document(gzip_ork_file))) == 2

    def test_plain_xml(self, plain_ork_file):
        assert len(stage_components(read_document(plain_ork_file))) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_document(tmp_path / "missing.ork")

    def test_malformed_xml(self):
        with pytest.raises(DocumentError):
            parse_document("<openrocket><rocket>")


class TestStageComponents:
    def test_components_of_every_stage(self):
        root = parse_document(make_document(BODY_TUBE, stages=2))
        assert [c.name for c in stage_components(root)] == ["bodytube", "bodytube"]

    def test_rocket_as_root(self):
        root = parse_document(
            "<rocket><subcomponents><stage><subcomponents>"
            "<bodytube/></subcomponents></stage></subcomponents></rocket>"
        )
        assert len(stage_components(root)) == 1

    def test_no_rocket(self):
        with pytest.raises(DocumentError):
            stage_components(parse_document("<openrocket><simulations/></openrocket>"))


class TestLabeledNode:
    def test_navigation(self):
        root = parse_document(
            '<a><b id="1">first</b><c/><b>second</b></a>'
        )
        first = root.child("b")
        assert first.attributes == {"id": "1"}
        assert first.text == "first"
        assert first.next_sibling().name == "c"
        assert root.children[-1].next_sibling() is None
        assert [n.text for n in root.children_named("b")] == ["first", "second"]
        assert root.field_text("missing") is None
        assert len(first.siblings) == 3
        assert root.siblings == [root]

    def test_subcomponents(self):
        (tube,) = stage_components(parse_document(make_document(BODY_TUBE)))
        assert [s.name for s in tube.subcomponents] == [
            "innertube", "centeringring", "bulkhead", "freeformfinset",
        ]
        assert tube.subcomponents[0].parent.name == "subcomponents"


class TestFieldParsing:
    def test_numbers(self):
        assert parse_float("0.0635", "radius") == 0.0635
        assert parse_int("3", "fincount") == 3

    @pytest.mark.parametrize("text", ["abc", "", None])
    def test_bad_float(self, text):
        with pytest.raises(FieldParseError):
            parse_float(text, "length")

    def test_bad_int(self):
        with pytest.raises(FieldParseError):
            parse_int("3.5", "fincount")

    def test_bool(self):
        assert parse_bool("true", "capped") is True
        assert parse_bool(" False ", "capped") is False
        with pytest.raises(FieldParseError):
            parse_bool("yes", "capped")
