"""Tests for the binary primitives, value cells and string table."""

import pytest


class TestBinaryReader:
    """Test little-endian primitive decoding."""

    def test_integers_are_little_endian(self) -> None:
        """Test u16, i16 and i32 byte order."""
        from celeste_maped.maps.binary import BinaryReader

        reader = BinaryReader(b"\x01\x02\xff\xff\x78\x56\x34\x12")
        assert reader.read_u16() == 0x0201
        assert reader.read_i16() == -1
        assert reader.read_i32() == 0x12345678
        assert reader.at_end()

    def test_multi_byte_varint_string(self) -> None:
        """Test a string whose length needs two varint bytes."""
        from celeste_maped.maps.binary import BinaryReader

        text = "x" * 200
        reader = BinaryReader(b"\xc8\x01" + text.encode())
        assert reader.read_string() == text

    def test_unterminated_varint(self) -> None:
        """Test a varint longer than five bytes is rejected."""
        from celeste_maped.errors import MalformedPrimitiveError
        from celeste_maped.maps.binary import BinaryReader

        reader = BinaryReader(b"\x80\x80\x80\x80\x80\x01")
        with pytest.raises(MalformedPrimitiveError) as exc_info:
            reader.read_varint()
        assert exc_info.value.offset == 0

    def test_eof_reports_offset(self) -> None:
        """Test truncated input raises UnexpectedEofError at the primitive start."""
        from celeste_maped.errors import UnexpectedEofError
        from celeste_maped.maps.binary import BinaryReader

        reader = BinaryReader(b"\x01\x02\x03")
        reader.read_u8()
        with pytest.raises(UnexpectedEofError) as exc_info:
            reader.read_i32()
        assert exc_info.value.offset == 1

    def test_invalid_bool_byte(self) -> None:
        """Test a bool byte other than 0 or 1 is malformed."""
        from celeste_maped.errors import MalformedPrimitiveError
        from celeste_maped.maps.binary import BinaryReader

        with pytest.raises(MalformedPrimitiveError):
            BinaryReader(b"\x02").read_bool()

    def test_rle_string(self) -> None:
        """Test run-length decoding of (count, char) pairs."""
        from celeste_maped.maps.binary import BinaryReader

        reader = BinaryReader(b"\x06\x00\x03a\x01\n\x02b")
        assert reader.read_rle_string() == "aaa\nbb"

    def test_rle_odd_byte_count(self) -> None:
        """Test an odd RLE byte count is malformed."""
        from celeste_maped.errors import MalformedPrimitiveError
        from celeste_maped.maps.binary import BinaryReader

        with pytest.raises(MalformedPrimitiveError):
            BinaryReader(b"\x03\x00\x01a\x01").read_rle_string()


class TestBinaryWriter:
    """Test primitive encoding."""

    def test_rle_runs(self) -> None:
        """Test runs are grouped and capped at 255 characters."""
        from celeste_maped.maps.binary import BinaryWriter

        writer = BinaryWriter()
        writer.write_rle_string("aaab")
        assert writer.getvalue() == b"\x04\x00\x03a\x01b"

        writer = BinaryWriter()
        writer.write_rle_string("0" * 300)
        assert writer.getvalue() == b"\x04\x00\xff0\x2d0"

    def test_rle_rejects_wide_characters(self) -> None:
        """Test characters outside one byte cannot be run-length encoded."""
        from celeste_maped.errors import MapWriteError
        from celeste_maped.maps.binary import BinaryWriter

        with pytest.raises(MapWriteError):
            BinaryWriter().write_rle_string("☃")

    def test_out_of_range_integer(self) -> None:
        """Test packing overflow raises MapWriteError."""
        from celeste_maped.errors import MapWriteError
        from celeste_maped.maps.binary import BinaryWriter

        writer = BinaryWriter()
        with pytest.raises(MapWriteError):
            writer.write_u8(256)
        with pytest.raises(MapWriteError):
            writer.write_i16(40000)

    def test_invalid_utf8_survives(self) -> None:
        """Test undecodable string bytes are written back unchanged."""
        from celeste_maped.maps.binary import BinaryReader, BinaryWriter

        data = b"\x03a\xffb"
        text = BinaryReader(data).read_string()
        writer = BinaryWriter()
        writer.write_string(text)
        assert writer.getvalue() == data


class TestValues:
    """Test value cell tagging."""

    def test_infer_narrowest_integer(self) -> None:
        """Test new integers get the narrowest tag."""
        from celeste_maped.maps.values import Value, ValueKind

        assert Value.infer(5).kind == ValueKind.BYTE
        assert Value.infer(-1).kind == ValueKind.SHORT
        assert Value.infer(70000).kind == ValueKind.INT
        assert Value.infer(True).kind == ValueKind.BOOL
        assert Value.infer(1.5).kind == ValueKind.FLOAT
        assert Value.infer("x").kind == ValueKind.LOOKUP
        assert Value.infer("x", rle=True).kind == ValueKind.RLE_STRING

    def test_integer_too_large(self) -> None:
        """Test integers beyond 32 bits cannot be stored."""
        from celeste_maped.errors import MapWriteError
        from celeste_maped.maps.values import Value

        with pytest.raises(MapWriteError):
            Value.infer(2**40)

    def test_hint_kept_when_value_fits(self) -> None:
        """Test the original tag is reused while the payload fits."""
        from celeste_maped.maps.values import Value, ValueKind

        assert Value.infer(5, ValueKind.INT) == Value(ValueKind.INT, 5)
        assert Value.infer(8.0, ValueKind.SHORT) == Value(ValueKind.SHORT, 8)
        assert Value.infer("x", ValueKind.STRING) == Value(ValueKind.STRING, "x")
        assert Value.infer(300, ValueKind.BYTE) == Value(ValueKind.SHORT, 300)
        assert Value.infer(8.5, ValueKind.SHORT) == Value(ValueKind.FLOAT, 8.5)
        assert Value.infer("-12", ValueKind.SHORT) == Value(ValueKind.SHORT, -12)

    @pytest.mark.parametrize("text", ["--5", "²", "1_000", " 7", "-"])
    def test_non_decimal_text_under_integer_tag(self, text: str) -> None:
        """Test text that is not a plain decimal becomes a string cell."""
        from celeste_maped.maps import RawElement
        from celeste_maped.maps.values import Value, ValueKind

        element = RawElement("e", {"a": Value(ValueKind.BYTE, 1)})
        element.set("a", text)
        assert element.attributes["a"] == Value(ValueKind.LOOKUP, text)

    def test_char_attribute_with_non_ascii_digit(self) -> None:
        """Test a non-ASCII digit tile character is stored as a string."""
        from celeste_maped.maps.elements.entities import DashBlock
        from celeste_maped.maps.parser import encode_element
        from celeste_maped.maps.values import Value, ValueKind

        raw = encode_element(DashBlock(tile_type="²"))
        assert raw.attributes["tiletype"] == Value(ValueKind.LOOKUP, "²")

    def test_typed_access(self) -> None:
        """Test conversion to the requested attribute type."""
        from celeste_maped.maps.values import AttrType, Value, ValueKind

        assert Value(ValueKind.BYTE, 3).convert(AttrType.FLOAT) == 3.0
        assert Value(ValueKind.BYTE, 3).convert(AttrType.CHAR) == "3"
        assert Value(ValueKind.LOOKUP, "3").convert(AttrType.INT) is None
        assert Value(ValueKind.BOOL, True).convert(AttrType.INT) is None

    def test_unknown_tag(self) -> None:
        """Test tags above 7 raise UnknownValueTagError."""
        from celeste_maped.errors import UnknownValueTagError
        from celeste_maped.maps.binary import BinaryReader
        from celeste_maped.maps.lookup import StringTable
        from celeste_maped.maps.values import decode_value

        reader = BinaryReader(b"\x08\x00")
        tag = reader.read_u8()
        with pytest.raises(UnknownValueTagError) as exc_info:
            decode_value(tag, reader, StringTable())
        assert exc_info.value.tag == 8
        assert exc_info.value.offset == 0


class TestStringTable:
    """Test string table lookup and collection."""

    def test_collect_first_use_order(self) -> None:
        """Test names and lookup values are collected in pre-order."""
        from celeste_maped.maps import RawElement, StringTable
        from celeste_maped.maps.values import Value, ValueKind

        root = RawElement(
            "Map",
            {"name": Value(ValueKind.LOOKUP, "x"), "inline": Value(ValueKind.STRING, "y")},
            [RawElement("a", children=[RawElement("name")]), RawElement("b")],
        )
        table = StringTable.collect(root)
        assert list(table) == ["Map", "name", "x", "inline", "a", "b"]
        assert table.frozen

    def test_frozen_table_rejects_new_strings(self) -> None:
        """Test a frozen table only resolves existing strings."""
        from celeste_maped.errors import MapWriteError
        from celeste_maped.maps import StringTable

        table = StringTable(["Map"])
        table.freeze()
        assert table.index_of("Map") == 0
        with pytest.raises(MapWriteError):
            table.add("other")

    def test_out_of_range_index(self) -> None:
        """Test lookups outside the table raise CorruptStringTableError."""
        from celeste_maped.errors import CorruptStringTableError
        from celeste_maped.maps import StringTable

        table = StringTable(["a", "b"])
        with pytest.raises(CorruptStringTableError) as exc_info:
            table.get(2, offset=10)
        assert exc_info.value.size == 2
        assert exc_info.value.offset == 10

    def test_duplicate_strings_resolve_to_first(self) -> None:
        """Test the first of duplicated strings is used for writing."""
        from celeste_maped.maps import StringTable

        table = StringTable(["a", "b", "a"])
        assert len(table) == 3
        assert table.get(2) == "a"
        assert table.index_of("a") == 0
