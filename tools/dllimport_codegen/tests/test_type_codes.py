from __future__ import annotations

import sys
import unittest
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from dllimport_codegen.common import UnrecognizedTypeCodeError
from dllimport_codegen.type_codes import (
    _CODES_BY_LENGTH,
    TYPE_CODE_MAP,
    DecodedType,
    codes_by_length,
    decode_type_run,
    encode_type,
    match_primitive_code,
    next_type,
)


class TypeCodeLexerTests(unittest.TestCase):
    def test_decodes_single_character_codes(self) -> None:
        self.assertEqual(
            decode_type_run("XHMN"),
            [DecodedType("void"), DecodedType("int"), DecodedType("float"), DecodedType("double")],
        )

    def test_two_character_codes_decode_as_one_token(self) -> None:
        self.assertEqual(decode_type_run("_J"), [DecodedType("long")])
        self.assertEqual(decode_type_run("_NH_K"), [DecodedType("bool"), DecodedType("int"), DecodedType("ulong")])
        self.assertEqual(match_primitive_code("_K", 0), "_K")

    def test_longest_code_wins_over_shared_prefix(self) -> None:
        codes = codes_by_length({"_": "short", "X": "void", "_X": "wide"})
        self.assertEqual([code for code, _ in codes], ["_X", "_", "X"])
        self.assertEqual(match_primitive_code("_XH", 0, codes), "_X")
        self.assertEqual(match_primitive_code("_H", 0, codes), "_")

    def test_builtin_table_is_ordered_longest_first(self) -> None:
        lengths = [len(code) for code, _ in _CODES_BY_LENGTH]
        self.assertEqual(lengths, sorted(lengths, reverse=True))
        self.assertEqual(set(_CODES_BY_LENGTH), set(TYPE_CODE_MAP.items()))

    def test_pointer_depth_counts_markers(self) -> None:
        for depth in range(5):
            with self.subTest(depth=depth):
                decoded, position = next_type("PEA" * depth + "H")
                self.assertEqual(decoded, DecodedType("int", depth))
                self.assertEqual(position, depth * 3 + 1)

    def test_encoded_sequence_decodes_back_completely(self) -> None:
        expected = [
            DecodedType("bool", 1),
            DecodedType("char", 2),
            DecodedType("long"),
            DecodedType("ushort"),
            DecodedType("double", 3),
        ]
        run = "".join(encode_type(item.primitive_name, item.pointer_depth) for item in expected)
        self.assertEqual(run, "PEA_NPEAPEAD_JGPEAPEAPEAN")
        self.assertEqual(decode_type_run(run), expected)

    def test_every_table_code_round_trips(self) -> None:
        for code, name in TYPE_CODE_MAP.items():
            with self.subTest(code=code):
                self.assertEqual(decode_type_run(code), [DecodedType(name)])

    def test_end_of_input_is_not_an_error(self) -> None:
        self.assertEqual(next_type("", 0), (None, 0))
        self.assertEqual(next_type("H", 1), (None, 1))
        self.assertEqual(decode_type_run(""), [])

    def test_unrecognized_code_reports_position(self) -> None:
        with self.assertRaises(UnrecognizedTypeCodeError) as ctx:
            decode_type_run("XPEBD")
        self.assertEqual(ctx.exception.position, 1)
        self.assertEqual(ctx.exception.type_run, "XPEBD")

    def test_pointer_marker_without_primitive_is_rejected(self) -> None:
        with self.assertRaises(UnrecognizedTypeCodeError) as ctx:
            next_type("PEA")
        self.assertEqual(ctx.exception.position, 3)

    def test_unknown_underscore_code_is_rejected(self) -> None:
        with self.assertRaises(UnrecognizedTypeCodeError):
            next_type("_W")

    def test_render_appends_one_star_per_level(self) -> None:
        self.assertEqual(DecodedType("char", 2).render(), "char**")
        self.assertEqual(DecodedType("void").render(), "void")
        self.assertTrue(DecodedType("int", 1).is_pointer)
        self.assertFalse(DecodedType("int").is_pointer)


if __name__ == "__main__":
    unittest.main()
