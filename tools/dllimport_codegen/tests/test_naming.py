from __future__ import annotations

import sys
import unittest
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from dllimport_codegen.naming import normalize_word, split_words, to_pascal_case

CASES = {
    "my_function_name": "MyFunctionName",
    "HTTPServerSocket": "HttpServerSocket",
    "getURL": "GetUrl",
    "get_ID": "GetId",
    "XML2Json": "Xml2Json",
    "ABCDef": "AbcDef",
    "ABC": "Abc",
    "some value 42abc": "SomeValue42Abc",
    "hello world!": "HelloWorld",
    "my-function": "Myfunction",
    "Vec3Len": "Vec3Len",
    "123": "123",
    "X": "X",
    "__": "",
    "": "",
}


class PascalCaseTests(unittest.TestCase):
    def test_pinned_cases(self) -> None:
        for raw, expected in CASES.items():
            with self.subTest(raw=raw):
                self.assertEqual(to_pascal_case(raw), expected)

    def test_output_is_a_fixed_point(self) -> None:
        for raw in CASES:
            with self.subTest(raw=raw):
                once = to_pascal_case(raw)
                self.assertEqual(to_pascal_case(once), once)

    def test_single_letter_words_are_not_a_fixed_point(self) -> None:
        # Adjacent single-letter words read as an acronym on the second pass.
        for raw, once, twice in [
            ("x_y", "XY", "Xy"),
            ("get_x_y", "GetXY", "GetXy"),
            ("a_b_c", "ABC", "Abc"),
        ]:
            with self.subTest(raw=raw):
                self.assertEqual(to_pascal_case(raw), once)
                self.assertEqual(to_pascal_case(once), twice)
        self.assertEqual(to_pascal_case("set_x"), "SetX")
        self.assertEqual(to_pascal_case("SetX"), "SetX")

    def test_whitespace_and_punctuation_handling(self) -> None:
        self.assertEqual(split_words("  some\tvalue_ here "), ["some", "value", "here"])
        self.assertEqual(split_words("a.b-c"), ["abc"])
        self.assertEqual(split_words("werté_x"), ["wert", "x"])

    def test_words_without_casing_signals_are_untouched(self) -> None:
        for word in ["123", "X", "Value", "A1", "Vec3Len"]:
            with self.subTest(word=word):
                self.assertEqual(normalize_word(word), word)


if __name__ == "__main__":
    unittest.main()
