import unittest

from gamecalc.executor.validator import validate_code


class ValidateCodeTest(unittest.TestCase):
    def test_accepts_plain_calculation(self):
        result = validate_code("return data.reduce((a, b) => a + b, 0) / data.length")
        self.assertTrue(result.valid)
        self.assertEqual(result.errors, [])

    def test_accepts_helper_calls(self):
        result = validate_code("const g = groupBy(games, 'platform.name'); return Object.keys(g).length")
        self.assertTrue(result.valid)

    def test_rejects_empty_code(self):
        for code in ("", "   \n\t", None):
            result = validate_code(code)
            self.assertFalse(result.valid)
            self.assertEqual(result.errors, ["Code cannot be empty"])

    def test_rejects_each_dangerous_construct(self):
        cases = {
            "eval('x')": "eval(",
            "return new Function('return 1')()": "new Function(",
            "return process.env": "process",
            "const fs = require('fs')": "require(",
            "import fs from 'fs'": "import",
            "return global": "global",
            "return window.location": "window",
            "return document.cookie": "document",
            "fetch('http://example.com')": "fetch(",
            "new XMLHttpRequest()": "XMLHttpRequest",
            "new WebSocket('ws://x')": "WebSocket",
        }
        for code, category in cases.items():
            with self.subTest(code=code):
                result = validate_code(code)
                self.assertFalse(result.valid)
                self.assertTrue(any(category in e for e in result.errors), result.errors)
                self.assertTrue(all(e.startswith("Dangerous pattern detected") for e in result.errors))

    def test_reports_every_match(self):
        result = validate_code("eval(x); fetch(y); return window")
        self.assertFalse(result.valid)
        self.assertEqual(len(result.errors), 3)

    def test_case_insensitive_for_calls(self):
        self.assertFalse(validate_code("EVAL ('x')").valid)
        self.assertFalse(validate_code("Fetch(url)").valid)

    def test_word_boundaries(self):
        # identifiers that merely contain a denylisted word are fine
        self.assertTrue(validate_code("const processed = 1; return processed").valid)
        self.assertTrue(validate_code("const globally = 2; return globally").valid)
        self.assertTrue(validate_code("return evaluate(3)").valid)


if __name__ == "__main__":
    unittest.main()
