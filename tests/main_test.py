import io
import os
import tempfile
import unittest
from unittest.mock import patch

from futaba.main import main


class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "test.ft")

    def tearDown(self):
        self.tmp.cleanup()

    def run_main(self, *argv, text=None):
        """Runs main with argv. Returns exit code, bytes written to stdout and text written to stderr."""
        if text is not None:
            with open(self.path, "w", encoding="utf-8") as file:
                file.write(text)

        stdout = io.TextIOWrapper(io.BytesIO(), encoding="utf-8")
        stderr = io.StringIO()
        code = 0
        with patch("sys.stdout", stdout), patch("sys.stderr", stderr):
            try:
                main(list(argv))
            except SystemExit as exc:
                code = exc.code
        stdout.flush()
        return code, stdout.buffer.getvalue(), stderr.getvalue()

    def test_success(self):
        code, out, err = self.run_main(self.path, text="put 72 `_ put 105..")
        self.assertEqual(0, code)
        self.assertEqual(b"Hi", out)
        self.assertEqual("", err)

    def test_exit_codes(self):
        cases = {
            "+ 1 foo.": 1,
            "put \x01.": 4,
            "put 65": 5,
            "1 2.": 6,
            "put nil.": 7,
            "/ 1 0 put.": 8,
        }
        for case, expected in cases.items():
            code, __, err = self.run_main(self.path, text=case)
            self.assertEqual(expected, code, case)
            self.assertIn("error: ", err, case)

    def test_no_argument(self):
        code, __, err = self.run_main()
        self.assertEqual(3, code)
        self.assertIn("please specify source file", err)

    def test_cannot_open(self):
        code, __, err = self.run_main(os.path.join(self.tmp.name, "missing.ft"))
        self.assertEqual(2, code)
        self.assertIn("cannot open file", err)

    def test_diagnosis(self):
        code, out, err = self.run_main(self.path, text="put 65.\n+ 1 foo.")
        self.assertEqual(1, code)
        self.assertEqual(b"", out)  # nothing runs if parsing fails
        self.assertIn("test.ft:2:5", err)
        self.assertIn("unresolved name", err)
        self.assertIn("foo", err)
        self.assertIn("  + 1 foo.", err)
        self.assertIn("^", err)

    def test_runtime_error_after_output(self):
        code, out, err = self.run_main(self.path, text="put 65. 1 2.")
        self.assertEqual(6, code)
        self.assertEqual(b"A", out)
        self.assertIn("recursive", err)

    def test_tree(self):
        code, out, __ = self.run_main("--tree", self.path, text="put 65. + 1 2.")
        self.assertEqual(0, code)
        self.assertIn(b"DeferredCall(nodes=[", out)
        self.assertIn(b"Primitive('put')", out)
        self.assertNotIn(b"A", out)


if __name__ == '__main__':
    unittest.main()
