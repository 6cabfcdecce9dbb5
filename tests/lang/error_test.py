import io
import unittest

from futaba.lang.error import (ErrorHandler, ExitCode, FutabaError, Position, TypeMismatchError,
                               UnresolvedNameError, UnterminatedSentenceError)


class ErrorHandlerTestCase(unittest.TestCase):

    def setUp(self):
        self.stream = io.StringIO()

    def test_exit_codes(self):
        expected = ["UNRESOLVED_NAME", "CANNOT_OPEN_FILE", "NO_ARGV", "UNRECOGNIZED_SYMBOL", "UNCOMPLETED_SENTENCE",
                    "RECURSIVE_SELF"]
        for code, name in enumerate(expected, start=1):
            self.assertEqual(code, ExitCode[name], name)

    def test_fatal(self):
        cases = {
            UnresolvedNameError("foo"): 1,
            UnterminatedSentenceError(): 5,
            TypeMismatchError("+", "an integer", None): 7,
            FutabaError("internal", internal=True): 9,
        }
        for error, expected in cases.items():
            with self.assertRaises(SystemExit) as context:
                with ErrorHandler(stream=self.stream):
                    raise error
            self.assertEqual(expected, context.exception.code, error)

    def test_python_errors(self):
        for error in [KeyboardInterrupt(), RecursionError(), ValueError("boom")]:
            with self.assertRaises(SystemExit) as context:
                with ErrorHandler(stream=self.stream):
                    raise error
            self.assertEqual(9, context.exception.code, error)
        self.assertIn("[internal]", self.stream.getvalue())
        self.assertIn("boom", self.stream.getvalue())

    def test_not_fatal(self):
        with ErrorHandler(fatal=False, stream=self.stream):
            raise UnresolvedNameError("foo", Position("t.ft", 1, 1))
        self.assertIn("t.ft:1:1", self.stream.getvalue())

        with self.assertRaises(ValueError):  # unknown errors still propagate
            with ErrorHandler(fatal=False, stream=self.stream):
                raise ValueError("boom")

    def test_system_exit_passes(self):
        with self.assertRaises(SystemExit) as context:
            with ErrorHandler(stream=self.stream):
                raise SystemExit(0)
        self.assertEqual(0, context.exception.code)
        self.assertEqual("", self.stream.getvalue())

    def test_diagnose(self):
        handler = ErrorHandler(stream=self.stream)
        handler.register_source("t.ft", "put\n  + 1 foo.")

        line, caret = handler.diagnose(UnresolvedNameError("foo", Position("t.ft", 2, 7))).split("\n")
        self.assertEqual("    + 1 foo.", line)
        self.assertTrue(caret.startswith(" " * 8), caret)
        self.assertIn("^", caret)

        self.assertIsNone(handler.diagnose(UnresolvedNameError("foo")))
        self.assertIsNone(handler.diagnose(UnresolvedNameError("foo", Position("other.ft", 1, 1))))

    def test_runtime_header(self):
        handler = ErrorHandler(fatal=False, stream=self.stream)
        handler.register_source("t.ft", "1 2.")
        handler.throw(FutabaError("something"))
        self.assertIn("t.ft: ", self.stream.getvalue())

    def test_warn(self):
        handler = ErrorHandler(stream=self.stream)
        handler.warn("integer literal {} wrapped to {}", ("4294967296", "0"))
        self.assertIn("warning: ", self.stream.getvalue())
        self.assertIn("4294967296", self.stream.getvalue())


if __name__ == '__main__':
    unittest.main()
