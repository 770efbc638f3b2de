import io
import unittest

from lcserver.lang.error import ErrorHandler, EvaluationFault, InvalidParams, LambdaError, ParseError


class LambdaErrorTestCase(unittest.TestCase):

    def test_msg(self):
        error = ParseError("'{}' has unmatched '('", "( x", start=0, end=1)
        self.assertEqual("'( x' has unmatched '('", error.msg)
        self.assertEqual("'( x' has unmatched '('", str(error))
        self.assertEqual("( x", error.expr)
        self.assertEqual((0, 1), (error.start, error.end))

        error = LambdaError("'{}' was not reduced within {} steps", ("x", 3))
        self.assertEqual("'x' was not reduced within 3 steps", error.msg)
        self.assertEqual(1, error.end)

    def test_to_dict(self):
        cases = {
            ParseError("'{}' has unmatched ')'", "x )", start=2, end=3): {
                "code": -32001, "message": "'x )' has unmatched ')'",
                "data": {"expression": "x )", "start": 2, "end": 3},
            },
            InvalidParams("evaluate expects params to be an object"): {
                "code": -32602, "message": "evaluate expects params to be an object",
            },
        }
        for case, expected in cases.items():
            self.assertEqual(expected, case.to_dict(), case)

    def test_codes_distinct(self):
        codes = {cls.code for cls in LambdaError.__subclasses__()}
        self.assertEqual(len(LambdaError.__subclasses__()), len(codes))


class ErrorHandlerTestCase(unittest.TestCase):

    def test_non_fatal(self):
        out = io.StringIO()
        with ErrorHandler(fatal=False, out=out):
            raise EvaluationFault("'{}' has an application in head position", "((x y) z)", start=1, end=6)

        self.assertIn("error: ", out.getvalue())
        self.assertIn("'((x y) z)' has an application in head position", out.getvalue())
        self.assertIn("^", out.getvalue())

    def test_fatal(self):
        out = io.StringIO()
        with self.assertRaises(SystemExit) as context:
            with ErrorHandler(out=out):
                raise ParseError("λ-term cannot be empty", "")
        self.assertEqual(1, context.exception.code)
        self.assertIn("λ-term cannot be empty", out.getvalue())

    def test_recursion_error(self):
        out = io.StringIO()
        with ErrorHandler(fatal=False, out=out):
            raise RecursionError()
        self.assertIn("maximum recursion depth exceeded", out.getvalue())

    def test_keyboard_interrupt(self):
        out = io.StringIO()
        with ErrorHandler(fatal=False, out=out):
            raise KeyboardInterrupt()
        self.assertIn("interrupted", out.getvalue())

    def test_internal(self):
        out = io.StringIO()
        with self.assertRaises(ValueError):
            with ErrorHandler(fatal=False, out=out):
                raise ValueError("boom")
        self.assertIn("[internal] ", out.getvalue())
        self.assertIn("ValueError: boom", out.getvalue())

    def test_system_exit_passes_through(self):
        with self.assertRaises(SystemExit):
            with ErrorHandler(fatal=False, out=io.StringIO()):
                raise SystemExit(2)

    def test_diagnose(self):
        diagnosis = ErrorHandler.diagnose(ParseError("'{}' has unmatched ')'", "x y )", start=4, end=5))
        first, second = diagnosis.split("\n")
        self.assertTrue(first.startswith("  x y "))
        self.assertTrue(second.startswith("      "))
        self.assertIn("^", second)


if __name__ == '__main__':
    unittest.main()
