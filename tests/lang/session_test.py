import unittest

from lcserver.lang.error import EvaluationFault, EvaluationLimitExceeded, ParseError
from lcserver.lang.session import Session, evaluate_expression
from lcserver.pure.reducer import HeadReducer


class EvaluateExpressionTestCase(unittest.TestCase):

    def test_evaluate_expression(self):
        cases = {
            "x": "x",
            "( x y )": "(x y)",
            "( ( x ) )": "x",
            "  (  x   ( y z )  )  ": "(x z)",
            "( f a b c )": "(f c)",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, evaluate_expression(case), case)

    def test_deterministic(self):
        for case in ["( x y )", "g ( a b )", "( ( x ) )"]:
            self.assertEqual(evaluate_expression(case), evaluate_expression(case), case)

    def test_errors(self):
        should_raise = {
            "( x": ParseError,
            "": ParseError,
            ")": ParseError,
            "( ( x y ) z )": EvaluationFault,
        }
        for case, error in should_raise.items():
            self.assertRaises(error, evaluate_expression, case)

    def test_reduce_spine(self):
        self.assertEqual("((x y) z)", evaluate_expression("( ( x y ) z )", HeadReducer(reduce_spine=True)))

    def test_deeply_nested(self):
        depth = 3000
        expr = "( " * depth + "x y )" + " y )" * (depth - 1)
        self.assertRaises(EvaluationLimitExceeded, evaluate_expression, expr)


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.session = Session()

    def test_evaluate(self):
        request = {"id": 1, "method": "evaluate", "params": {"expression": "( x y )"}}
        self.assertEqual({"id": 1, "result": {"expression": "(x y)"}}, self.session.handle(request))

        request = {"id": "abc", "method": "evaluate", "params": {"expression": "( ( x ) )", "extra": True}}
        self.assertEqual({"id": "abc", "result": {"expression": "x"}}, self.session.handle(request))

    def test_pass_through(self):
        cases = [
            ({"id": 1, "method": "ping", "params": {"a": 1}}, {"id": 1, "result": {"a": 1}}),
            ({"id": 2, "method": "echo", "params": [1, "two"]}, {"id": 2, "result": [1, "two"]}),
            ({"id": 3, "method": "Evaluate"}, {"id": 3, "result": None}),
        ]
        for request, expected in cases:
            self.assertEqual(expected, self.session.handle(request), request)

    def test_invalid_params(self):
        should_fail = [None, "( x y )", ["( x y )"], {}, {"expression": 3}, {"expression": None}, {"expr": "x"}]
        for params in should_fail:
            response = self.session.handle({"id": 7, "method": "evaluate", "params": params})
            self.assertEqual(7, response["id"], params)
            self.assertNotIn("result", response, params)
            self.assertEqual(-32602, response["error"]["code"], params)

    def test_core_errors(self):
        cases = {
            "( x": -32001,
            "": -32001,
            "( ( x y ) z )": -32002,
        }
        for expr, code in cases.items():
            response = self.session.handle({"id": 1, "method": "evaluate", "params": {"expression": expr}})
            self.assertEqual(code, response["error"]["code"], expr)
            self.assertIn("message", response["error"], expr)

        response = self.session.handle({"id": 1, "method": "evaluate", "params": {"expression": "x )"}})
        self.assertEqual({"expression": "x )", "start": 2, "end": 3}, response["error"]["data"])

    def test_invalid_request(self):
        cases = [
            ([1, 2], None),
            ("evaluate", None),
            ({"id": 4}, 4),
            ({"id": 5, "method": 12}, 5),
        ]
        for request, request_id in cases:
            response = self.session.handle(request)
            self.assertEqual(request_id, response["id"], request)
            self.assertEqual(-32600, response["error"]["code"], request)

    def test_configured_reducer(self):
        session = Session(HeadReducer(reduce_spine=True))
        response = session.handle({"id": 1, "method": "evaluate", "params": {"expression": "( ( x y ) z )"}})
        self.assertEqual({"id": 1, "result": {"expression": "((x y) z)"}}, response)


if __name__ == '__main__':
    unittest.main()
