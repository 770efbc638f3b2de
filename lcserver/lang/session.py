"""Session control for lcserver. Turns decoded requests into response payloads.

A request is the decoded object `{"id": ..., "method": ..., "params": ...}`. Sessions do not know anything about
sockets or framing: the server decodes requests and encodes whatever Session.handle returns.
"""

import logging

from lcserver.lang.error import EvaluationLimitExceeded, InvalidParams, InvalidRequest, LambdaError
from lcserver.pure.lexical import parse
from lcserver.pure.reducer import HeadReducer

logger = logging.getLogger(__name__)

EVALUATE = "evaluate"


def evaluate_expression(expr, reducer=None):
    """Parses, head-reduces and prints expr. Raises a LambdaError if expr cannot be parsed or reduced."""
    if reducer is None:
        reducer = HeadReducer()
    try:
        return str(reducer.reduce(parse(expr)))
    except RecursionError:
        raise EvaluationLimitExceeded("'{}' is nested too deeply, maximum recursion depth exceeded", expr)


class Session:
    """Governs request dispatch. Holds configuration only, so a single Session can be shared by every connection."""

    def __init__(self, reducer=None):
        self.reducer = reducer if reducer is not None else HeadReducer()
        self.methods = {EVALUATE: self.evaluate}

    def handle(self, request):
        """Returns the response payload for request. Never raises for bad input: errors become an `error` member."""
        request_id = request.get("id") if isinstance(request, dict) else None
        try:
            if not isinstance(request, dict):
                raise InvalidRequest("request must be an object")

            method = request.get("method")
            if not isinstance(method, str):
                raise InvalidRequest("request method must be a string")

            params = request.get("params")
            if method in self.methods:
                result = self.methods[method](params)
            else:
                result = params  # unknown methods echo their params

        except LambdaError as error:
            logger.warning("request %r failed: %s", request_id, error.msg)
            return {"id": request_id, "error": error.to_dict()}

        return {"id": request_id, "result": result}

    def evaluate(self, params):
        """The `evaluate` method: {"expression": str} -> {"expression": str}."""
        if not isinstance(params, dict):
            raise InvalidParams("evaluate expects params to be an object")

        expr = params.get("expression")
        if not isinstance(expr, str):
            raise InvalidParams("evaluate expects a string 'expression' parameter")

        logger.debug("evaluating '%s'", expr)
        result = evaluate_expression(expr, self.reducer)
        logger.debug("'%s' reduced to '%s'", expr, result)

        return {"expression": result}
