"""Error handling for lcserver. Only LambdaErrors should be encountered while parsing or reducing: if another type of
error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

LambdaErrors double as structured error payloads: Session turns them into the `error` member of a response, so every
subclass carries a numeric code alongside its message.
"""

import sys

from termcolor import colored


class LambdaError(Exception):
    """Templates an error message so that it can be used both on the command line and in a response payload."""
    code = -32000

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.msg = msg.format(*exprs)
        self.expr = exprs[0]  # exprs[0] should be the offending expr that caused the error
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)

    def to_dict(self):
        """Error member of a response."""
        error = {"code": self.code, "message": self.msg}
        if self.expr:
            error["data"] = {"expression": self.expr, "start": self.start, "end": self.end}
        return error


class ParseError(LambdaError):
    """Unbalanced parentheses, empty input or a malformed stack while parsing."""
    code = -32001


class EvaluationFault(LambdaError):
    """Head position holds a term the reducer cannot dispatch on."""
    code = -32002


class EvaluationLimitExceeded(LambdaError):
    """Reduction did not reach a stuck or irreducible head within its budget."""
    code = -32003


class InvalidRequest(LambdaError):
    code = -32600


class InvalidParams(LambdaError):
    code = -32602


class ErrorHandler:
    """Context manager that will silently suppress Python errors and print lcserver errors instead."""
    ERROR = "red"

    def __init__(self, fatal=True, out=None):
        self.fatal = fatal
        self.out = out if out is not None else sys.stdout

    @staticmethod
    def diagnose(error):
        """Returns offending part of error.expr highlighted and bolded."""
        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], ErrorHandler.ERROR, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), ErrorHandler.ERROR, attrs=["bold"])

        return diagnosis

    def throw(self, error):
        """Prints error, then exits if this handler is fatal."""
        error_msg = ""
        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg, file=self.out)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error), file=self.out)

        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Reports exc_val and suppresses it, unless it is a SystemExit or an internal error (those propagate)."""
        if exc_type is None or issubclass(exc_type, SystemExit):
            return False

        if issubclass(exc_type, LambdaError):
            error = exc_val
        elif issubclass(exc_type, KeyboardInterrupt):
            error = LambdaError("interrupted")
        elif issubclass(exc_type, RecursionError):
            error = EvaluationLimitExceeded("term is nested too deeply, maximum recursion depth exceeded")
        else:
            self.throw(LambdaError("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            return False

        self.throw(error)
        return True
