"""Command-line entry point for lcserver: runs the socket server, evaluates expressions given as arguments, or starts
the interactive shell. Also uses error handling context manager. Called from the lcserver executable script.
"""

import argparse
import logging

from lcserver.config import ServerConfig
from lcserver.lang.error import ErrorHandler
from lcserver.lang.session import evaluate_expression
from lcserver.lang.shell import Shell
from lcserver.server import serve

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser():
    parser = argparse.ArgumentParser(prog="lcserver", description="head-reducing lambda calculus evaluator")
    parser.add_argument("--log-level", default="INFO", help="logging level (default: INFO)")
    parser.add_argument("--log-file", help="write logs to this file instead of stderr")
    parser.add_argument("--max-steps", type=int, default=ServerConfig.max_steps,
                        help="beta steps allowed per evaluation, 0 for unbounded (default: %(default)s)")
    parser.add_argument("--reduce-spine", action="store_true",
                        help="reduce applications in head position instead of rejecting them")

    commands = parser.add_subparsers(dest="command")

    serve_parser = commands.add_parser("serve", help="serve the evaluate method on a UNIX socket")
    serve_parser.add_argument("--socket", help="socket path (default: $LCSERVER_SOCKET or /var/run/dev-test/sock)")

    eval_parser = commands.add_parser("eval", help="evaluate expressions and print the results")
    eval_parser.add_argument("expressions", nargs="+", help="expressions to evaluate")

    commands.add_parser("shell", help="interactive mode (default)")

    return parser


def main(argv=None):
    """Runs lcserver. Called from lcserver executable script."""
    with ErrorHandler():
        args = build_parser().parse_args(argv)
        config = ServerConfig.from_args(args)

        logging.basicConfig(level=config.log_level, filename=config.log_file, format=LOG_FORMAT)

        if args.command == "serve":
            serve(config)

        elif args.command == "eval":
            reducer = config.reducer()
            for expr in args.expressions:
                print(evaluate_expression(expr, reducer))

        else:
            Shell(config.reducer()).cmdloop()
