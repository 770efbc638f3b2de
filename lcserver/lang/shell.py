"""Handles interactive mode for lcserver. Uses cmd as backend."""

import cmd

from lcserver.lang.error import ErrorHandler
from lcserver.pure.lexical import parse
from lcserver.pure.reducer import HeadReducer


class Shell(cmd.Cmd):
    """Lambda calculus evaluation shell.

    Any line is an expression, except lines starting with 'trace' or 'tree' and the bare words 'help', '?' and 'exit'.
    A variable with one of those names can still be evaluated by parenthesizing it: '( exit )'.
    """
    intro = "Lambda calculus evaluator :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    EXPR_COMMANDS = ("trace", "tree")
    BARE_COMMANDS = ("help", "exit", "EOF")

    def __init__(self, reducer=None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.reducer = reducer if reducer is not None else HeadReducer()
        self.error_handler = ErrorHandler(fatal=False, out=self.stdout)

    def onecmd(self, line):
        name, arg, line = self.parseline(line)
        if not line:
            return False  # an empty line does not repeat the previous one
        if name in self.EXPR_COMMANDS or (name in self.BARE_COMMANDS and not arg):
            return super().onecmd(line)
        return self.default(line)

    def default(self, line):
        """Evaluates an arbitrary expression."""
        with self.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            print(self.reducer.reduce(parse(line)), file=self.stdout)

    def do_trace(self, arg):
        """Prints every head reduction step of an expression."""
        with self.error_handler:
            for step, term in enumerate(self.reducer.steps(parse(arg))):
                print(f"{step}: {term}", file=self.stdout)

    def do_tree(self, arg):
        """Prints the syntax tree of an evaluated expression."""
        with self.error_handler:
            print(self.reducer.reduce(parse(arg)).display(), file=self.stdout)

    def do_help(self, arg):
        print("Tokens are separated by whitespace. 'f ( a b )' applies f to b, '( f a )' applies\n"
              "f to a, and '( x )' is just x. Results are head-reduced: nothing is reduced\n"
              "under an abstraction and arguments are never evaluated.\n\n"
              "  EXPR        evaluate EXPR\n"
              "  trace EXPR  print every reduction step of EXPR\n"
              "  tree EXPR   print the syntax tree of the evaluated EXPR\n"
              "  exit        leave (Ctrl-D works too)\n\n"
              "Lines starting with 'trace' or 'tree', and a bare 'help' or 'exit', are commands.\n"
              "Parenthesize a variable with one of those names to evaluate it: '( exit )'.", file=self.stdout)

    def do_exit(self, arg):
        """Leaves the shell."""
        return True

    def do_EOF(self, arg):
        self.stdout.write("\n")
        return True
