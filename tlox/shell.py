"""Interactive mode for the tlox interpreter. Uses cmd as backend."""

import cmd
import io

from tlox.errors import ErrorReporter
from tlox.interpreter import Interpreter
from tlox.parser import Parser
from tlox.scanner import Scanner
from tlox.tokens import TokenType


class Shell(cmd.Cmd):
    """tlox interpreter shell.

    One parser and one interpreter live for the whole session: tokens,
    statements, variables and functions all carry over from one input to
    the next. Only the statements parsed from the newest input are run.
    """
    intro = "tlox interpreter\nType 'help' for more information, 'exit' or Ctrl-D to leave."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations
    shell_commands = ("exit", "help")

    def __init__(self, parser=None, interpreter=None, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.parser = parser if parser is not None else Parser()
        if interpreter is None:
            interpreter = Interpreter(reporter=self.parser.reporter)
        self.interpreter = interpreter

        self._tmp_line = ""

    @staticmethod
    def needs_continuation(source):
        """True while a chunk has more '{' or '(' tokens open than closed.

        Brackets inside strings and comments do not count. The chunk is scanned
        by a throwaway scanner whose diagnostics are discarded; the real parser
        reports them once the chunk is complete.
        """
        scanner = Scanner(ErrorReporter(io.StringIO()))
        kinds = [t.type for t in scanner.load(source)]
        return (kinds.count(TokenType.LEFT_BRACE) > kinds.count(TokenType.RIGHT_BRACE)
                or kinds.count(TokenType.LEFT_PAREN) > kinds.count(TokenType.RIGHT_PAREN))

    def onecmd(self, line):
        """Only a bare 'exit' or 'help' is a shell command; any other line is tlox source."""
        word = line.strip()
        if word == "EOF" or (word in self.shell_commands and not self._tmp_line):
            return super().onecmd(word)
        if not word:
            return self.emptyline()
        return self.default(line)

    def default(self, line):
        """Executes arbitrary tlox source."""
        source = self._tmp_line + line + "\n"
        if self.needs_continuation(source):
            self._tmp_line = source
            self.prompt = self.secondary_prompt
            return

        self._tmp_line = ""
        self.prompt = self._tmp_prompt

        statements = self.parser.load(source)
        self.interpreter.interpret(statements)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the tlox interpreter!\n\n"
              "Type statements terminated by ';'. Variables and functions stay defined for\n"
              "the rest of the session. Blocks may span several lines; the prompt changes\n"
              "to '. ' until every '{' and '(' is closed. 'dump;' shows the current scopes\n"
              "and function table.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        self.interpreter.close()
        return True
