"""Session control for the lambda DSL. Drives the lexer, parser and instructions to run a program, either from a file
or line by line in command-line mode.
"""

import logging

from lambdadsl.lang.error import GenericException
from lambdadsl.lang.lexer import Lexer
from lambdadsl.lang.parser import Parser, parse_term
from lambdadsl.pure.environment import Environment

logger = logging.getLogger(__name__)


class Session:
    """Governs a session: one environment of `let` bindings shared by every instruction added to it."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, source=None, max_steps=None, cmd_line=False, echo=False):
        self.error_handler = error_handler

        self.path = path            # used for error messages
        self.max_steps = max_steps  # reduction step bound per eval, None for unbounded
        self.cmd_line = cmd_line    # whether or not in command-line mode
        self.echo = echo            # whether or not to print results as soon as they are computed

        self.environment = Environment()
        self.to_exec = []  # instructions added but not yet run
        self.results = []  # outputs of run evals, oldest first

        if self.cmd_line:
            self.error_handler.fatal = False

        if source is None and path != Session.SH_FILE:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

        elif source is None and not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

        if source is not None:
            self.add(source)

    @staticmethod
    def preprocess_line(line):
        """Preprocesses a line from the command-line. Returns the line without its comment and whether or not it
        continues on the next line (i.e. it has unclosed parentheses).
        """
        code = line[:line.index("//")] if "//" in line else line
        return code.rstrip(), code.count("(") > code.count(")")

    def add(self, source):
        """Parses source and queues its instructions. Reduction is lazy and is delayed until run is called."""
        self.error_handler.register_file(self.path, source)  # in case error is raised

        lexer = Lexer(source)
        tokens = list(lexer)
        for start, end in lexer.skipped:
            self.error_handler.warn("unrecognized character(s) '{}' skipped", source[start:end], span=(start, end))

        instructions = Parser(tokens, len(source)).parse()

        if not self.cmd_line:
            self.error_handler.info("successfully parsed '{}'", self.path)
        logger.debug("parsed %d instruction(s) from %s", len(instructions), self.path)

        self.to_exec.extend(instructions)
        return instructions

    def run(self):
        """Runs queued instructions in order. Will raise any errors that are encountered; the failing instruction is
        dropped, the ones after it stay queued.
        """
        while self.to_exec:
            instruction = self.to_exec.pop(0)
            result = instruction.process(self.environment, self.max_steps)

            if result is not None:
                self.results.append(result)
                if self.echo:
                    print(result, flush=True)

        self.error_handler.remove_file()  # no error was raised

    def lookup(self, source):
        """Parses source as a single λ-term and returns the names bound to it, up to renaming of bound variables."""
        self.error_handler.register_file(self.path, source)
        names = self.environment.names_of(parse_term(source))
        self.error_handler.remove_file()
        return names

    def pop(self):
        """Removes and returns the oldest result."""
        return self.results.pop(0)

    def clear(self):
        """Drops all queued instructions, e.g. after an error in command-line mode."""
        self.to_exec = []
