"""Error handling for the lambda DSL. Only GenericExceptions should be encountered during running: if another type of
error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Errors that point into source text carry a span (start and end character offsets into the registered source). The
handler turns the span into a line and column and underlines the offending characters:

```
prog.lambda:2:6: error: expected term, found equals
  eval = x
       ^
```
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a DSL error/warning. `{}` placeholders in
    msg are filled with exprs, bolded.
    """

    def __init__(self, msg, exprs=None, span=None, diagnosis=True, internal=False):
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        super().__init__(msg.format(*exprs))
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets

        self.span = span  # (start, end) into the registered source, or None
        self.diagnosis = diagnosis
        self.internal = internal

    def diagnostics(self):
        """Every error that should be reported for this exception."""
        return [self]


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom DSL errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"
    INFO = "green"

    def __init__(self, fatal=True, stream=None):
        self.fatal = fatal
        self.stream = stream
        self.path = None
        self.source = None

    def register_file(self, path, source):
        """Registers the source text that spans of subsequent errors refer to."""
        self.path = path
        self.source = source

    def remove_file(self):
        """Forgets the registered source. Should be called after a source has been run successfully."""
        self.path = None
        self.source = None

    def locate(self, span):
        """Returns (line, line_num, start_col, end_col) of span in the registered source. Columns are 0-based and
        relative to line, line_num is 1-based.
        """
        start, end = span
        start = min(start, len(self.source))
        line_start = self.source.rfind("\n", 0, start) + 1
        line_end = self.source.find("\n", start)
        if line_end == -1:
            line_end = len(self.source)

        line = self.source[line_start:line_end]
        line_num = self.source.count("\n", 0, line_start) + 1
        end = max(min(end, line_end), start + 1)
        return line, line_num, start - line_start, end - line_start

    @staticmethod
    def diagnose(line, start, end, warning=False):
        """Returns line with [start, end) highlighted and bolded, and underlined on the next line."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        end = max(end, start + 1)
        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    def format(self, error, warning=False):
        """Returns the full message for error: location, severity, message and, where possible, the diagnosis."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR
        severity = "warning: " if warning else "error: "

        error_msg = ""
        location = None
        if error.span is not None and self.source is not None:
            location = self.locate(error.span)
            line, line_num, start, __ = location
            error_msg += colored(f"{self.path}:{line_num}:{start + 1}: ", attrs=["bold"])
        elif self.path is not None:
            error_msg += colored(f"{self.path}: ", attrs=["bold"])

        if error.internal:
            error_msg += colored("[internal] ", color, attrs=["bold"])
        error_msg += colored(severity, color, attrs=["bold"]) + error.msg

        if location is not None and error.diagnosis and not error.internal:
            line, __, start, end = location
            error_msg += "\n" + ErrorHandler.diagnose(line, start, end, warning)

        return error_msg

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        print(self.format(GenericException(*args, **kwargs), warning=True), file=self.stream or sys.stderr)

    def info(self, msg, *exprs):
        """Prints a status message."""
        msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))
        print(colored("info: ", ErrorHandler.INFO, attrs=["bold"]) + msg, file=self.stream or sys.stderr)

    def throw(self, error):
        """Prints every diagnostic of error (a GenericException) and exits if this handler is fatal."""
        for diagnostic in error.diagnostics():
            print(self.format(diagnostic), file=self.stream or sys.stderr)

        if self.fatal:
            sys.exit(1)
        self.remove_file()  # if error occurred, reset source (no need if error is fatal)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded (term is nested too deeply)"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}: {}'", (exc_type.__name__, str(exc_val)), internal=True))
            do_exit = True

        return not do_exit
