"""Recursive-descent parser for the lambda DSL. Consumes tokens from `lang.lexer` and produces the program's
instructions, in order.

```
<program>   ::= NEWLINE* [<stmt> (NEWLINE+ <stmt>)*] NEWLINE*
<stmt>      ::= <let_stmt> | <eval_stmt>
<let_stmt>  ::= "let" IDENTIFIER "=" <λ-term>
<eval_stmt> ::= "eval" <λ-term>
<λ-term>    ::= IDENTIFIER                     ; variable
              | "\\" IDENTIFIER "." <λ-term>    ; abstraction: the body is a single term, `\\x.x y` is not valid
              | "(" <λ-term> <λ-term> ")"      ; application: always parenthesized, always two terms
```

On a syntax error the parser records it, skips to the next newline and carries on, so one run reports every bad
statement. If there were any errors, `parse` raises a ParseFailure holding all of them.
"""

from lambdadsl.lang.error import GenericException
from lambdadsl.lang.instruction import Eval, Let
from lambdadsl.lang.lexer import Lexer, Span, TokenKind
from lambdadsl.pure.term import Abstraction, Application, Variable


class ParseError(GenericException):
    """A token did not match any of the expected token kinds."""

    def __init__(self, expected, found, span):
        found_str = str(found) if found is not None else "end of input"
        super().__init__("expected {}, found {}", (", ".join(str(kind) for kind in expected), found_str), span=span)

        self.expected = list(expected)
        self.found = found


class ParseFailure(GenericException):
    """Every ParseError of one parse."""

    def __init__(self, errors):
        super().__init__(f"{len(errors)} syntax error{'s' if len(errors) != 1 else ''}")
        self.errors = list(errors)

    def diagnostics(self):
        return self.errors


class Parser:
    """Parses one token sequence. end is the length of the source, used to point at the end of input."""
    TERM_START = (TokenKind.IDENTIFIER, TokenKind.LAMBDA, TokenKind.LPAREN)
    STMT_START = (TokenKind.LET, TokenKind.EVAL)

    def __init__(self, tokens, end=None):
        self.tokens = list(tokens)
        self.end = end if end is not None else (self.tokens[-1].span.end if self.tokens else 0)
        self.pos = 0
        self.errors = []

    def peek(self):
        """Current token, or None at end of input."""
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def at(self, *kinds):
        token = self.peek()
        return token is not None and token.kind in kinds

    def expect(self, *kinds):
        """Consumes and returns the current token if it is one of kinds, raises ParseError otherwise."""
        token = self.peek()
        if token is None or token.kind not in kinds:
            raise self.error(kinds)
        self.pos += 1
        return token

    def error(self, expected):
        token = self.peek()
        span = token.span if token is not None else Span(self.end, self.end)
        return ParseError(expected, token, span)

    def parse(self):
        """Returns the list of instructions. Raises ParseFailure if any statement is malformed."""
        instructions = []

        self.skip_newlines()
        while self.peek() is not None:
            start = self.peek().span.start
            try:
                instructions.append(self.statement())
                if self.peek() is not None:
                    self.expect(TokenKind.NEWLINE)
            except ParseError as error:
                self.errors.append(error)
                self.synchronize()
            except RecursionError:
                self.errors.append(GenericException("term is nested too deeply to parse", span=Span(start, start + 1)))
                self.synchronize()
            self.skip_newlines()

        if self.errors:
            raise ParseFailure(self.errors)
        return instructions

    def skip_newlines(self):
        while self.at(TokenKind.NEWLINE):
            self.pos += 1

    def synchronize(self):
        """Skips to the next newline (or the end of input)."""
        while self.peek() is not None and not self.at(TokenKind.NEWLINE):
            self.pos += 1

    def statement(self):
        if self.at(TokenKind.LET):
            start = self.expect(TokenKind.LET).span.start
            name = self.expect(TokenKind.IDENTIFIER).value
            self.expect(TokenKind.EQUALS)
            term = self.term()
            return Let(name, term, Span(start, self.tokens[self.pos - 1].span.end))

        if self.at(TokenKind.EVAL):
            start = self.expect(TokenKind.EVAL).span.start
            term = self.term()
            return Eval(term, Span(start, self.tokens[self.pos - 1].span.end))

        raise self.error(self.STMT_START)

    def term(self):
        token = self.expect(*self.TERM_START)

        if token.kind is TokenKind.IDENTIFIER:
            return Variable(token.value)

        if token.kind is TokenKind.LAMBDA:
            param = self.expect(TokenKind.IDENTIFIER).value
            self.expect(TokenKind.DOT)
            return Abstraction(param, self.term())

        function = self.term()
        argument = self.term()
        self.expect(TokenKind.RPAREN)
        return Application(function, argument)


def parse(source):
    """Parses source text. Unrecognized characters are skipped (see `Lexer.skipped`)."""
    return Parser(Lexer(source), len(source)).parse()


def parse_term(source):
    """Parses source text holding a single λ-term (no statement keyword). Raises ParseError if it is malformed or is
    followed by anything else.
    """
    parser = Parser(Lexer(source), len(source))
    term = parser.term()
    if parser.peek() is not None:
        raise parser.error([TokenKind.NEWLINE])
    return term
