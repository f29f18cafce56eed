"""Lexical analysis for the lambda DSL. Turns source text into a lazy sequence of tokens, each tagged with the span of
source it was read from.

```
"\\" | "λ"                    ; lambda
"."  "("  ")"  "="            ; punctuation
"let" | "eval"                ; keywords (only as whole words: `letter` is an identifier)
[a-zA-Z_][a-zA-Z0-9_]*        ; identifier
"\\n"                          ; newline (statement separator)

"//" <char>*                  ; comment, skipped
" " | "\\t" | "\\f" | "\\r"      ; whitespace, skipped
```

Characters that start no token are skipped. Their spans are collected in `Lexer.skipped` so a driver can warn about
them.
"""

from collections import namedtuple
from enum import Enum
import re


Span = namedtuple("Span", ["start", "end"])


class TokenKind(Enum):
    """Token kinds. Values are the names used in error messages."""
    DOT = "dot (.)"
    LAMBDA = "lambda (\\)"
    LPAREN = "left parenthesis '('"
    RPAREN = "right parenthesis ')'"
    LET = "let"
    EVAL = "eval"
    EQUALS = "equals"
    IDENTIFIER = "identifier"
    NEWLINE = "newline"

    def __str__(self):
        return self.value


class Token(namedtuple("Token", ["kind", "value", "span"])):
    """A token: its kind, the source text it was read from, and the span of that text."""
    __slots__ = ()

    def __str__(self):
        if self.kind is TokenKind.IDENTIFIER:
            return f"{self.kind} ({self.value})"
        return str(self.kind)


class Lexer:
    """Lazy tokenizer over one source string. Iterating a Lexer yields Tokens."""
    TOKENS = (
        (TokenKind.NEWLINE,    r"\n"),
        (TokenKind.LAMBDA,     r"\\|λ"),
        (TokenKind.DOT,        r"\."),
        (TokenKind.LPAREN,     r"\("),
        (TokenKind.RPAREN,     r"\)"),
        (TokenKind.EQUALS,     r"="),
        (TokenKind.IDENTIFIER, r"[a-zA-Z_][a-zA-Z0-9_]*"),
    )
    KEYWORDS = {"let": TokenKind.LET, "eval": TokenKind.EVAL}

    IGNORE = re.compile(r"[ \t\f\r]+|//[^\n]*")

    def __init__(self, source):
        self.source = source
        self.tokens = [(kind, re.compile(exp)) for kind, exp in self.TOKENS]
        self.skipped = []  # spans of unrecognized characters

    def __iter__(self):
        data = self.source
        pos = 0

        while pos < len(data):
            match = self.IGNORE.match(data, pos)
            if match:
                pos = match.end()
                continue

            for kind, exp in self.tokens:
                match = exp.match(data, pos)
                if match:
                    break
            else:
                self._skip(pos)
                pos += 1
                continue

            value = match.group()
            if kind is TokenKind.IDENTIFIER:
                kind = self.KEYWORDS.get(value, kind)

            yield Token(kind, value, Span(pos, match.end()))
            pos = match.end()

    def _skip(self, pos):
        """Records pos as unrecognized, merging it with the previous skipped span if adjacent."""
        if self.skipped and self.skipped[-1].end == pos:
            self.skipped[-1] = Span(self.skipped[-1].start, pos + 1)
        else:
            self.skipped.append(Span(pos, pos + 1))


def tokenize(source):
    """Returns a generator of the tokens in source. Unrecognized characters are skipped; iterate a Lexer to
    find out which (`Lexer.skipped`).
    """
    return iter(Lexer(source))
