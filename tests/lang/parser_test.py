import unittest

from lambdadsl.lang.instruction import Eval, Let
from lambdadsl.lang.lexer import Span, TokenKind
from lambdadsl.lang.parser import ParseError, ParseFailure, parse, parse_term
from lambdadsl.pure.term import Abstraction, Application, Variable


x, y = Variable("x"), Variable("y")


class ParserTestCase(unittest.TestCase):

    def test_program(self):
        expected = [
            Let("id", Abstraction("x", x)),
            Eval(Application(Variable("id"), Variable("b"))),
        ]
        self.assertEqual(expected, parse("let id = \\x.x\neval (id b)"))

    def test_terms(self):
        cases = {
            "eval x": x,
            "eval \\x.\\y.x": Abstraction("x", Abstraction("y", x)),
            "eval λx.(x x)": Abstraction("x", Application(x, x)),
            "eval (\\x.(x x) \\y.y)": Application(Abstraction("x", Application(x, x)), Abstraction("y", y)),
            "eval ((x y) (y x))": Application(Application(x, y), Application(y, x)),
        }
        for case, expected in cases.items():
            self.assertEqual([Eval(expected)], parse(case), case)

    def test_newlines(self):
        cases = {
            "": 0,
            "\n\n": 0,
            "// nothing here\n": 0,
            "\n\neval a\n\n\neval b\n": 2,
            "let a = b // bind\neval a": 2,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, len(parse(case)), repr(case))

    def test_spans(self):
        let, evaluate = parse("let id = \\x.x\neval (x y)")

        self.assertEqual(Span(0, 13), let.span)
        self.assertEqual(Span(14, 24), evaluate.span)

    def test_unrecognized_characters_skipped(self):
        self.assertEqual([Eval(x)], parse("eval $x"))

    def test_errors(self):
        cases = {
            "eval": ([TokenKind.IDENTIFIER, TokenKind.LAMBDA, TokenKind.LPAREN], None, Span(4, 4)),
            "eval x y": ([TokenKind.NEWLINE], "y", Span(7, 8)),
            "eval \\x.x y": ([TokenKind.NEWLINE], "y", Span(10, 11)),
            "let = x": ([TokenKind.IDENTIFIER], "=", Span(4, 5)),
            "x": ([TokenKind.LET, TokenKind.EVAL], "x", Span(0, 1)),
            "eval (x y z)": ([TokenKind.RPAREN], "z", Span(10, 11)),
            "eval \\(x).x": ([TokenKind.IDENTIFIER], "(", Span(6, 7)),
        }
        for case, (expected, found, span) in cases.items():
            with self.assertRaises(ParseFailure, msg=case) as context:
                parse(case)

            error, = context.exception.errors
            self.assertIsInstance(error, ParseError)
            self.assertEqual(expected, error.expected, case)
            self.assertEqual(found, error.found.value if error.found is not None else None, case)
            self.assertEqual(span, error.span, case)

    def test_error_message(self):
        with self.assertRaises(ParseFailure) as context:
            parse("let x x")

        self.assertEqual("expected equals, found identifier (x)", str(context.exception.errors[0]))
        self.assertEqual("1 syntax error", str(context.exception))

        with self.assertRaises(ParseFailure) as context:
            parse("eval")
        self.assertEqual(
            "expected identifier, lambda (\\), left parenthesis '(', found end of input",
            str(context.exception.errors[0])
        )

    def test_recovery(self):
        with self.assertRaises(ParseFailure) as context:
            parse("eval (x\neval y\nlet x x\neval z")

        errors = context.exception.errors
        self.assertEqual(2, len(errors))
        self.assertEqual(TokenKind.NEWLINE, errors[0].found.kind)
        self.assertEqual([TokenKind.EQUALS], errors[1].expected)
        self.assertEqual("2 syntax errors", str(context.exception))
        self.assertEqual(errors, context.exception.diagnostics())

    def test_deep_nesting(self):
        with self.assertRaises(ParseFailure) as context:
            parse("eval " + "\\a." * 5000 + "a\neval )")

        errors = context.exception.errors
        self.assertEqual(2, len(errors))
        self.assertEqual("term is nested too deeply to parse", str(errors[0]))
        self.assertEqual((0, 1), tuple(errors[0].span))
        self.assertIsInstance(errors[1], ParseError)

    def test_parse_term(self):
        self.assertEqual(Abstraction("y", Variable("y")), parse_term("\\y.y"))
        self.assertEqual(Application(Variable("f"), Variable("x")), parse_term("(f x)"))

        should_fail = ["", "eval x", "x y", "(f x"]
        for case in should_fail:
            with self.assertRaises(ParseError):
                parse_term(case)


if __name__ == '__main__':
    unittest.main()
