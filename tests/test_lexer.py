import unittest
from tex2texi.errors import UnbalancedDelimiterError
from tex2texi.lexer import LexerMode, Tokenizer, tokenize
from tex2texi.tokens import Token, TokenKind


class TestTokenizer(unittest.TestCase):
    def kinds(self, tokens):
        return [token.kind for token in tokens]

    def test_simple_directive(self):
        tokens = tokenize(r"\section")
        self.assertEqual(len(tokens), 2)  # DIRECTIVE, EOF
        self.assertEqual(tokens[0].kind, TokenKind.DIRECTIVE)
        self.assertEqual(tokens[0].text, "section")
        self.assertIsNone(tokens[0].bracket_arg)
        self.assertEqual(tokens[0].brace_args, ())
        self.assertEqual(tokens[1].kind, TokenKind.EOF)

    def test_directive_with_arguments(self):
        tokens = tokenize(r"\rSec0[intro]{Scope}")
        self.assertEqual(len(tokens), 2)
        self.assertEqual(tokens[0].text, "rSec0")
        self.assertEqual(tokens[0].bracket_arg, "intro")
        self.assertEqual(tokens[0].brace_args, ("Scope",))

    def test_brace_arguments_across_whitespace(self):
        tokens = tokenize("\\begin{tokentable} {cap}\n{lbl}")
        self.assertEqual(tokens[0].brace_args, ("tokentable", "cap", "lbl"))
        self.assertEqual(tokens[1].kind, TokenKind.EOF)

    def test_whitespace_after_arguments_is_kept(self):
        tokens = tokenize("\\tcode{x}\n\nnext")
        self.assertEqual(tokens[0].brace_args, ("x",))
        self.assertEqual(tokens[1].kind, TokenKind.TEXT)
        self.assertEqual(tokens[1].text, "\n\nnext")

        tokens = tokenize(r"\item  foo")
        self.assertEqual(tokens[0].text, "item")
        self.assertEqual(tokens[1].text, "  foo")

    def test_pipe_argument(self):
        tokens = tokenize(r"\verb|a{b|rest")
        self.assertEqual(tokens[0].text, "verb")
        self.assertEqual(tokens[0].brace_args, ("a{b",))
        self.assertEqual(tokens[1].text, "rest")

    def test_nested_and_escaped_braces(self):
        tokens = tokenize(r"\footnote{a {b} c}")
        self.assertEqual(tokens[0].brace_args, ("a {b} c",))

        tokens = tokenize(r"\tcode{\{x}")
        self.assertEqual(tokens[0].brace_args, (r"\{x",))

    def test_pnum_keeps_following_space(self):
        tokens = tokenize(r"\pnum Text")
        self.assertEqual(self.kinds(tokens), [TokenKind.DIRECTIVE, TokenKind.TEXT, TokenKind.EOF])
        self.assertEqual(tokens[0].text, "pnum")
        self.assertEqual(tokens[1].text, " Text")

    def test_pnum_takes_no_brace_argument(self):
        tokens = tokenize(r"\pnum{x}")
        self.assertEqual(tokens[0].brace_args, ())
        self.assertEqual(tokens[1].kind, TokenKind.LITERAL)
        self.assertEqual(tokens[1].text, "{")

    def test_double_escape_is_line_break(self):
        tokens = tokenize(r"a\\b")
        self.assertEqual([t.text for t in tokens[:-1]], ["a", "\n", "b"])
        self.assertTrue(all(t.kind == TokenKind.TEXT for t in tokens[:-1]))

    def test_literals(self):
        tokens = tokenize(r"{x}@\{")
        expected_kinds = [
            TokenKind.LITERAL,
            TokenKind.TEXT,
            TokenKind.LITERAL,
            TokenKind.LITERAL,
            TokenKind.LITERAL,
            TokenKind.EOF,
        ]
        self.assertEqual(self.kinds(tokens), expected_kinds)
        self.assertEqual([t.text for t in tokens[:-1]], ["{", "x", "}", "@", "{"])

    def test_control_symbol(self):
        tokens = tokenize(r"\$5")
        self.assertEqual(tokens[0].kind, TokenKind.DIRECTIVE)
        self.assertEqual(tokens[0].text, "$")
        self.assertEqual(tokens[1].text, "5")

    def test_only_ascii_whitespace_separates_arguments(self):
        tokens = tokenize("\\tcode\u00a0{x}")
        self.assertEqual(tokens[0].text, "tcode")
        self.assertEqual(tokens[0].brace_args, ())
        self.assertEqual(tokens[1].kind, TokenKind.TEXT)
        self.assertEqual(tokens[1].text, "\u00a0")
        self.assertEqual(tokens[2].kind, TokenKind.LITERAL)

    def test_directive_names_are_ascii(self):
        tokens = tokenize("\\caf\u00e9{x}")
        self.assertEqual(tokens[0].text, "caf")
        self.assertEqual(tokens[0].brace_args, ())
        self.assertEqual(tokens[1].text, "\u00e9")

    def test_debug_token_dump(self):
        with self.assertLogs('tex2texi.lexer', level='DEBUG') as logs:
            tokenize(r"\rSec0[a]{b} x")
        self.assertEqual(logs.output, [
            "DEBUG:tex2texi.lexer:Token(DIRECTIVE, 'rSec0[a]{b}', line 1)",
            "DEBUG:tex2texi.lexer:Token(TEXT, ' x', line 1)",
        ])

    def test_trailing_escape(self):
        tokens = tokenize("a\\")
        self.assertEqual(tokens[1].kind, TokenKind.TEXT)
        self.assertEqual(tokens[1].text, "\\")

    def test_equation(self):
        tokens = tokenize(r"$E=mc^2$ x")
        self.assertEqual(tokens[0].kind, TokenKind.EQUATION)
        self.assertEqual(tokens[0].text, "E=mc^2")
        self.assertEqual(tokens[0].raw, "$E=mc^2$")
        self.assertEqual(tokens[1].text, " x")

    def test_equation_stops_at_end_of_line(self):
        tokens = tokenize("$a+b\nc")
        self.assertEqual(tokens[0].kind, TokenKind.EQUATION)
        self.assertEqual(tokens[0].text, "a+b")
        self.assertEqual(tokens[1].kind, TokenKind.TEXT)
        self.assertEqual(tokens[1].text, "\nc")

    def test_comment(self):
        tokens = tokenize("% This is a comment\nHello")
        self.assertEqual(tokens[0].kind, TokenKind.COMMENT)
        self.assertEqual(tokens[0].text, "% This is a comment\n")
        self.assertEqual(tokens[1].text, "Hello")

    def test_tie(self):
        tokens = tokenize("a~b")
        self.assertEqual(tokens[1].kind, TokenKind.UNBREAKABLE_SPACE)
        self.assertEqual(tokens[1].text, "~")

    def test_ampersand_outside_table_is_text(self):
        tokens = tokenize("a&b")
        self.assertEqual(self.kinds(tokens), [TokenKind.TEXT, TokenKind.TEXT, TokenKind.EOF])
        self.assertEqual(tokens[1].text, "&b")

    def test_table_mode(self):
        tokenizer = Tokenizer(r"\begin{tokentable}a&b\end{tokentable}&")
        tokens = list(tokenizer)
        expected_kinds = [
            TokenKind.DIRECTIVE,
            TokenKind.TEXT,
            TokenKind.UNBREAKABLE_SPACE,
            TokenKind.TEXT,
            TokenKind.DIRECTIVE,
            TokenKind.TEXT,
        ]
        self.assertEqual(self.kinds(tokens), expected_kinds)
        self.assertEqual(tokens[2].text, "&")
        self.assertEqual(tokens[5].text, "&")
        self.assertEqual(tokenizer.mode, LexerMode.NORMAL)

    def test_literal_mode(self):
        tokens = tokenize(r"\begin{codeblock}a~b\end{codeblock}~")
        self.assertEqual(tokens[2].kind, TokenKind.TEXT)
        self.assertEqual(tokens[2].text, "~b")
        self.assertEqual(tokens[4].kind, TokenKind.UNBREAKABLE_SPACE)

    def test_mode_is_flat(self):
        tokenizer = Tokenizer(r"\begin{tokentable}\begin{codeblock}\end{codeblock}&")
        tokens = list(tokenizer)
        self.assertEqual(tokens[-1].kind, TokenKind.TEXT)
        self.assertEqual(tokens[-1].text, "&")
        self.assertEqual(tokenizer.mode, LexerMode.NORMAL)

    def test_unknown_environment_keeps_mode(self):
        tokenizer = Tokenizer(r"\begin{codeblock}\end{itemize}~")
        tokens = list(tokenizer)
        self.assertEqual(tokenizer.mode, LexerMode.LITERAL)
        self.assertEqual(tokens[-1].kind, TokenKind.TEXT)

    def test_unbalanced_arguments(self):
        for source in (r"\section{Intro", r"\rSec0[intro{x}", r"\verb|abc", "\\tcode{a\\"):
            with self.subTest(source=source):
                with self.assertRaises(UnbalancedDelimiterError):
                    tokenize(source)

    def test_unbalanced_error_position(self):
        with self.assertRaises(UnbalancedDelimiterError) as caught:
            tokenize("a\n\n\\section{x {y}", path="doc.tex")
        self.assertEqual(caught.exception.position, ("doc.tex", 3))
        self.assertEqual(caught.exception.open_delim, "{")
        self.assertEqual(caught.exception.close_delim, "}")
        self.assertTrue(str(caught.exception).startswith("doc.tex:3: "))

    def test_line_numbers(self):
        tokens = tokenize("a\n\\b{x}\n\n\\c  \nd")
        self.assertEqual(tokens[1].text, "b")
        self.assertEqual(tokens[1].line, 2)
        self.assertEqual(tokens[3].text, "c")
        self.assertEqual(tokens[3].line, 4)

    def test_tokens_cover_input(self):
        source = (
            "\\documentclass{std} % header\n"
            "\\rSec0[intro]{Scope \\tcode{x}}\n"
            "\\pnum Hello, $a+b$ and~@{}\\{\\}\\\\\n"
            "\\begin{tokentable}{cap}{lbl}\na & b\n\\end{tokentable}\n"
            "\\begin{codeblock}\nint x~y;\n\\end{codeblock}\n"
            "$open\ntrailing \\foo|p| \\bar"
        )
        tokens = tokenize(source)
        self.assertEqual("".join(t.raw for t in tokens), source)

    def test_tokens_are_immutable(self):
        token = tokenize("x")[0]
        with self.assertRaises(AttributeError):
            token.text = "y"

    def test_token_equality(self):
        self.assertEqual(
            Token(TokenKind.TEXT, "a", 1, raw="a"),
            Token(TokenKind.TEXT, "a", 1, raw="b"),
        )
        self.assertNotEqual(Token(TokenKind.TEXT, "a", 1), Token(TokenKind.TEXT, "a", 2))
        self.assertEqual(Token(TokenKind.DIRECTIVE, "x", brace_args=["a"]).first_arg, "a")
        self.assertEqual(Token(TokenKind.DIRECTIVE, "x").first_arg, "")


if __name__ == '__main__':
    unittest.main()
