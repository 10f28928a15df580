from tlox.errors import ErrorReporter, ScanError
from tlox.scanner import Scanner, scan
from tlox.tokens import TokenType
from tlox.values import EMPTY


def kinds(tokens):
    return [t.type for t in tokens]


def test_scanner_defaults():
    scanner = Scanner()
    assert scanner.tokens == []
    assert scanner.source == ''
    assert scanner.start == 0
    assert scanner.current == 0
    assert scanner.line == 1


def test_single_and_double_character_operators():
    tokens = scan('( ) { } , . - + ; ^ * ** ! != = == < <= > >= /')
    assert kinds(tokens) == [
        TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN, TokenType.LEFT_BRACE,
        TokenType.RIGHT_BRACE, TokenType.COMMA, TokenType.DOT, TokenType.MINUS,
        TokenType.PLUS, TokenType.SEMICOLON, TokenType.EXPONENT, TokenType.STAR,
        TokenType.EXPONENT, TokenType.BANG, TokenType.BANG_EQUAL, TokenType.EQUAL,
        TokenType.EQUAL_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL,
        TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.SLASH,
    ]
    assert tokens[11].lexeme == '**'
    assert all(t.literal is EMPTY for t in tokens)


def test_numbers_select_integer_or_float():
    tokens = scan('12 3.25 7.')
    assert [t.literal for t in tokens] == [12, 3.25, 7, EMPTY]
    assert isinstance(tokens[0].literal, int)
    assert isinstance(tokens[1].literal, float)
    # a dot without a fractional digit is its own token
    assert tokens[3].type == TokenType.DOT


def test_integer_literal_out_of_range_defaults_to_zero(capsys):
    reporter = ErrorReporter()
    tokens = scan('99999999999999999999;', reporter)
    assert tokens[0].literal == 0
    assert tokens[1].type == TokenType.SEMICOLON
    assert reporter.had_error
    assert 'out of range' in capsys.readouterr().err


def test_keywords_and_identifiers():
    tokens = scan('var answer = nil; fun dump2() {} dump;')
    assert kinds(tokens)[:5] == [
        TokenType.VAR, TokenType.IDENTIFIER, TokenType.EQUAL, TokenType.NIL, TokenType.SEMICOLON,
    ]
    assert tokens[1].literal == 'answer'
    assert tokens[6].type == TokenType.IDENTIFIER
    assert tokens[6].lexeme == 'dump2'
    assert tokens[-2].type == TokenType.DUMP


def test_every_reserved_word_is_a_keyword():
    source = 'and class else false for fun if nil or print return super this true var const while dump'
    tokens = scan(source)
    assert TokenType.IDENTIFIER not in kinds(tokens)
    assert len(tokens) == 18


def test_strings_with_either_quote_and_multiple_lines():
    tokens = scan('"double" \'single\' "it\'s" \'two\nlines\' x')
    assert [t.literal for t in tokens[:4]] == ['double', 'single', "it's", 'two\nlines']
    assert tokens[0].lexeme == '"double"'
    assert tokens[4].line == 2


def test_unterminated_string_is_reported_and_scanning_finishes(capsys):
    reporter = ErrorReporter()
    scanner = Scanner(reporter)
    tokens = scanner.load('print 1;\n"never closed\nmore')
    assert kinds(tokens) == [TokenType.PRINT, TokenType.NUMBER, TokenType.SEMICOLON]
    assert scanner.had_error
    assert scanner.is_at_end()
    assert '[line 2] Error: Unterminated string.' in capsys.readouterr().err


def test_comments_are_skipped_but_count_lines():
    tokens = scan('// first\n/* block\ncomment */ a // trailing\nb')
    assert [(t.lexeme, t.line) for t in tokens] == [('a', 3), ('b', 4)]


def test_comments_can_be_kept():
    scanner = Scanner(keep_comments=True)
    tokens = scanner.load('// note\n/* body */')
    assert kinds(tokens) == [TokenType.COMMENT, TokenType.BLOCK_COMMENT]
    assert [t.literal for t in tokens] == [' note', ' body ']


def test_unterminated_block_comment(capsys):
    reporter = ErrorReporter()
    tokens = scan('a /* no end', reporter)
    assert kinds(tokens) == [TokenType.IDENTIFIER]
    assert 'Unterminated block comment.' in capsys.readouterr().err


def test_unknown_characters_are_all_reported(capsys):
    reporter = ErrorReporter()
    tokens = scan('a @ b # c\nd $', reporter)
    assert [t.lexeme for t in tokens] == ['a', 'b', 'c', 'd']
    assert len(reporter.errors) == 3
    assert all(isinstance(e, ScanError) for e in reporter.errors)
    assert [e.line for e in reporter.errors] == [1, 1, 2]
    err = capsys.readouterr().err
    assert "Unexpected character: '@'" in err


def test_newlines_advance_line_numbers():
    tokens = scan('a\n\nb\r\n\tc')
    assert [t.line for t in tokens] == [1, 3, 4]


def test_scanning_is_idempotent():
    source = 'fun add(a, b) {\n  return a + b; // sum\n}\nprint add(1, 2.5) ** 2;\n'
    assert scan(source) == scan(source)


def test_load_accumulates_across_calls():
    scanner = Scanner()
    first = scanner.load('var a = 1;\n')
    second = scanner.load('print a;')
    assert len(first) == 5
    assert len(second) == 3
    assert scanner.tokens == first + second
    assert second[0].line == 2
