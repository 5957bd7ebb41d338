"""Lexer tests: token stream shape and unknown-character errors."""

import pickle

import pytest

from sac import ErrorCode, LexError, Lexer, ParseError, Token, TokenType, lex, parse


def test_single_number():
    assert lex("42") == [Token(TokenType.INTEGER_CONST, 42)]


def test_multidigit_numbers_accumulate():
    tokens = lex("1234 + 007")
    assert tokens == [
        Token(TokenType.INTEGER_CONST, 1234),
        Token(TokenType.PLUS, "+"),
        Token(TokenType.INTEGER_CONST, 7),
    ]


def test_all_symbols():
    types = [token.type for token in lex("(1+2)-3*4/5")]
    assert types == [
        TokenType.LPAREN,
        TokenType.INTEGER_CONST,
        TokenType.PLUS,
        TokenType.INTEGER_CONST,
        TokenType.RPAREN,
        TokenType.MINUS,
        TokenType.INTEGER_CONST,
        TokenType.MUL,
        TokenType.INTEGER_CONST,
        TokenType.DIV,
        TokenType.INTEGER_CONST,
    ]


def test_spaces_produce_no_tokens():
    assert lex("   2   *   3   ") == lex("2*3")


def test_empty_and_blank_input():
    assert lex("") == []
    assert lex("    ") == []


def test_big_integers_do_not_overflow():
    assert lex("99999999999999999999") == [Token(TokenType.INTEGER_CONST, 99999999999999999999)]


def test_unknown_character_is_identified():
    with pytest.raises(LexError) as excinfo:
        lex("3 & 4")
    assert excinfo.value.char == "&"
    assert excinfo.value.column == 3
    assert excinfo.value.error_code == ErrorCode.UNKNOWN_CHARACTER
    assert "'&'" in excinfo.value.message


@pytest.mark.parametrize("text", ["1.5", "x + 1", "2\t+ 3", "1 % 2", "٢"])
def test_rejected_characters(text):
    with pytest.raises(LexError):
        lex(text)


def test_lexing_is_pure():
    text = "(12 + 3) * 4 - 5 / 6"
    assert lex(text) == lex(text)


def test_get_next_token_returns_none_at_end():
    lexer = Lexer("7")
    assert lexer.get_next_token() == Token(TokenType.INTEGER_CONST, 7)
    assert lexer.get_next_token() is None
    assert lexer.get_next_token() is None


def test_operator_property():
    assert TokenType.PLUS.is_operator
    assert TokenType.DIV.is_operator
    assert not TokenType.LPAREN.is_operator
    assert not TokenType.INTEGER_CONST.is_operator


def test_token_str():
    assert str(Token(TokenType.PLUS, "+")) == "Token(PLUS, '+')"


def test_errors_survive_pickling():
    with pytest.raises(LexError) as excinfo:
        lex("3 & 4")
    restored = pickle.loads(pickle.dumps(excinfo.value))
    assert (restored.char, restored.column) == ("&", 3)
    assert restored.error_code == ErrorCode.UNKNOWN_CHARACTER
    assert restored.message == excinfo.value.message

    with pytest.raises(ParseError) as excinfo:
        parse(lex("1 +"))
    restored = pickle.loads(pickle.dumps(excinfo.value))
    assert restored.error_code == ErrorCode.UNEXPECTED_END
    assert restored.message == excinfo.value.message
