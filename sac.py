""" SAC - Simple Arithmetic Calculator """
import argparse
import sys
from enum import Enum
from typing import NamedTuple

_SHOULD_LOG_TOKENS = False
_SHOULD_LOG_STACK = False

PROMPT = 'in~> '
RESULT_MARKER = 'out> '
ERROR_MARKER = 'err> '


class ErrorCode(Enum):
    UNKNOWN_CHARACTER = 'Unknown character'
    UNEXPECTED_TOKEN = 'Unexpected token'
    UNEXPECTED_END = 'Unexpected end of expression'
    UNBALANCED_PARENS = 'Unbalanced parentheses'
    MALFORMED = 'Malformed expression'
    EMPTY_EXPRESSION = 'Empty expression'
    DIVISION_BY_ZERO = 'Division by zero'


class Error(Exception):
    def __init__(self, error_code=None, token=None, message=None):
        self.error_code = error_code
        self.token = token
        self.message = f'{self.__class__.__name__}: {message}'
        super().__init__(self.message)


class LexError(Error):
    def __init__(self, char, column):
        self.char = char
        self.column = column
        super().__init__(
            error_code=ErrorCode.UNKNOWN_CHARACTER,
            message=f'{ErrorCode.UNKNOWN_CHARACTER.value} {char!r} at column {column}',
        )

    def __reduce__(self):
        return self.__class__, (self.char, self.column)


class ParseError(Error):
    pass


class EvalError(Error):
    pass


###############################################################################
#                                                                             #
#  LEXER                                                                      #
#                                                                             #
###############################################################################

class TokenType(Enum):
    PLUS = '+'
    MINUS = '-'
    MUL = '*'
    DIV = '/'
    LPAREN = '('
    RPAREN = ')'
    INTEGER_CONST = 'INTEGER_CONST'

    @property
    def is_operator(self):
        return self in _PRECEDENCE


_PRECEDENCE = {
    TokenType.PLUS: 1,
    TokenType.MINUS: 1,
    TokenType.MUL: 2,
    TokenType.DIV: 2,
}

_DIGITS = '0123456789'


class Token(NamedTuple):
    type: TokenType
    value: object

    def __str__(self):
        """String representation of the class instance.

        Examples:
            Token(INTEGER_CONST, 3)
            Token(PLUS, '+')
        """
        return f'Token({self.type.name}, {self.value!r})'

    def __repr__(self):
        return self.__str__()


class Lexer(object):
    def __init__(self, text):
        # client string input, e.g. "4 + 2 * 3 - 6 / 2"
        self.text = text
        # self.pos is an index into self.text
        self.pos = 0
        self.current_char = self.text[self.pos] if self.text else None

    def error(self):
        raise LexError(self.current_char, self.pos + 1)

    def advance(self):
        """Advance the `pos` pointer and set the `current_char` variable."""
        self.pos += 1
        if self.pos > len(self.text) - 1:
            self.current_char = None  # Indicates end of input
        else:
            self.current_char = self.text[self.pos]

    def skip_spaces(self):
        while self.current_char == ' ':
            self.advance()

    def integer(self):
        """Return a multidigit integer consumed from the input."""
        result = 0
        while self.current_char is not None and self.current_char in _DIGITS:
            result = result * 10 + _DIGITS.index(self.current_char)
            self.advance()
        return Token(TokenType.INTEGER_CONST, result)

    def get_next_token(self):
        """Lexical analyzer (also known as scanner or tokenizer)

        Breaks the input apart into tokens, one token per call.
        Returns None once the input is exhausted.
        """
        while self.current_char is not None:

            if self.current_char == ' ':
                self.skip_spaces()
                continue

            if self.current_char in _DIGITS:
                return self.integer()

            try:
                # get enum member by value, e.g.
                # TokenType('*') --> TokenType.MUL
                token_type = TokenType(self.current_char)
            except ValueError:
                # no enum member with value equal to self.current_char
                self.error()
            else:
                token = Token(token_type, token_type.value)
                self.advance()
                return token

        return None

    def tokenize(self):
        tokens = []
        token = self.get_next_token()
        while token is not None:
            tokens.append(token)
            token = self.get_next_token()
        return tokens


def lex(text):
    tokens = Lexer(text).tokenize()
    if _SHOULD_LOG_TOKENS:
        print('TOKENS', tokens)
    return tokens


###############################################################################
#                                                                             #
#  PARSER                                                                     #
#                                                                             #
###############################################################################

class AST(object):
    pass


class BinOp(AST):
    def __init__(self, left, op, right):
        self.left = left
        self.token = self.op = op
        self.right = right

    def __repr__(self):
        return f'BinOp({self.op.value!r}, {self.left!r}, {self.right!r})'


class Num(AST):
    def __init__(self, token):
        self.token = token
        self.value = token.value

    def __repr__(self):
        return f'Num({self.value})'


class Parser(object):
    """Shunting-yard parser building an AST from a token list.

    Operands (AST nodes) and pending operators live on two explicit
    stacks. An operator folds every stacked operator of equal or higher
    precedence before it is pushed, which makes + - * / left associative.
    A left parenthesis sits on the operator stack as a barrier until the
    matching right parenthesis folds everything above it.
    """

    def __init__(self, tokens):
        self.tokens = tokens
        self.operands = []
        self.operators = []
        # True while a number or '(' is required next
        self.expect_operand = True

    def error(self, error_code, token=None, detail=None):
        message = error_code.value
        if token is not None:
            message = f'{message} -> {token}'
        if detail:
            message = f'{message} ({detail})'
        raise ParseError(error_code=error_code, token=token, message=message)

    def log(self, msg):
        if _SHOULD_LOG_STACK:
            print(msg)

    def log_stacks(self, event):
        if not _SHOULD_LOG_STACK:
            return
        self.log(f'{event:<24} operands: {self.operands} operators: '
                 f'{[token.value for token in self.operators]}')

    def fold(self):
        """Pop one operator and two operands, push the combined BinOp."""
        op = self.operators.pop()
        if len(self.operands) < 2:
            self.error(ErrorCode.MALFORMED, op, 'missing operand')
        right = self.operands.pop()
        left = self.operands.pop()
        self.operands.append(BinOp(left=left, op=op, right=right))
        self.log_stacks(f'fold {op.value}')

    def check_position(self, token, wants_operand):
        if wants_operand != self.expect_operand:
            self.error(ErrorCode.UNEXPECTED_TOKEN, token)

    def push_operator(self, token):
        precedence = _PRECEDENCE[token.type]
        while self.operators and self.operators[-1].type.is_operator:
            if _PRECEDENCE[self.operators[-1].type] < precedence:
                break
            self.fold()
        self.operators.append(token)

    def close_paren(self, token):
        while self.operators:
            if self.operators[-1].type == TokenType.LPAREN:
                self.operators.pop()
                return
            self.fold()
        self.error(ErrorCode.UNBALANCED_PARENS, token, "no matching '('")

    def parse(self):
        if not self.tokens:
            self.error(ErrorCode.EMPTY_EXPRESSION)

        for token in self.tokens:
            if token.type == TokenType.INTEGER_CONST:
                self.check_position(token, wants_operand=True)
                self.operands.append(Num(token))
                self.expect_operand = False
            elif token.type == TokenType.LPAREN:
                self.check_position(token, wants_operand=True)
                self.operators.append(token)
            elif token.type == TokenType.RPAREN:
                self.check_position(token, wants_operand=False)
                self.close_paren(token)
            elif token.type.is_operator:
                self.check_position(token, wants_operand=False)
                self.push_operator(token)
                self.expect_operand = True
            else:
                self.error(ErrorCode.UNEXPECTED_TOKEN, token)
            self.log_stacks(f'after {token.value}')

        if self.expect_operand:
            self.error(ErrorCode.UNEXPECTED_END, self.tokens[-1])

        while self.operators:
            if self.operators[-1].type == TokenType.LPAREN:
                self.error(ErrorCode.UNBALANCED_PARENS, self.operators[-1], "no matching ')'")
            self.fold()

        if len(self.operands) != 1:
            self.error(ErrorCode.MALFORMED, detail=f'{len(self.operands)} operands left')
        return self.operands.pop()


def parse(tokens):
    return Parser(tokens).parse()


###############################################################################
#                                                                             #
#  EVALUATOR                                                                  #
#                                                                             #
###############################################################################

def _divide(left, right):
    # integer division truncating toward zero
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


class Evaluator(object):
    """Compute the integer value of a parsed tree.

    The walk is post-order over an explicit stack rather than recursive,
    so the depth of the tree is not bounded by the recursion limit.
    """

    def __init__(self, tree):
        self.tree = tree

    def apply(self, node, left, right):
        op_type = node.op.type
        if op_type == TokenType.PLUS:
            return left + right
        elif op_type == TokenType.MINUS:
            return left - right
        elif op_type == TokenType.MUL:
            return left * right
        elif op_type == TokenType.DIV:
            if right == 0:
                raise EvalError(
                    error_code=ErrorCode.DIVISION_BY_ZERO,
                    token=node.op,
                    message=f'{ErrorCode.DIVISION_BY_ZERO.value} ({left} / 0)',
                )
            return _divide(left, right)
        raise RuntimeError(f'Unsupported operator {node.op}')

    def evaluate(self):
        values = []
        # (node, children_done) pairs; left is pushed last so it runs first
        pending = [(self.tree, False)]
        while pending:
            node, children_done = pending.pop()
            if isinstance(node, Num):
                values.append(node.value)
            elif children_done:
                right = values.pop()
                left = values.pop()
                values.append(self.apply(node, left, right))
            else:
                pending.append((node, True))
                pending.append((node.right, False))
                pending.append((node.left, False))
        return values.pop()


def evaluate(tree):
    return Evaluator(tree).evaluate()


def calculate(text):
    return evaluate(parse(lex(text)))


###############################################################################
#                                                                             #
#  NOTATION                                                                   #
#                                                                             #
###############################################################################

class NodeVisitor(object):
    """Post-order tree walk over an explicit stack.

    Each visit_<NodeClass> method receives the node followed by the
    already computed results of its children.
    """

    @staticmethod
    def children(node):
        if isinstance(node, BinOp):
            return (node.left, node.right)
        return ()

    def visit(self, node):
        results = []
        pending = [(node, False)]
        while pending:
            node, children_done = pending.pop()
            children = self.children(node)
            if children and not children_done:
                pending.append((node, True))
                pending.extend((child, False) for child in reversed(children))
                continue
            args = results[len(results) - len(children):]
            del results[len(results) - len(children):]
            method_name = 'visit_' + type(node).__name__
            visitor = getattr(self, method_name, self.generic_visit)
            results.append(visitor(node, *args))
        return results.pop()

    def generic_visit(self, node, *args):
        raise Exception('No visit_{} method'.format(type(node).__name__))


class RPN(NodeVisitor):
    def __init__(self, tree):
        self.tree = tree

    def visit_BinOp(self, node, left, right):
        return left + ' ' + right + ' ' + node.op.value

    def visit_Num(self, node):
        return str(node.value)

    def render(self):
        return self.visit(self.tree)


class LispNotation(NodeVisitor):
    def __init__(self, tree):
        self.tree = tree

    def visit_BinOp(self, node, left, right):
        return '(' + node.op.value + ' ' + left + ' ' + right + ')'

    def visit_Num(self, node):
        return str(node.value)

    def render(self):
        return self.visit(self.tree)


NOTATIONS = {
    'rpn': RPN,
    'lisp': LispNotation,
}


###############################################################################
#                                                                             #
#  COMMAND LINE                                                               #
#                                                                             #
###############################################################################

def run_line(text, notation=None):
    """Evaluate one line and print the outcome.

    Returns True on success, False when the line was rejected; errors are
    reported here and never propagate to the caller.
    """
    try:
        tree = parse(lex(text))
        if notation is not None:
            print(NOTATIONS[notation](tree).render())
        result = evaluate(tree)
    except Error as e:
        print(ERROR_MARKER + e.message)
        return False
    print(f'{RESULT_MARKER}{result}')
    return True


def repl(prompt=PROMPT, notation=None, once=False):
    """Read-eval-print loop. Returns the process exit status."""
    while True:
        try:
            text = input(prompt)
        except EOFError:
            break
        # CRLF input keeps its '\r' after input()
        text = text.rstrip('\r\n')
        if not text.strip() and not once:
            continue
        ok = run_line(text, notation)
        if once:
            return 0 if ok else 1
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='SAC - Simple Arithmetic Calculator'
    )
    parser.add_argument(
        '-c', '--command',
        metavar='EXPR',
        help='Evaluate EXPR and exit',
    )
    parser.add_argument(
        '--once',
        help='Read a single line, exit with status 1 on error',
        action='store_true',
    )
    parser.add_argument(
        '--prompt',
        help='Prompt printed before each line',
        default=PROMPT,
    )
    parser.add_argument(
        '--notation',
        help='Print the parsed expression in this notation',
        choices=sorted(NOTATIONS),
    )
    parser.add_argument(
        '--tokens',
        help='Print the tokens of each line',
        action='store_true',
    )
    parser.add_argument(
        '--stack',
        help='Print parser stack information',
        action='store_true',
    )
    args = parser.parse_args(argv)
    global _SHOULD_LOG_TOKENS, _SHOULD_LOG_STACK
    _SHOULD_LOG_TOKENS = args.tokens
    _SHOULD_LOG_STACK = args.stack

    if args.command is not None:
        return 0 if run_line(args.command, args.notation) else 1

    return repl(prompt=args.prompt, notation=args.notation, once=args.once)


if __name__ == '__main__':
    sys.exit(main())
