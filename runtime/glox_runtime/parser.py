"""
GLOX Parser

Recursive-descent parser from tokens to statements. Syntax errors are
reported, the parser resynchronizes at the next statement boundary, and
parsing continues so every error in a file is seen in one run.

Grammar (lowest to highest precedence for expressions):
    program     -> declaration* EOF
    declaration -> funDecl | classDecl | varDecl | statement
    statement   -> exprStmt | printStmt | block | ifStmt | whileStmt
                 | forStmt | returnStmt
    assignment  -> ( call "." )? IDENTIFIER "=" assignment | logic_or
    logic_or    -> logic_and ( "oder" logic_and )*
    logic_and   -> equality ( "und" equality )*
    equality    -> comparison ( ( "!=" | "==" ) comparison )*
    comparison  -> term ( ( ">" | ">=" | "<" | "<=" ) term )*
    term        -> factor ( ( "-" | "+" ) factor )*
    factor      -> unary ( ( "/" | "*" ) unary )*
    unary       -> ( "!" | "-" ) unary | call
    call        -> primary ( "(" arguments? ")" | "." IDENTIFIER )*
    primary     -> NUMBER | STRING | "wahr" | "falsch" | "nichts"
                 | "(" expression ")" | "super" "." IDENTIFIER
                 | "dies" | IDENTIFIER
"""

from typing import List, Optional

from .ast import (
    Assign, Binary, Block, Call, Class, Expr, Expression, Function, Get,
    Grouping, If, Literal, Logical, Print, Return, Set, Stmt, Super, This,
    Unary, Var, Variable, While,
)
from .errors import ErrorReporter, ParseError
from .tokens import Token, TokenType


MAX_ARGUMENTS = 255

# Tokens that start a statement; synchronization stops in front of them
STATEMENT_STARTS = {
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
}


class GloxParser:
    """Parse GLOX tokens into statements"""

    def __init__(self, tokens: List[Token], reporter: Optional[ErrorReporter] = None):
        self.tokens = tokens
        self.reporter = reporter or ErrorReporter()
        self.pos = 0

    def parse(self) -> List[Stmt]:
        """Parse all declarations; failed ones are dropped after reporting"""
        statements = []
        while not self._is_at_end():
            stmt = self._declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    # Declarations
    def _declaration(self) -> Optional[Stmt]:
        try:
            if self._match(TokenType.FUN):
                return self._function("Funktion")
            if self._match(TokenType.CLASS):
                return self._class_declaration()
            if self._match(TokenType.VAR):
                return self._var_declaration()
            return self._statement()
        except ParseError:
            self._synchronize()
            return None

    def _class_declaration(self) -> Class:
        name = self._consume(TokenType.IDENTIFIER, "Klassenname erwartet.")

        superclass = None
        if self._match(TokenType.LESS):
            self._consume(TokenType.IDENTIFIER, "Name der Oberklasse erwartet.")
            superclass = Variable(self._previous())

        self._consume(TokenType.LEFT_BRACE, "'{' vor Klassenkörper erwartet.")
        methods = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            methods.append(self._function("Methode"))
        self._consume(TokenType.RIGHT_BRACE, "'}' nach Klassenkörper erwartet.")

        return Class(name, superclass, methods)

    def _function(self, kind: str) -> Function:
        """Parse name, parameters and body; kind is used in messages"""
        name = self._consume(TokenType.IDENTIFIER, f"{kind}sname erwartet.")
        self._consume(TokenType.LEFT_PAREN, f"'(' nach {kind}sname erwartet.")

        params: List[Token] = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGUMENTS:
                    self._error(self._peek(), "Kann nicht mehr als 255 Parameter haben.")
                params.append(self._consume(TokenType.IDENTIFIER, "Parametername erwartet."))
                if not self._match(TokenType.COMMA):
                    break
        self._consume(TokenType.RIGHT_PAREN, "')' nach Parametern erwartet.")

        self._consume(TokenType.LEFT_BRACE, f"'{{' vor {kind}skörper erwartet.")
        body = self._block()
        return Function(name, params, body)

    def _var_declaration(self) -> Var:
        name = self._consume(TokenType.IDENTIFIER, "Variablenname erwartet.")

        initializer = None
        if self._match(TokenType.EQUAL):
            initializer = self._expression()

        self._consume(TokenType.SEMICOLON, "';' nach Variablendeklaration erwartet.")
        return Var(name, initializer)

    # Statements
    def _statement(self) -> Stmt:
        if self._match(TokenType.PRINT):
            return self._print_statement()
        if self._match(TokenType.IF):
            return self._if_statement()
        if self._match(TokenType.LEFT_BRACE):
            return Block(self._block())
        if self._match(TokenType.WHILE):
            return self._while_statement()
        if self._match(TokenType.FOR):
            return self._for_statement()
        if self._match(TokenType.RETURN):
            return self._return_statement()
        return self._expression_statement()

    def _print_statement(self) -> Print:
        value = self._expression()
        self._consume(TokenType.SEMICOLON, "';' nach Wert erwartet.")
        return Print(value)

    def _if_statement(self) -> If:
        self._consume(TokenType.LEFT_PAREN, "'(' nach 'wenn' erwartet.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "')' nach wenn-Bedingung erwartet.")

        then_branch = self._statement()
        else_branch = None
        if self._match(TokenType.ELSE):
            else_branch = self._statement()
        return If(condition, then_branch, else_branch)

    def _while_statement(self) -> While:
        self._consume(TokenType.LEFT_PAREN, "'(' nach 'während' erwartet.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "')' nach Bedingung erwartet.")
        return While(condition, self._statement())

    def _for_statement(self) -> Stmt:
        """
        Desugar 'für' into a while loop:

            { init; während (cond) { body; increment; } }

        The body runs in a fresh block on every pass, so variables declared
        inside it are new bindings each iteration.
        """
        self._consume(TokenType.LEFT_PAREN, "'(' nach 'für' erwartet.")

        if self._match(TokenType.SEMICOLON):
            initializer = None
        elif self._match(TokenType.VAR):
            initializer = self._var_declaration()
        else:
            initializer = self._expression_statement()

        condition = None
        if not self._check(TokenType.SEMICOLON):
            condition = self._expression()
        self._consume(TokenType.SEMICOLON, "';' nach Schleifenbedingung erwartet.")

        increment = None
        if not self._check(TokenType.RIGHT_PAREN):
            increment = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "')' nach für-Klauseln erwartet.")

        body = self._statement()

        if increment is not None:
            body = Block([body, Expression(increment)])

        if condition is None:
            condition = Literal(True)
        body = While(condition, body)

        if initializer is not None:
            body = Block([initializer, body])

        return body

    def _return_statement(self) -> Return:
        keyword = self._previous()
        value = None
        if not self._check(TokenType.SEMICOLON):
            value = self._expression()
        self._consume(TokenType.SEMICOLON, "';' nach Rückgabewert erwartet.")
        return Return(keyword, value)

    def _block(self) -> List[Stmt]:
        statements = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            stmt = self._declaration()
            if stmt is not None:
                statements.append(stmt)
        self._consume(TokenType.RIGHT_BRACE, "'}' nach Block erwartet.")
        return statements

    def _expression_statement(self) -> Expression:
        expr = self._expression()
        self._consume(TokenType.SEMICOLON, "';' nach Ausdruck erwartet.")
        return Expression(expr)

    # Expressions
    def _expression(self) -> Expr:
        return self._assignment()

    def _assignment(self) -> Expr:
        expr = self._or()

        if self._match(TokenType.EQUAL):
            equals = self._previous()
            value = self._assignment()

            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            elif isinstance(expr, Get):
                return Set(expr.object, expr.name, value)

            # Reported, but there is no need to resynchronize
            self._error(equals, "Ungültiges Zuweisungsziel.")

        return expr

    def _or(self) -> Expr:
        expr = self._and()
        while self._match(TokenType.OR):
            operator = self._previous()
            expr = Logical(expr, operator, self._and())
        return expr

    def _and(self) -> Expr:
        expr = self._equality()
        while self._match(TokenType.AND):
            operator = self._previous()
            expr = Logical(expr, operator, self._equality())
        return expr

    def _equality(self) -> Expr:
        expr = self._comparison()
        while self._match(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL):
            operator = self._previous()
            expr = Binary(expr, operator, self._comparison())
        return expr

    def _comparison(self) -> Expr:
        expr = self._term()
        while self._match(TokenType.GREATER, TokenType.GREATER_EQUAL,
                          TokenType.LESS, TokenType.LESS_EQUAL):
            operator = self._previous()
            expr = Binary(expr, operator, self._term())
        return expr

    def _term(self) -> Expr:
        expr = self._factor()
        while self._match(TokenType.MINUS, TokenType.PLUS):
            operator = self._previous()
            expr = Binary(expr, operator, self._factor())
        return expr

    def _factor(self) -> Expr:
        expr = self._unary()
        while self._match(TokenType.SLASH, TokenType.STAR):
            operator = self._previous()
            expr = Binary(expr, operator, self._unary())
        return expr

    def _unary(self) -> Expr:
        if self._match(TokenType.BANG, TokenType.MINUS):
            operator = self._previous()
            return Unary(operator, self._unary())
        return self._call()

    def _call(self) -> Expr:
        expr = self._primary()

        while True:
            if self._match(TokenType.LEFT_PAREN):
                expr = self._finish_call(expr)
            elif self._match(TokenType.DOT):
                name = self._consume(TokenType.IDENTIFIER, "Eigenschaftsname nach '.' erwartet.")
                expr = Get(expr, name)
            else:
                break

        return expr

    def _finish_call(self, callee: Expr) -> Call:
        arguments: List[Expr] = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGUMENTS:
                    self._error(self._peek(), "Kann nicht mehr als 255 Argumente haben.")
                arguments.append(self._expression())
                if not self._match(TokenType.COMMA):
                    break

        paren = self._consume(TokenType.RIGHT_PAREN, "')' nach Argumenten erwartet.")
        return Call(callee, paren, arguments)

    def _primary(self) -> Expr:
        if self._match(TokenType.FALSE):
            return Literal(False)
        if self._match(TokenType.TRUE):
            return Literal(True)
        if self._match(TokenType.NIL):
            return Literal(None)

        if self._match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self._previous().literal)

        if self._match(TokenType.SUPER):
            keyword = self._previous()
            self._consume(TokenType.DOT, "'.' nach 'super' erwartet.")
            method = self._consume(TokenType.IDENTIFIER, "Name der Oberklassenmethode erwartet.")
            return Super(keyword, method)

        if self._match(TokenType.THIS):
            return This(self._previous())

        if self._match(TokenType.IDENTIFIER):
            return Variable(self._previous())

        if self._match(TokenType.LEFT_PAREN):
            expr = self._expression()
            self._consume(TokenType.RIGHT_PAREN, "')' nach Ausdruck erwartet.")
            return Grouping(expr)

        raise self._error(self._peek(), "Ausdruck erwartet.")

    # Parser utilities
    def _match(self, *types: str) -> bool:
        """Consume the current token if it matches any of the given types"""
        for type in types:
            if self._check(type):
                self._advance()
                return True
        return False

    def _check(self, type: str) -> bool:
        if self._is_at_end():
            return False
        return self._peek().type == type

    def _advance(self) -> Token:
        if not self._is_at_end():
            self.pos += 1
        return self._previous()

    def _is_at_end(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _peek(self) -> Token:
        return self.tokens[self.pos]

    def _previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def _consume(self, type: str, message: str) -> Token:
        if self._check(type):
            return self._advance()
        raise self._error(self._peek(), message)

    def _error(self, token: Token, message: str) -> ParseError:
        """Report and return (not raise) a ParseError; callers decide"""
        self.reporter.token_error(token, message)
        return ParseError(message)

    def _synchronize(self):
        """Skip tokens until the start of the next statement"""
        self._advance()

        while not self._is_at_end():
            if self._previous().type == TokenType.SEMICOLON:
                return
            if self._peek().type in STATEMENT_STARTS:
                return
            self._advance()


__all__ = ['GloxParser', 'MAX_ARGUMENTS']
