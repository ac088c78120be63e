"""Netlist reader - simple recursive descent

Reads the line oriented netlist format into a Netlist:

    # comment
    R:R1 n1 gnd R="1 kOhm"
    .DC:DC1
    .Def:TwoR p1 p2
      R:Ra p1 n R=1
    .Def:End
    Eqn:Eqn1 f0="1 GHz" Export="yes"

A leading "." marks an action. Definition bodies may nest. Equation
statements are not part of the netlist; their variable names are collected
in Netlist.equations.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

from netcheck.config import EQUATION_TYPE, SUBCIRCUIT_DEF, SUBCIRCUIT_END
from netcheck.netlist.circuit import Ident, Netlist, Node, Pair, Scalar, Statement, Value, Vector

# Leading number of a scalar value, the rest is its raw scale
_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass
class Token:
    type: str
    value: str
    line: int
    col: int


class Lexer:
    """Simple lexer for the netlist format"""

    NAME_CHARS = "_.-"

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.col = 1
        self.tokens: List[Token] = []
        self._tokenize()

    def _emit(self, type_: str, start: int):
        self.tokens.append(Token(type_, self.text[start : self.pos], self.line, self.col))
        self.col += self.pos - start

    def _tokenize(self):
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]

            # Skip whitespace (but not newlines)
            if ch in " \t\r":
                self.pos += 1
                self.col += 1
                continue

            if ch == "\n":
                self.tokens.append(Token("NL", "\n", self.line, self.col))
                self.pos += 1
                self.line += 1
                self.col = 1
                continue

            # Line comment
            if ch == "#":
                while self.pos < len(text) and text[self.pos] != "\n":
                    self.pos += 1
                continue

            if ch == '"':
                start = self.pos
                self.pos += 1
                while self.pos < len(text) and text[self.pos] not in '"\n':
                    self.pos += 1
                if self.pos >= len(text) or text[self.pos] != '"':
                    raise SyntaxError(f"Unterminated string at line {self.line}")
                self.pos += 1
                self._emit("STRING", start)
                continue

            if ch == ".":
                self.tokens.append(Token("DOT", ".", self.line, self.col))
                self.pos += 1
                self.col += 1
                continue

            if ch == ":":
                self.tokens.append(Token("COLON", ":", self.line, self.col))
                self.pos += 1
                self.col += 1
                continue

            if ch == "=":
                self.tokens.append(Token("EQ", "=", self.line, self.col))
                self.pos += 1
                self.col += 1
                while self.pos < len(text) and text[self.pos] in " \t":
                    self.pos += 1
                    self.col += 1
                if self.pos < len(text) and text[self.pos] == '"':
                    # String value - will be handled in next iteration
                    continue
                # Collect the unquoted value, a vector runs up to its closing bracket
                start = self.pos
                bracket_depth = 0
                while self.pos < len(text):
                    ch = text[self.pos]
                    if ch == "[":
                        bracket_depth += 1
                    elif ch == "]":
                        bracket_depth -= 1
                    elif ch == "\n" or (ch in " \t" and bracket_depth <= 0):
                        break
                    self.pos += 1
                if bracket_depth > 0:
                    raise SyntaxError(f"Unterminated vector at line {self.line}")
                if self.pos > start:
                    self._emit("VALUE", start)
                continue

            if ch.isalnum() or ch == "_":
                start = self.pos
                while self.pos < len(text) and (
                    text[self.pos].isalnum() or text[self.pos] in self.NAME_CHARS
                ):
                    self.pos += 1
                self._emit("NAME", start)
                continue

            raise SyntaxError(f"Unexpected character '{ch}' at line {self.line}")

        self.tokens.append(Token("EOF", "", self.line, self.col))


def parse_scalar(text: str) -> Optional[Scalar]:
    """Scalar for a leading number plus optional raw scale, None if not numeric"""
    text = text.strip()
    m = _NUMBER.match(text)
    if m is None:
        return None
    scale = text[m.end() :].strip()
    return Scalar(float(m.group()), scale=scale or None)


def parse_value(text: str, line: int = 0) -> Value:
    """Convert raw property text into a vector, scalar or identifier value"""
    text = text.strip()
    if text.startswith("["):
        if not text.endswith("]"):
            raise SyntaxError(f"Malformed vector '{text}' at line {line}")
        items = []
        for part in text[1:-1].split(";"):
            item = parse_scalar(part)
            if item is None:
                raise SyntaxError(f"Invalid vector element '{part.strip()}' at line {line}")
            items.append(item)
        return Vector(items)
    scalar = parse_scalar(text)
    if scalar is not None:
        return scalar
    if not text:
        raise SyntaxError(f"Empty value at line {line}")
    return Ident(text)


class Parser:
    """Recursive descent parser for the netlist format"""

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0
        self.netlist = Netlist()
        # Open definitions, innermost last
        self._defs: List[Statement] = []

    def current(self) -> Token:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else self.tokens[-1]

    def peek(self, offset: int = 0) -> Token:
        pos = self.pos + offset
        return self.tokens[pos] if pos < len(self.tokens) else self.tokens[-1]

    def advance(self) -> Token:
        tok = self.current()
        self.pos += 1
        return tok

    def skip_newlines(self):
        while self.current().type == "NL":
            self.advance()

    def expect(self, type_: str) -> Token:
        tok = self.current()
        if tok.type != type_:
            raise SyntaxError(f"Expected {type_}, got {tok.type} '{tok.value}' at line {tok.line}")
        return self.advance()

    def parse(self) -> Netlist:
        self.skip_newlines()
        while self.current().type != "EOF":
            self.statement()
            self.skip_newlines()
        if self._defs:
            open_def = self._defs[-1]
            raise SyntaxError(
                f"Unterminated subcircuit definition `{open_def.instance}' "
                f"starting at line {open_def.line}"
            )
        return self.netlist

    def statement(self):
        first = self.current()
        action = False
        if first.type == "DOT":
            self.advance()
            action = True
        type_ = self.expect("NAME").value
        self.expect("COLON")
        instance = self.expect("NAME").value

        nodes = []
        while self.current().type == "NAME" and self.peek(1).type != "EQ":
            nodes.append(Node(self.advance().value))
        pairs = self.param_list()

        tok = self.current()
        if tok.type not in ("NL", "EOF"):
            raise SyntaxError(f"Unexpected token {tok.type} '{tok.value}' at line {tok.line}")

        if type_ == EQUATION_TYPE and not action:
            self.equation_stmt(pairs)
            return

        if action and type_ == SUBCIRCUIT_DEF:
            if instance == SUBCIRCUIT_END:
                if not self._defs:
                    raise SyntaxError(f"Unexpected end of definition at line {first.line}")
                self._defs.pop()
                return
            definition = Statement(type_, instance, nodes, action=True, line=first.line)
            self.append(definition)
            self._defs.append(definition)
            return

        pairs = [Pair(key, parse_value(text, first.line)) for key, text in pairs]
        self.append(Statement(type_, instance, nodes, pairs, action=action, line=first.line))

    def append(self, stmt: Statement):
        if self._defs:
            self._defs[-1].sub.append(stmt)
        else:
            self.netlist.root.append(stmt)

    def equation_stmt(self, pairs: List[Tuple[str, str]]):
        for key, text in pairs:
            if key != "Export":
                self.netlist.equations[key] = text

    def param_list(self) -> List[Tuple[str, str]]:
        params = []
        while self.current().type == "NAME" and self.peek(1).type == "EQ":
            name = self.advance().value
            self.expect("EQ")
            params.append((name, self.param_value()))
        return params

    def param_value(self) -> str:
        """Raw text of a property value, without quotes"""
        tok = self.current()
        if tok.type == "STRING":
            return self.advance().value[1:-1]
        elif tok.type == "VALUE":
            return self.advance().value
        else:
            raise SyntaxError(f"Expected value, got {tok.type} at line {tok.line}")


class NetlistParser:
    """Parser for the netlist format"""

    def parse(self, text: str) -> Netlist:
        """Parse netlist text"""
        lexer = Lexer(text)
        parser = Parser(lexer.tokens)
        return parser.parse()

    def parse_file(self, filename: Union[str, Path]) -> Netlist:
        """Parse a netlist file, titled after the file name"""
        path = Path(filename)
        netlist = self.parse(path.read_text())
        netlist.title = path.stem
        return netlist


def parse_netlist(source: Union[str, Path]) -> Netlist:
    """Convenience function to parse a netlist from text or a file path"""
    parser = NetlistParser()
    if isinstance(source, Path):
        return parser.parse_file(source)
    elif isinstance(source, str) and "\n" not in source and Path(source).exists():
        return parser.parse_file(Path(source))
    else:
        return parser.parse(source)
