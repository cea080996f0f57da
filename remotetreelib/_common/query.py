"""Remote query expressions.

Builds the base expression used to list a directory's children and
provides a small recursive-descent parser and evaluator for the same
query language, so in-memory sources can answer the queries the
traversal engine issues.

Grammar::

    expr       := or_expr
    or_expr    := and_expr ("or" and_expr)*
    and_expr   := unary ("and" unary)*
    unary      := "not" unary | primary
    primary    := "(" expr ")" | STRING "in" FIELD | FIELD op value
    op         := "=" | "!=" | "contains"
    value      := STRING | "true" | "false"
"""

import re
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

from ..errors import QuerySyntaxError
from .config import folders_only, shared, starred, trashed
from .match import MatchPredicate, custom_quote, render_match_predicate

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"

# Query field -> Entry attribute
FIELD_ATTRIBUTES = {
    "title": "name",
    "mimeType": "mime_type",
    "trashed": "trashed",
    "starred": "starred",
    "sharedWithMe": "shared",
    "owners": "owner_names",
    "parents": "parents",
}
COLLECTION_FIELDS = {"owners", "parents"}


def build_expression(parent_id: str, mask: int, in_trash: bool) -> str:
    """Build the base expression listing the children of ``parent_id``.

    Trash listings ignore the parent and return every trashed entry.
    Non-folder filtering is left to the caller: folders must still be
    fetched so they can be descended into.

    Args:
        parent_id: Remote id of the directory being listed
        mask: Type mask of the traversal
        in_trash: Whether the trash is being browsed

    Returns:
        Expression conjoined with `` and ``
    """
    parts = []
    if in_trash or trashed(mask):
        parts.append("trashed=true")
    else:
        parts.append(f"{custom_quote(parent_id)} in parents")
        parts.append("trashed=false")

    if folders_only(mask):
        parts.append(f"mimeType = {custom_quote(FOLDER_MIME_TYPE)}")
    if shared(mask):
        parts.append("sharedWithMe=true")
    if starred(mask):
        parts.append("starred=true")

    return " and ".join(parts)


def join_expression(base: str, predicate: Optional[MatchPredicate]) -> str:
    """Conjoin a base expression with a predicate, parenthesizing the base."""
    extra = render_match_predicate(predicate)
    if not extra:
        return base
    if not base:
        return extra
    return f"({base}) and {extra}"


# Parsing

@dataclass(frozen=True)
class Comparison:
    field: str
    op: str
    value: Union[str, bool]


@dataclass(frozen=True)
class Membership:
    value: str
    field: str


@dataclass(frozen=True)
class Not:
    operand: Any


@dataclass(frozen=True)
class BoolOp:
    op: str
    operands: Tuple[Any, ...]


QueryNode = Union[Comparison, Membership, Not, BoolOp]

_TOKEN_RE = re.compile(
    r"""\s*(?:
        (?P<lparen>\()
      | (?P<rparen>\))
      | (?P<string>'(?:\\.|[^'\\])*')
      | (?P<op>!=|=)
      | (?P<word>[A-Za-z_][A-Za-z0-9_]*)
    )""",
    re.VERBOSE,
)

_KEYWORDS = {"and", "or", "not", "in", "contains", "true", "false"}


def tokenize(text: str) -> List[Tuple[str, str, int]]:
    """Split a query into ``(kind, value, position)`` tokens."""
    tokens = []
    pos = 0
    length = len(text)
    while pos < length:
        if text[pos:].strip() == "":
            break
        match = _TOKEN_RE.match(text, pos)
        if not match:
            raise QuerySyntaxError(f"unexpected character {text[pos:].lstrip()[:1]!r}", pos)
        kind = match.lastgroup
        value = match.group(kind)
        start = match.start(kind)
        if kind == "string":
            value = re.sub(r"\\(.)", r"\1", value[1:-1])
        elif kind == "word" and value in _KEYWORDS:
            kind = value
        tokens.append((kind, value, start))
        pos = match.end()
    return tokens


class _Parser:

    def __init__(self, text: str):
        self.text = text
        self.tokens = tokenize(text)
        self.index = 0

    def peek(self) -> Optional[Tuple[str, str, int]]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def next(self, *kinds: str) -> Tuple[str, str, int]:
        token = self.peek()
        if token is None:
            raise QuerySyntaxError(f"unexpected end of query, expected {' or '.join(kinds)}", len(self.text))
        if kinds and token[0] not in kinds:
            raise QuerySyntaxError(f"expected {' or '.join(kinds)}, got {token[1]!r}", token[2])
        self.index += 1
        return token

    def parse(self) -> QueryNode:
        node = self.parse_or()
        token = self.peek()
        if token is not None:
            raise QuerySyntaxError(f"unexpected {token[1]!r}", token[2])
        return node

    def parse_or(self) -> QueryNode:
        operands = [self.parse_and()]
        while self.peek() is not None and self.peek()[0] == "or":
            self.next("or")
            operands.append(self.parse_and())
        return operands[0] if len(operands) == 1 else BoolOp("or", tuple(operands))

    def parse_and(self) -> QueryNode:
        operands = [self.parse_unary()]
        while self.peek() is not None and self.peek()[0] == "and":
            self.next("and")
            operands.append(self.parse_unary())
        return operands[0] if len(operands) == 1 else BoolOp("and", tuple(operands))

    def parse_unary(self) -> QueryNode:
        token = self.peek()
        if token is not None and token[0] == "not":
            self.next("not")
            return Not(self.parse_unary())
        return self.parse_primary()

    def parse_primary(self) -> QueryNode:
        kind, value, pos = self.next("lparen", "string", "word")
        if kind == "lparen":
            node = self.parse_or()
            self.next("rparen")
            return node
        if kind == "string":
            self.next("in")
            field = self._field(*self.next("word"))
            return Membership(value, field)

        field = self._field(kind, value, pos)
        op = self.next("op", "contains")[1]
        val_kind, val, _ = self.next("string", "true", "false")
        if val_kind == "string":
            return Comparison(field, op, val)
        return Comparison(field, op, val_kind == "true")

    def _field(self, kind: str, value: str, pos: int) -> str:
        if value not in FIELD_ATTRIBUTES:
            raise QuerySyntaxError(f"unknown field {value!r}", pos)
        return value


def parse_query(text: str) -> QueryNode:
    """Parse a query expression into a tree of query nodes.

    Raises:
        QuerySyntaxError: If the text is not a valid expression
    """
    return _Parser(text).parse()


def _field_value(entry: Any, field: str) -> Any:
    return getattr(entry, FIELD_ATTRIBUTES[field])


def evaluate(node: QueryNode, entry: Any) -> bool:
    """Evaluate a parsed query against an entry."""
    if isinstance(node, BoolOp):
        if node.op == "and":
            return all(evaluate(operand, entry) for operand in node.operands)
        return any(evaluate(operand, entry) for operand in node.operands)
    if isinstance(node, Not):
        return not evaluate(node.operand, entry)
    if isinstance(node, Membership):
        actual = _field_value(entry, node.field)
        if node.field in COLLECTION_FIELDS:
            return node.value in (actual or ())
        return actual == node.value

    actual = _field_value(entry, node.field)
    collection = node.field in COLLECTION_FIELDS
    if node.op == "contains":
        if collection:
            return any(str(node.value) in item for item in (actual or ()))
        return str(node.value) in (actual or "")
    if collection:
        equal = node.value in (actual or ())
    else:
        equal = actual == node.value
    return equal if node.op == "=" else not equal


def matches(query: str, entry: Any) -> bool:
    """Parse and evaluate ``query`` against ``entry`` in one step."""
    return evaluate(parse_query(query), entry)
