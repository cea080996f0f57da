"""Tests for query expression building, parsing and evaluation."""

import pytest

from remotetreelib._common.config import TypeMask
from remotetreelib._common.match import build_match_predicate
from remotetreelib._common.query import (
    FOLDER_MIME_TYPE,
    BoolOp,
    Comparison,
    Membership,
    Not,
    build_expression,
    join_expression,
    matches,
    parse_query,
    tokenize,
)
from remotetreelib.aio import Entry
from remotetreelib.errors import QuerySyntaxError


class TestBuildExpression:
    """Base expressions for listing a directory's children."""

    def test_plain_listing(self):
        assert build_expression("abc", TypeMask.NONE, False) == "'abc' in parents and trashed=false"

    def test_trash_ignores_parent(self):
        assert build_expression("abc", TypeMask.NONE, True) == "trashed=true"
        assert build_expression("abc", TypeMask.IN_TRASH, False) == "trashed=true"

    def test_folder_mask_restricts_mime_type(self):
        expr = build_expression("abc", TypeMask.FOLDER, False)
        assert expr.endswith(f"mimeType = '{FOLDER_MIME_TYPE}'")

    def test_non_folder_mask_still_fetches_folders(self):
        assert "mimeType" not in build_expression("abc", TypeMask.NON_FOLDER, False)

    def test_shared_and_starred(self):
        expr = build_expression("abc", TypeMask.SHARED | TypeMask.STARRED, False)
        assert expr == "'abc' in parents and trashed=false and sharedWithMe=true and starred=true"

    def test_join_parenthesizes_base(self):
        predicate = build_match_predicate({"exact-title": ["x"]}, True)
        assert join_expression("a and b", predicate) == "(a and b) and (title = 'x')"

    def test_join_without_predicate(self):
        assert join_expression("a and b", None) == "a and b"
        assert join_expression("a and b", build_match_predicate({}, True)) == "a and b"


class TestParseQuery:

    def test_tokenize(self):
        kinds = [kind for kind, _, _ in tokenize("not ('a' in parents) and title != 'x'")]
        assert kinds == ["not", "lparen", "string", "in", "word", "rparen",
                         "and", "word", "op", "string"]

    def test_precedence(self):
        node = parse_query("title = 'a' or title = 'b' and starred=true")
        assert isinstance(node, BoolOp) and node.op == "or"
        assert isinstance(node.operands[1], BoolOp) and node.operands[1].op == "and"

    def test_membership_and_not(self):
        node = parse_query("not 'me' in owners")
        assert node == Not(Membership("me", "owners"))

    def test_boolean_values(self):
        assert parse_query("trashed=false") == Comparison("trashed", "=", False)

    def test_escaped_quote(self):
        assert parse_query(r"title = 'it\'s'") == Comparison("title", "=", "it's")

    @pytest.mark.parametrize("text", [
        "",
        "title =",
        "title = 'a' and",
        "(title = 'a'",
        "colour = 'red'",
        "title = 'a' )",
        "title ~ 'a'",
        "'a' in",
    ])
    def test_syntax_errors(self, text):
        with pytest.raises(QuerySyntaxError):
            parse_query(text)


class TestEvaluate:

    @pytest.fixture
    def entry(self):
        return Entry("e1", "Quarterly report.csv", parents=["docs"],
                     owner_names=["alice", "bob"], mime_type="text/csv")

    @pytest.mark.parametrize("query, expected", [
        ("'docs' in parents", True),
        ("'photos' in parents", False),
        ("title = 'Quarterly report.csv'", True),
        ("title contains 'report'", True),
        ("title != 'Quarterly report.csv'", False),
        ("'alice' in owners and not 'eve' in owners", True),
        ("owners contains 'bo'", True),
        ("trashed=false and starred=false", True),
        ("sharedWithMe=true", False),
        ("mimeType = 'text/csv' or mimeType = 'image/png'", True),
        ("('docs' in parents and trashed=false) and (title = 'x')", False),
    ])
    def test_matches(self, entry, query, expected):
        assert matches(query, entry) is expected

    def test_folder_mime_type(self):
        folder = Entry("d1", "docs", is_dir=True)
        assert matches(f"mimeType = '{FOLDER_MIME_TYPE}'", folder)
