"""Match predicates built from declarative filter options.

A MatchPredicate holds three clause groups (title, mime type, owners).
Groups are conjoined; inside a group, AND clauses are conjoined and OR
clauses disjoined. An empty group places no constraint on its axis.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Mapping, Optional, Sequence

from .config import (
    EXACT_OWNER_KEY,
    EXACT_TITLE_KEY,
    EXCLUDE_OWNER_KEY,
    MATCH_MIME_KEY,
    MATCH_OWNER_KEY,
    SKIP_MIME_KEY,
    SORT_KEY,
)


class MatchMode(Enum):
    """How a clause compares its values against a field."""
    EQUALS = "equals"
    LIKE = "like"
    NOT = "not"
    NOT_IN = "not_in"


class JoinOperator(Enum):
    AND = "and"
    OR = "or"


# Fields whose remote value is a collection rather than a scalar
_COLLECTION_FIELDS = {"owners", "parents"}


def custom_quote(value: str) -> str:
    """Single-quote a value for the remote query language."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


@dataclass
class MatchClause:
    """One comparison applied to a list of values."""

    mode: MatchMode
    values: List[str]
    restrict_to_trash: bool = False
    joiner: JoinOperator = JoinOperator.OR

    def render(self, field_name: str) -> str:
        """Render this clause against ``field_name``.

        Returns:
            Parenthesized expression, or ``""`` when there are no values
        """
        if not self.values:
            return ""
        terms = [_render_term(self.mode, field_name, v) for v in self.values]
        expr = f" {self.joiner.value} ".join(terms)
        if self.restrict_to_trash:
            expr = f"({expr}) and trashed=true"
        return f"({expr})"


def _render_term(mode: MatchMode, field_name: str, value: str) -> str:
    quoted = custom_quote(value)
    collection = field_name in _COLLECTION_FIELDS
    if mode is MatchMode.EQUALS:
        if collection:
            return f"{quoted} in {field_name}"
        return f"{field_name} = {quoted}"
    if mode is MatchMode.LIKE:
        return f"{field_name} contains {quoted}"
    if mode is MatchMode.NOT:
        if collection:
            return f"not {quoted} in {field_name}"
        return f"{field_name} != {quoted}"
    # NOT_IN
    if collection:
        return f"not {quoted} in {field_name}"
    return f"{field_name} != {quoted}"


def render_clause_group(clauses: Sequence[MatchClause], field_name: str) -> str:
    """Combine one group's clauses, each by its own join operator."""
    conjuncts = []
    disjuncts = []
    for clause in clauses:
        rendered = clause.render(field_name)
        if not rendered:
            continue
        if clause.joiner is JoinOperator.AND:
            conjuncts.append(rendered)
        else:
            disjuncts.append(rendered)

    if len(disjuncts) > 1:
        conjuncts.append("(" + " or ".join(disjuncts) + ")")
    elif disjuncts:
        conjuncts.append(disjuncts[0])
    return " and ".join(conjuncts)


@dataclass
class MatchPredicate:
    """Compound boolean query over titles, mime types and owners."""

    title_clauses: List[MatchClause] = field(default_factory=list)
    mime_clauses: List[MatchClause] = field(default_factory=list)
    owner_clauses: List[MatchClause] = field(default_factory=list)
    in_trash: bool = False
    dir_path: str = "/"

    def is_empty(self) -> bool:
        return not (self.title_clauses or self.mime_clauses or self.owner_clauses)

    def render(self) -> str:
        return render_match_predicate(self)

    def __str__(self) -> str:
        return self.render()


def render_match_predicate(predicate: Optional[MatchPredicate]) -> str:
    """Turn a predicate into one boolean query-language expression.

    Args:
        predicate: Predicate to render, may be None

    Returns:
        The expression, or ``""`` if the predicate constrains nothing
    """
    if predicate is None:
        return ""
    groups = [
        render_clause_group(predicate.title_clauses, "title"),
        render_clause_group(predicate.mime_clauses, "mimeType"),
        render_clause_group(predicate.owner_clauses, "owners"),
    ]
    return " and ".join(g for g in groups if g)


def build_match_predicate(
    meta: Optional[Mapping[str, List[str]]],
    exact_match: bool,
    in_trash: bool = False,
    dir_path: str = "/",
) -> MatchPredicate:
    """Build a MatchPredicate from a generic option map.

    Each recognized key present in ``meta`` appends exactly one clause to
    its group; absent keys leave that axis unconstrained.

    Args:
        meta: Option map, e.g. ``{"skip-mime": ["image/png"]}``
        exact_match: Title clauses use EQUALS when True, LIKE otherwise
        in_trash: Restrict title and mime clauses to trashed entries
        dir_path: Directory the predicate is evaluated under

    Returns:
        The compound predicate
    """
    predicate = MatchPredicate(in_trash=in_trash, dir_path=dir_path)
    if not meta:
        return predicate

    if SKIP_MIME_KEY in meta:
        predicate.mime_clauses.append(MatchClause(
            MatchMode.NOT, list(meta[SKIP_MIME_KEY]), in_trash, JoinOperator.AND))
    if MATCH_MIME_KEY in meta:
        predicate.mime_clauses.append(MatchClause(
            MatchMode.EQUALS, list(meta[MATCH_MIME_KEY]), in_trash, JoinOperator.OR))
    if EXACT_TITLE_KEY in meta:
        mode = MatchMode.EQUALS if exact_match else MatchMode.LIKE
        predicate.title_clauses.append(MatchClause(
            mode, list(meta[EXACT_TITLE_KEY]), in_trash, JoinOperator.OR))
    if EXACT_OWNER_KEY in meta:
        predicate.owner_clauses.append(MatchClause(
            MatchMode.EQUALS, list(meta[EXACT_OWNER_KEY]), joiner=JoinOperator.OR))
    if MATCH_OWNER_KEY in meta:
        predicate.owner_clauses.append(MatchClause(
            MatchMode.LIKE, list(meta[MATCH_OWNER_KEY]), joiner=JoinOperator.OR))
    if EXCLUDE_OWNER_KEY in meta:
        predicate.owner_clauses.append(MatchClause(
            MatchMode.NOT_IN, list(meta[EXCLUDE_OWNER_KEY]), joiner=JoinOperator.AND))

    return predicate


def sort_keys_from_meta(meta: Optional[Mapping[str, List[str]]]) -> List[str]:
    """Extract the ordered sort keys from an option map.

    Values are comma split and whitespace trimmed, so both
    ``["name, size"]`` and ``["name", "size"]`` give ``["name", "size"]``.
    """
    if not meta or SORT_KEY not in meta:
        return []
    keys: List[str] = []
    for attr in meta[SORT_KEY]:
        for fragment in attr.split(","):
            fragment = fragment.strip()
            if fragment:
                keys.append(fragment)
    return keys
