"""Common components used by the async implementation.

This internal package contains non-I/O code: configuration, match
predicates, query expressions, sorting and line formatting. It should
NOT be imported directly by users.

Important: This package must NEVER import from aio to avoid
circular dependencies.
"""

from .config import (
    TypeMask,
    ListOptions,
    PresentationOptions,
    validate_mask,
)
from .match import (
    MatchMode,
    JoinOperator,
    MatchClause,
    MatchPredicate,
    build_match_predicate,
    render_match_predicate,
    sort_keys_from_meta,
    custom_quote,
)
from .query import (
    FOLDER_MIME_TYPE,
    build_expression,
    join_expression,
    parse_query,
    evaluate,
    matches,
)
from .sorting import SORT_KEYS, register_sort_key, sort_entries
from .render import format_entry, pretty_bytes
from .paths import (
    REMOTE_ROOT_NAME,
    ROOT_ALIAS,
    root_like,
    remote_root_like,
    join_head_path,
    parent_path,
    normalize_head_path,
    is_hidden,
)

__all__ = [
    'TypeMask',
    'ListOptions',
    'PresentationOptions',
    'validate_mask',
    'MatchMode',
    'JoinOperator',
    'MatchClause',
    'MatchPredicate',
    'build_match_predicate',
    'render_match_predicate',
    'sort_keys_from_meta',
    'custom_quote',
    'FOLDER_MIME_TYPE',
    'build_expression',
    'join_expression',
    'parse_query',
    'evaluate',
    'matches',
    'SORT_KEYS',
    'register_sort_key',
    'sort_entries',
    'format_entry',
    'pretty_bytes',
    'REMOTE_ROOT_NAME',
    'ROOT_ALIAS',
    'root_like',
    'remote_root_like',
    'join_head_path',
    'parent_path',
    'normalize_head_path',
    'is_hidden',
]
