"""Schema lookup, navigation and completion candidates.

Nothing here depends on the parser, so schema handling can be used on plain
Python values as well.
"""

from .completions import CompletionItem, make_schema_completions, schema_completions
from .navigation import navigate_schema, resolve_ref, schema_type
from .registry import SchemaRegistry
