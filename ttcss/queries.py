"""
Tree-sitter query definitions shared by the JavaScript and TypeScript grammars.
"""

from __future__ import annotations

QUERIES = {
    # css`...` parses as a call whose arguments are a template string.
    # Member-expression tags (styled.div`...`) do not match.
    "tagged_templates": """
    (call_expression
      function: (identifier) @tag
      arguments: (template_string) @quasi) @tagged_template
    """,
}
