"""
OAuth scopes requested by the Google Docs tools, grouped the way tools ask for them.
"""

DOCS_READONLY_SCOPE = "https://www.googleapis.com/auth/documents.readonly"
DOCS_WRITE_SCOPE = "https://www.googleapis.com/auth/documents"

SCOPE_GROUPS = {
    "docs_read": [DOCS_READONLY_SCOPE],
    "docs_write": [DOCS_WRITE_SCOPE],
}

# The documents scope covers both groups, so one token serves every tool
SCOPES = [DOCS_WRITE_SCOPE]


def get_scopes_for_group(scope_group: str) -> list[str]:
    """Scopes a tool needs for the given scope group."""
    try:
        return SCOPE_GROUPS[scope_group]
    except KeyError:
        raise ValueError(f"Unknown scope group: {scope_group}") from None
