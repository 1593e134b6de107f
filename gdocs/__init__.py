"""
Google Docs MCP Integration

Text location, range resolution and style request building for Google Docs, plus the
MCP tools built on them (registered by importing gdocs.docs_tools).
"""
