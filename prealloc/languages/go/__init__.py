"""Go source discovery and tree-sitter parsing."""
