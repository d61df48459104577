"""Import path, module path and semantic version handling."""
