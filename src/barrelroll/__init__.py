"""barrelroll: generate TypeScript barrel files."""
