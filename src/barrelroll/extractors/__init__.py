"""Export extraction from TypeScript sources."""
