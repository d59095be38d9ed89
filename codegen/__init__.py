"""Source generators: formula folding, accessors and retry wrappers."""
