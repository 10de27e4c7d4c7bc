"""Request, response and error types for the scoring pipeline."""
