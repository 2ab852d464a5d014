"""Teacher records service for a school."""
