"""Helper methods for tmx and downstream tmx test suites."""
