"""Command-line tools for DegenScore."""
