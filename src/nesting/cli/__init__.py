"""Command line interface for sheet nesting."""
