"""Reference resolution primitives independent of any output format."""
