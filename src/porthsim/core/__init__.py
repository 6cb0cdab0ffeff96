"""Core pipeline: lexing, parsing and simulation."""
