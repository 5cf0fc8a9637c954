"""Parsing, dispatch and execution of shell lines."""
