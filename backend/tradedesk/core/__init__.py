"""Core Layer — pure domain rules, no IO, no async, no DB."""
