"""Domain layer: record types, attendance rules, filter specs and errors.

Imports nothing from the application or infrastructure layers.
"""
