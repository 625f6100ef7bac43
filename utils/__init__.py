"""
Shared utilities for the plan alerts CLI.
"""
