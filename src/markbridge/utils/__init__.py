#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markbridge/utils/__init__.py
"""Utility modules for markbridge."""
