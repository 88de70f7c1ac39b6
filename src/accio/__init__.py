"""
Accio - Core Package

A directory-tree filename search utility with sequential and parallel
traversal strategies.
"""

__version__ = "1.0.0"
__author__ = "Accio Team"
