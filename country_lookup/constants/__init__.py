"""This package contains constants used throughout the project.

IMPORTANT: Constants in this folder should be used in at least 2 files to justify
their presence here. If a constant is only used in one file, it should be defined
directly in that file instead of being placed in this constants package.
"""
