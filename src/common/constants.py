"""
Shared constants for the project.

This module contains application-wide constants that should have a single source of truth.
"""

# Candidate kinds produced by the description parser
KIND_COLOR = "color"
KIND_SIZE = "size"
KIND_MATERIAL = "material"
KIND_OTHER = "other"

CANDIDATE_KINDS = (KIND_COLOR, KIND_SIZE, KIND_MATERIAL, KIND_OTHER)

# Description dialects, used to pick the color length bound
DIALECT_MARKDOWN = "markdown"
DIALECT_INLINE = "inline"

# Minimum length for substring (partial) color matches
MIN_PARTIAL_MATCH_LENGTH = 3
