"""
xapi - statement authoring helpers

Builds JSON-compatible xAPI statements from loosely-typed input, normalizing
actors, verbs and objects into typed parts, and tells you whether the result
is complete:

    from xapi import Statement

    stmt = Statement("mailto:a@b.com", "http://adlnet.gov/expapi/verbs/completed",
                     "http://example.org/courses/101")
    stmt.add_parent_activity("http://example.org/programs/intro")
    assert stmt.is_valid()
    payload = stmt.to_wire()
"""

__version__ = "0.1.0"

from .schemas import (
    Activity,
    Agent,
    Group,
    Statement,
    StatementRef,
    SubStatement,
    Verb,
)

__all__ = [
    "Activity",
    "Agent",
    "Group",
    "Statement",
    "StatementRef",
    "SubStatement",
    "Verb",
]
