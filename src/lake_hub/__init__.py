"""
LakeHub - Pipeline plan and domain scope compiler.

Turns user-declared data-source scopes (Jira boards, Trello boards, CircleCI
projects, Zentao projects, ...) into staged collection plans and canonical
domain-layer scopes, and flattens nested tool-layer records before they are
persisted.
"""

__version__ = "0.1.0"
