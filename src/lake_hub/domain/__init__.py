"""LakeHub domain layer.

Pure plan/scope compilation logic. Domain modules may depend on the Python
standard library and pydantic only; they must never import from
`lake_hub.io` or `lake_hub.cli`.

Storage is injected as a collaborator object (see
`lake_hub.domain.scopes.resolver.ScopeStore`) so the dependency direction
always flows inward and tests can pass in doubles.
"""
