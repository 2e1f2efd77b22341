"""
Social API application package.

Business logic for the social network backend: accounts, client-token
sessions and the request gates protecting every non-public route.
Infrastructure (database, settings base, errors) lives in ``common``.
"""
