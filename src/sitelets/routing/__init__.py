"""Routing — pattern compilation, schema reflection and first-match dispatch.

Routes are registered during setup and frozen into an immutable
route table before the first request is dispatched.
"""
