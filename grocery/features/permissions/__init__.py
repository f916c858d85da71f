"""
Permission management feature module.

Implements role-based access control combined with store-subtree containment.
"""
