"""
Grocery store API.

Store hierarchy management with subtree-scoped, role-based access control.
"""
