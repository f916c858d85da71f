"""
Store hierarchy feature module.

Stores form a single-parent tree encoded as nested sets, so subtree membership
is a single range comparison on (left, right).
"""
