"""
Staff (employees and managers), login and the identity layer.
"""
