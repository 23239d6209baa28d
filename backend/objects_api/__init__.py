"""
Objects API: generic CRUD controller over paginated object collections.
"""
