"""
Object API services.

- objects: query translation, pagination, adapter, controller
- permissions: role strategies and the permission gate
"""
