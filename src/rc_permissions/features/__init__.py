"""Feature modules for rc-permissions.

- database: asyncpg pool and transaction scoping
- principals: local accounts, directory identities and their resolution
- resources: Responsibility Centres
- permissions: access grants and the permission engine
"""
