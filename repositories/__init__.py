"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates all SQL queries for a specific domain aggregate.
Repositories receive raw rows from the database and return domain model objects.
Failures surface as the typed errors in `repositories.errors`.
"""
