"""
django-datagrid - declarative data grids for Django.

Grids are declared with a small DSL (columns, filters, headers, actions),
compiled per request against the current user, and resolved through an
ordered query pipeline (search, filter, sort, paginate). Per-user view state
is persisted in the session for guests and in the database for
authenticated users.
"""

__version__ = "0.1.0"
