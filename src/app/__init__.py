"""Identity store.

Persistence for person and organization identity records on a relational
database, with configuration, logging and schema setup around it.
"""

__version__ = "0.1.0"
