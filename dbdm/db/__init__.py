"""Database access layer (DAL) for dbdm.

This sub-package owns the SQLite connection and the record store facade so
that callers only deal with plain dictionaries and condition mappings.
"""
