"""Versioned migration files for the mdq index schema.

Each module in this package must expose a single ``MIGRATION`` constant of
type :class:`~Mdq.engine.migration.Migration`. Modules are discovered and
sorted automatically by :func:`~Mdq.engine.migration.load_migrations`; file
names follow the ``vNNN_<description>.py`` convention.
"""
