"""Persistence strategies behind the data-access facade.

The SQL backend lives in ``terangabuild.backends.sql`` and is imported lazily
so fixture mode never loads database drivers.
"""

from terangabuild.backends.base import Backend, BackendError, EntityType
from terangabuild.backends.fixtures import FixtureBackend

__all__ = ["Backend", "BackendError", "EntityType", "FixtureBackend"]
