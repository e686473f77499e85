"""Backend data layer for the toolshelf desktop catalogue.

The package loads the reference catalogue (CSV records) and JSON settings
from an application resource directory, and owns the process-wide log file.
It is UI-agnostic: the desktop shell and the HTTP bridge in ``api/`` call
into :mod:`toolshelf.commands`.
"""
