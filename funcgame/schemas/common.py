from __future__ import annotations

from typing import Any, Union

# Row ids come from the database as integers or uuid strings; keep whichever the client sent.
RowId = Union[int, str]

# Body values go to the store untouched; column types are enforced by the table schema.
Passthrough = Any
