"""Common type definitions for the server configuration.

Defines the size units and the primitive types shared across components.
"""

from __future__ import annotations

import os
from typing import Any

# Size units, 1024-based. Every size default is a multiple of one of these.
KB = 1024
MB = KB * 1024
GB = MB * 1024

PathLike = str | os.PathLike[str]

# Raw decoded document, as returned by tomllib
Document = dict[str, Any]
