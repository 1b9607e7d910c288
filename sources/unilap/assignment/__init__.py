"""
This package implements modules that assign rows to columns of a cost matrix,
e.g. tracklets to detections, where pairings at or above a cost threshold are
forbidden and rows or columns may remain unmatched.
"""

from __future__ import annotations

from ._base import *
from ._crouse import *
from ._jonker import *
from ._utils import *
