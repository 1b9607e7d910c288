from __future__ import annotations

from typing import Final

import numpy as np

UNASSIGNED: Final = -1
INDEX_DTYPE: Final = np.intp
COST_DTYPES: Final = (np.float32, np.float64)
ENV_DEBUG: Final = "UNILAP_DEBUG"
