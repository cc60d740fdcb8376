from typing import TypeAlias
from numpy.typing import NDArray
import numpy as np

# rings with more coordinates than HASH_THRESHOLD * dim get a z-order index
HASH_THRESHOLD = 80
# coordinates are quantized into [0, Z_ORDER_RANGE] before bit interleaving
Z_ORDER_RANGE = 32767
NIL = -1

Vec2d: TypeAlias = tuple[float, float] | NDArray[np.floating]
FlatBuffer: TypeAlias = NDArray[np.floating]
