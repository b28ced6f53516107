import numpy as np

type Scalar = float | int | complex | np.number
type Size = tuple[int, int]
type Array = np.ndarray[tuple[int, int], np.dtype[np.inexact]]
type DTypeLike = np.dtype | type | str
