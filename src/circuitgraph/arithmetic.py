"""Fixed-width wraparound arithmetic for node values."""

from dataclasses import dataclass, field

import numpy as np

_WIDTH_DTYPES = {
    8: np.uint8,
    16: np.uint16,
    32: np.uint32,
    64: np.uint64,
}


@dataclass(frozen=True)
class WrappingArithmetic:
    """Unsigned integer arithmetic modulo ``2**bit_width``.

    Results are plain Python ints in ``[0, 2**bit_width)``. Overflow wraps silently, exactly as a
    native unsigned integer of the same width would.
    """

    bit_width: int = 32
    mask: int = field(init=False, repr=False)

    def __post_init__(self):
        """Validate the width and derive the mask from the matching numpy dtype."""
        if self.bit_width not in _WIDTH_DTYPES:
            widths = ", ".join(str(w) for w in _WIDTH_DTYPES)
            raise ValueError(f"Unsupported bit width {self.bit_width}; expected one of {widths}")
        object.__setattr__(self, "mask", int(np.iinfo(_WIDTH_DTYPES[self.bit_width]).max))

    @property
    def dtype(self):
        """The numpy unsigned integer type of this width."""
        return _WIDTH_DTYPES[self.bit_width]

    @property
    def pandas_dtype(self) -> str:
        """Name of the nullable pandas integer dtype of this width."""
        return f"UInt{self.bit_width}"

    def normalize(self, value) -> int:
        """Reduce any integer-like value into the value domain."""
        return int(value) & self.mask

    def add(self, a: int, b: int) -> int:
        """Wraparound sum."""
        return (a + b) & self.mask

    def mul(self, a: int, b: int) -> int:
        """Wraparound product."""
        return (a * b) & self.mask
