"""Internal giac type tags and small result enumerations."""

from enum import Enum, IntEnum


class GenType(IntEnum):
    """Type tag of a giac value; numeric values match the engine's."""
    INT = 0             # machine int
    DOUBLE = 1          # machine double
    ZINT = 2            # arbitrary precision integer
    REAL = 3            # arbitrary precision float
    COMPLEX = 4
    POLYNOM = 5
    IDENT = 6           # identifier, like `pi` or `x`
    VECTOR = 7          # vectors and matrices
    SYMBOLIC = 8        # symbolic expression, like `x^2+a`
    SPOL1 = 9
    FRACTION = 10       # rational fraction
    EXT = 11
    STRING = 12
    FUNCTION = 13
    ROOT = 14
    MODULO = 15         # value in Z/pZ
    USER = 16
    MAP = 17
    EQW = 18
    GROB = 19
    POINTER = 20
    FLOAT = 21          # machine float

    @classmethod
    def _missing_(cls, value):
        # tags added by newer engine releases keep their numeric value
        if isinstance(value, int) and 0 <= value < 256:
            member = int.__new__(cls, value)
            member._name_ = f"UNKNOWN_{value}"
            member._value_ = value
            return member
        return None


class PseudoPrime(Enum):
    """Outcome of a probabilistic primality test."""
    NOT_PRIME = 0
    PSEUDO_PRIME = 1
    PRIME = 2


__all__ = ["GenType", "PseudoPrime"]
