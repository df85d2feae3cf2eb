"""RegisterBank: register state for the opcode CPU.

State Components:
    - Registers: A, B, C, D (4 general-purpose 32-bit signed integers)

The bank is the only mutable resource of a simulated processor. It is
created with every register at zero, mutated only by instruction execution
or an explicit reset, and handed out to callers as immutable snapshots.
"""

import logging
from types import MappingProxyType
from typing import Dict, Mapping, Tuple

from .errors import UnknownRegisterError


logger = logging.getLogger(__name__)

# Fixed register identities, in snapshot order
REGISTER_NAMES: Tuple[str, ...] = ("A", "B", "C", "D")

# 32-bit signed integer bounds
INT32_MIN = -(2**31)
INT32_MAX = (2**31) - 1


def wrap_int32(value: int) -> int:
    """Wrap an integer into the signed 32-bit range.

    Args:
        value: Arbitrary Python integer

    Returns:
        Value reduced modulo 2**32 into [INT32_MIN, INT32_MAX]
    """
    return ((value - INT32_MIN) % (2**32)) + INT32_MIN


class RegisterBank:
    """The four registers of one simulated processor.

    Register names are matched case-insensitively and normalized to
    uppercase at lookup time. Any other name raises UnknownRegisterError.
    """

    def __init__(self):
        self._registers: Dict[str, int] = dict.fromkeys(REGISTER_NAMES, 0)

    def resolve(self, name: str) -> str:
        """Map a register name to its canonical identity.

        Args:
            name: Register name (A-D, case insensitive)

        Returns:
            Uppercase register identity

        Raises:
            UnknownRegisterError: If the name is not a register
        """
        if not isinstance(name, str):
            raise UnknownRegisterError(name)
        reg_upper = name.upper()
        if reg_upper not in self._registers:
            raise UnknownRegisterError(name)
        return reg_upper

    def is_valid_register(self, name: str) -> bool:
        """Check whether ``name`` is one of the four registers."""
        return isinstance(name, str) and name.upper() in self._registers

    def get(self, name: str) -> int:
        """Get value of a register.

        Args:
            name: Register name (A-D, case insensitive)

        Returns:
            Register value

        Raises:
            UnknownRegisterError: If register doesn't exist
        """
        return self._registers[self.resolve(name)]

    def set(self, name: str, value: int) -> None:
        """Overwrite a register.

        Args:
            name: Register name (A-D, case insensitive)
            value: New value (wrapped into the 32-bit signed range)

        Raises:
            UnknownRegisterError: If register doesn't exist
        """
        reg = self.resolve(name)
        self._registers[reg] = wrap_int32(value)

    def reset(self) -> None:
        """Set every register back to zero."""
        for reg in self._registers:
            self._registers[reg] = 0
        logger.debug("Register bank reset")

    def snapshot(self) -> Mapping[str, int]:
        """Create an immutable point-in-time copy of all registers.

        Returns:
            Read-only mapping of register names to values
        """
        return MappingProxyType(dict(self._registers))

    def dump_registers(self) -> Dict[str, int]:
        """Get a mutable copy of all register values."""
        return dict(self._registers)

    def validate(self) -> bool:
        """Validate bank integrity.

        Checks:
            - Exactly the four fixed registers exist
            - Every value is an int within 32-bit signed bounds

        Returns:
            True if the bank is valid, False otherwise
        """
        if tuple(self._registers.keys()) != REGISTER_NAMES:
            return False

        for value in self._registers.values():
            if not isinstance(value, int) or isinstance(value, bool):
                return False
            if value < INT32_MIN or value > INT32_MAX:
                return False

        return True

    def __str__(self) -> str:
        return " ".join(f"{k}={v}" for k, v in self._registers.items())

    def __repr__(self) -> str:
        return f"RegisterBank({self})"
