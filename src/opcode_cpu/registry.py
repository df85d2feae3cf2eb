"""InstructionRegistry: the fixed instruction set of the opcode CPU.

This module implements the registry pattern for CPU operations: every
opcode maps to one frozen Instruction variant, and the registry itself is
frozen after initialization so the instruction set cannot grow at runtime.

Registry Opcodes:
    SET reg, imm   Load literal value into register
    ADD reg, imm   Add literal value to register
    ADR dst, src   Add source register to target register
    MOV dst, src   Copy source register to target register
    INR reg        Increment register by 1
    DCR reg        Decrement register by 1
    RST            Reset all registers to 0

Each variant validates its operands against the RegisterBank before
touching it, so a failing instruction never leaves a partial update.
"""

import re
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple, Type

from .errors import InvalidSyntaxError, UnknownInstructionError
from .state import INT32_MAX, INT32_MIN, RegisterBank, wrap_int32


_LITERAL_PATTERN = re.compile(r"[+-]?(?P<digits>[0-9]+)")


@dataclass(frozen=True)
class Instruction:
    """Base for all instruction variants.

    Attributes:
        args: Operand tokens exactly as they appeared in the source line
    """
    args: Tuple[str, ...] = ()

    OPCODE = ""
    ARITY = 0

    def validate(self) -> bool:
        """Check operand count against the opcode's arity."""
        return len(self.args) == self.ARITY and all(
            isinstance(arg, str) for arg in self.args
        )

    def execute(self, bank: RegisterBank) -> None:
        """Apply the instruction to ``bank``.

        Raises:
            InvalidSyntaxError: If the operand count or a literal is invalid
            UnknownRegisterError: If an operand names no register
        """
        if not self.validate():
            raise InvalidSyntaxError(f"Invalid {self.OPCODE} instruction syntax")
        self._apply(bank)

    def _apply(self, bank: RegisterBank) -> None:
        raise NotImplementedError

    def _parse_literal(self, token: str) -> int:
        """Parse a signed decimal literal that fits in 32 bits."""
        match = _LITERAL_PATTERN.fullmatch(token)
        # More than 10 significant digits can never fit in 32 bits
        if match and len(match.group("digits").lstrip("0")) <= 10:
            value = int(token)
            if INT32_MIN <= value <= INT32_MAX:
                return value
        raise InvalidSyntaxError(
            f"Invalid value for {self.OPCODE} instruction: {token}", token=token
        )

    def __str__(self) -> str:
        return " ".join((self.OPCODE,) + tuple(self.args))


# =========================================================================
# Data Movement
# =========================================================================

@dataclass(frozen=True)
class SetInstruction(Instruction):
    """SET reg, imm - Load literal value into register."""
    OPCODE = "SET"
    ARITY = 2

    def _apply(self, bank: RegisterBank) -> None:
        reg = bank.resolve(self.args[0])
        value = self._parse_literal(self.args[1])
        bank.set(reg, value)


@dataclass(frozen=True)
class MovInstruction(Instruction):
    """MOV dst, src - Copy source register into target; source unchanged."""
    OPCODE = "MOV"
    ARITY = 2

    def _apply(self, bank: RegisterBank) -> None:
        dest = bank.resolve(self.args[0])
        src = bank.resolve(self.args[1])
        bank.set(dest, bank.get(src))


# =========================================================================
# Arithmetic
# =========================================================================

@dataclass(frozen=True)
class AddInstruction(Instruction):
    """ADD reg, imm - Add literal value to register (wraps at 32 bits)."""
    OPCODE = "ADD"
    ARITY = 2

    def _apply(self, bank: RegisterBank) -> None:
        reg = bank.resolve(self.args[0])
        value = self._parse_literal(self.args[1])
        bank.set(reg, wrap_int32(bank.get(reg) + value))


@dataclass(frozen=True)
class AdrInstruction(Instruction):
    """ADR dst, src - Add source register to target register.

    Both names are resolved before either value is read, so an unknown
    source leaves the target untouched.
    """
    OPCODE = "ADR"
    ARITY = 2

    def _apply(self, bank: RegisterBank) -> None:
        dest = bank.resolve(self.args[0])
        src = bank.resolve(self.args[1])
        bank.set(dest, wrap_int32(bank.get(dest) + bank.get(src)))


@dataclass(frozen=True)
class InrInstruction(Instruction):
    """INR reg - Increment register by 1."""
    OPCODE = "INR"
    ARITY = 1

    def _apply(self, bank: RegisterBank) -> None:
        reg = bank.resolve(self.args[0])
        bank.set(reg, wrap_int32(bank.get(reg) + 1))


@dataclass(frozen=True)
class DcrInstruction(Instruction):
    """DCR reg - Decrement register by 1."""
    OPCODE = "DCR"
    ARITY = 1

    def _apply(self, bank: RegisterBank) -> None:
        reg = bank.resolve(self.args[0])
        bank.set(reg, wrap_int32(bank.get(reg) - 1))


# =========================================================================
# Special
# =========================================================================

@dataclass(frozen=True)
class RstInstruction(Instruction):
    """RST - Reset all registers to 0."""
    OPCODE = "RST"
    ARITY = 0

    def _apply(self, bank: RegisterBank) -> None:
        bank.reset()


class InstructionRegistry:
    """Frozen registry of instruction variants keyed by opcode.

    Attributes:
        _variants: Dictionary mapping uppercase opcodes to variant classes
        _frozen: Whether the registry is locked against modifications
    """

    def __init__(self):
        """Initialize registry with the full instruction set."""
        self._variants: Dict[str, Type[Instruction]] = {}
        self._frozen = False
        self._register_all_variants()
        self.freeze()

    def _register_all_variants(self) -> None:
        # Data movement
        self.register("SET", SetInstruction)
        self.register("MOV", MovInstruction)

        # Arithmetic
        self.register("ADD", AddInstruction)
        self.register("ADR", AdrInstruction)
        self.register("INR", InrInstruction)
        self.register("DCR", DcrInstruction)

        # Special
        self.register("RST", RstInstruction)

    def register(self, opcode: str, variant: Type[Instruction]) -> None:
        """Register an instruction variant.

        Args:
            opcode: Uppercase opcode (e.g., "SET")
            variant: Instruction subclass implementing the opcode

        Raises:
            RuntimeError: If registry is frozen
            ValueError: If opcode already registered
        """
        if self._frozen:
            raise RuntimeError("Cannot register instructions: registry is frozen")
        if opcode in self._variants:
            raise ValueError(f"Instruction already registered: {opcode}")
        self._variants[opcode] = variant

    def freeze(self) -> None:
        """Freeze the registry to prevent further modifications."""
        self._frozen = True

    def is_frozen(self) -> bool:
        return self._frozen

    def get_valid_opcodes(self) -> set:
        """Get set of all valid opcodes."""
        return set(self._variants.keys())

    def is_known(self, opcode: str) -> bool:
        return opcode.upper() in self._variants

    def arity(self, opcode: str) -> int:
        """Get the operand count required by ``opcode``.

        Raises:
            UnknownInstructionError: If opcode not in registry
        """
        return self._lookup(opcode).ARITY

    def create(self, opcode: str, args: Sequence[str]) -> Instruction:
        """Build the instruction variant for ``opcode``.

        Register names are not checked here; that happens at execution.

        Args:
            opcode: Opcode token (case insensitive)
            args: Operand tokens

        Returns:
            New immutable Instruction

        Raises:
            UnknownInstructionError: If opcode not in registry
        """
        return self._lookup(opcode)(tuple(args))

    def _lookup(self, opcode: str) -> Type[Instruction]:
        variant = self._variants.get(opcode.upper())
        if variant is None:
            raise UnknownInstructionError(opcode)
        return variant


# Singleton registry instance
_registry: Optional[InstructionRegistry] = None


def get_registry() -> InstructionRegistry:
    """Get the singleton instruction registry instance.

    Returns:
        The frozen InstructionRegistry instance
    """
    global _registry
    if _registry is None:
        _registry = InstructionRegistry()
    return _registry
