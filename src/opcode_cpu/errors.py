"""Exception hierarchy for the opcode CPU.

Every failure raised by the decoder, the instruction variants and the
processor derives from OpcodeError, so callers can catch the whole family
with one clause and still tell the kinds apart:

    UnknownRegisterError     register name outside A-D
    InvalidSyntaxError       malformed line, wrong arity or bad literal
    UnknownInstructionError  opcode not in the instruction set
    EmptyBatchError          batch called with no instructions
    BatchExecutionError      wraps the first failure inside a batch
"""

from typing import Optional


class OpcodeError(Exception):
    """Base class for all opcode CPU errors."""


class UnknownRegisterError(OpcodeError, LookupError):
    """Raised when a register name is not one of the fixed identities."""

    def __init__(self, register):
        self.register = register
        super().__init__(f"Invalid register: {register}")


class InvalidSyntaxError(OpcodeError, ValueError):
    """Raised for malformed lines, wrong operand counts and bad literals.

    Attributes:
        token: The offending literal or line, if one is known
    """

    def __init__(self, message: str, token: Optional[str] = None):
        self.token = token
        super().__init__(message)


class UnknownInstructionError(OpcodeError, ValueError):
    """Raised when the opcode token is not a recognized instruction."""

    def __init__(self, opcode: str):
        self.opcode = opcode
        super().__init__(f"Unknown instruction type: {opcode}")


class EmptyBatchError(OpcodeError, ValueError):
    """Raised when a batch is submitted without any instructions."""

    def __init__(self, message: str = "Instructions list cannot be empty"):
        super().__init__(message)


class BatchExecutionError(OpcodeError):
    """First failure inside a batch.

    Instructions before ``index`` stay committed; nothing is rolled back.

    Attributes:
        index: 0-based position of the failing instruction
        instruction: Literal text of the failing instruction
        cause: The underlying decode or execution error
    """

    def __init__(self, index: int, instruction: str, cause: OpcodeError):
        self.index = index
        self.instruction = instruction
        self.cause = cause
        super().__init__(
            f"Error executing instruction at index {index}: {instruction} - {cause}"
        )

    @property
    def executed_instructions(self) -> int:
        """Number of instructions committed before the failure."""
        return self.index
