"""Decoder: text instruction decoder for the opcode CPU.

Architecture:
    Raw instruction -> Decoder -> Instruction variant -> execute(bank)

The decoder only checks the shape of a line: that it is non-empty, that
its opcode is known and that the operand count matches the opcode. Register
names and literals are left for the instruction to check at execution
time, since only the bank knows which registers exist.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from .errors import InvalidSyntaxError, OpcodeError
from .registry import Instruction, InstructionRegistry, get_registry


logger = logging.getLogger(__name__)


@dataclass
class DecodeResult:
    """Result of a non-raising decode.

    Attributes:
        raw_instruction: Original instruction string
        instruction: Decoded instruction, or None if decode failed
        error: The decode failure, or None on success
    """
    raw_instruction: str
    instruction: Optional[Instruction] = None
    error: Optional[OpcodeError] = None

    @property
    def valid(self) -> bool:
        return self.instruction is not None


class Decoder:
    """Turns instruction lines into Instruction variants.

    Attributes:
        registry: Instruction registry used to resolve opcodes
    """

    def __init__(self, registry: Optional[InstructionRegistry] = None):
        self.registry = registry or get_registry()

    @staticmethod
    def tokenize(line: str) -> List[str]:
        """Split a line on whitespace runs, ignoring leading/trailing space."""
        return line.split()

    def decode(self, line: str) -> Instruction:
        """Decode an instruction line.

        Args:
            line: Instruction text (e.g., "SET A 10")

        Returns:
            Immutable Instruction variant for the line

        Raises:
            InvalidSyntaxError: If the line is blank or the operand count is wrong
            UnknownInstructionError: If the opcode is not recognized
        """
        if not isinstance(line, str) or not line.strip():
            raise InvalidSyntaxError(f"Invalid instruction syntax: {line}", token=line)

        tokens = self.tokenize(line)
        opcode, args = tokens[0], tokens[1:]

        # Arity is only checked for known opcodes; unknown ones fall through
        # to the registry so they are reported as unknown, not malformed.
        if self.registry.is_known(opcode) and len(args) != self.registry.arity(opcode):
            raise InvalidSyntaxError(f"Invalid instruction syntax: {line}", token=line)

        instruction = self.registry.create(opcode, args)
        logger.debug("Decoded %r as %s", line, type(instruction).__name__)
        return instruction

    def try_decode(self, line: str) -> DecodeResult:
        """Decode without raising.

        Args:
            line: Instruction text

        Returns:
            DecodeResult carrying either the instruction or the error
        """
        try:
            return DecodeResult(line, instruction=self.decode(line))
        except OpcodeError as e:
            return DecodeResult(line, error=e)


def parse_program(source: str) -> List[str]:
    """Parse program text into instruction lines.

    Handles:
        - Comments (starting with ; or #)
        - Blank lines

    Args:
        source: Program source code, one instruction per line

    Returns:
        List of instruction strings, stripped of comments and whitespace
    """
    instructions = []

    for line in source.split("\n"):
        line = re.sub(r"[;#].*$", "", line).strip()
        if line:
            instructions.append(line)

    return instructions
