"""Opcode CPU: a four-register microprocessor simulator.

This package decodes line-oriented instruction text and executes it
against a bank of four 32-bit signed registers (A, B, C, D).

Architecture:
    TEXT -> DECODER -> INSTRUCTION -> EXECUTE -> REGISTER BANK -> SNAPSHOT
              |            |              |             |
         [arity check] [frozen variant] [validate   [A, B, C, D]
                                         then mutate]

Instruction Set:
    SET reg imm | ADD reg imm | ADR dst src | MOV dst src
    INR reg     | DCR reg     | RST

Modules:
    state: RegisterBank holding the four registers
    errors: Exception hierarchy rooted at OpcodeError
    registry: Instruction variants and the frozen InstructionRegistry
    decoder: Decoder turning text into instructions
    cpu: Processor coordinator and single/batch execution
"""

__version__ = "0.1.0"
__author__ = "Opcode CPU Project"

from .state import RegisterBank, REGISTER_NAMES, INT32_MIN, INT32_MAX
from .errors import (
    OpcodeError,
    UnknownRegisterError,
    InvalidSyntaxError,
    UnknownInstructionError,
    EmptyBatchError,
    BatchExecutionError,
)
from .registry import Instruction, InstructionRegistry, get_registry
from .decoder import Decoder, DecodeResult, parse_program
from .cpu import Processor, execute_one, execute_batch, get, get_all, reset

__all__ = [
    "RegisterBank",
    "REGISTER_NAMES",
    "INT32_MIN",
    "INT32_MAX",
    "OpcodeError",
    "UnknownRegisterError",
    "InvalidSyntaxError",
    "UnknownInstructionError",
    "EmptyBatchError",
    "BatchExecutionError",
    "Instruction",
    "InstructionRegistry",
    "get_registry",
    "Decoder",
    "DecodeResult",
    "parse_program",
    "Processor",
    "execute_one",
    "execute_batch",
    "get",
    "get_all",
    "reset",
]
