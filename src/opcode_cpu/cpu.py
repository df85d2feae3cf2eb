"""Processor: execution coordinator for the opcode CPU.

This module sequences instruction execution against one RegisterBank:

    TEXT -> DECODE -> INSTRUCTION -> EXECUTE -> BANK -> SNAPSHOT

Batches are a best-effort sequential replay, not a transaction. The first
failing line stops the batch; everything before it stays committed and the
failure reports where it happened.

The module-level functions take the bank explicitly so a caller can drive
any number of independent banks without a Processor.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional

from .decoder import DecodeResult, Decoder
from .errors import BatchExecutionError, EmptyBatchError, OpcodeError
from .state import RegisterBank


logger = logging.getLogger(__name__)

_default_decoder: Optional[Decoder] = None


def _get_decoder() -> Decoder:
    global _default_decoder
    if _default_decoder is None:
        _default_decoder = Decoder()
    return _default_decoder


def execute_one(
    bank: RegisterBank, line: str, decoder: Optional[Decoder] = None
) -> Mapping[str, int]:
    """Decode and execute a single instruction.

    Args:
        bank: Register bank to mutate
        line: Instruction text
        decoder: Decoder to use (shared default if None)

    Returns:
        Snapshot of the bank after execution

    Raises:
        OpcodeError: Decode or execution failure, unchanged
    """
    instruction = (decoder or _get_decoder()).decode(line)
    instruction.execute(bank)
    logger.debug("Executed %s -> %s", instruction, bank)
    return bank.snapshot()


def execute_batch(
    bank: RegisterBank, lines: Iterable[str], decoder: Optional[Decoder] = None
) -> Mapping[str, int]:
    """Execute instructions in order, stopping at the first failure.

    Args:
        bank: Register bank to mutate
        lines: Ordered instruction lines
        decoder: Decoder to use (shared default if None)

    Returns:
        Snapshot of the bank after the last instruction

    Raises:
        EmptyBatchError: If ``lines`` is empty; the bank is not touched
        BatchExecutionError: On the first failing line; earlier lines stay
            committed
    """
    lines = list(lines) if lines is not None else []
    if not lines:
        raise EmptyBatchError()

    for index, line in enumerate(lines):
        try:
            execute_one(bank, line, decoder)
        except OpcodeError as e:
            logger.warning(
                "Batch stopped at index %d (%r) after %d committed: %s",
                index, line, index, e,
            )
            raise BatchExecutionError(index, line, e) from e

    logger.info("Batch of %d instructions completed", len(lines))
    return bank.snapshot()


def get(bank: RegisterBank, name: str) -> int:
    """Read one register; raises UnknownRegisterError for bad names."""
    return bank.get(name)


def get_all(bank: RegisterBank) -> Mapping[str, int]:
    return bank.snapshot()


def reset(bank: RegisterBank) -> Mapping[str, int]:
    """Zero every register and return the resulting snapshot."""
    bank.reset()
    logger.info("Registers reset")
    return bank.snapshot()


class Processor:
    """One simulated processor: a register bank plus a decoder.

    Each Processor exclusively owns its bank. It does no locking; callers
    sharing one instance across threads must serialize access themselves.

    Attributes:
        bank: RegisterBank mutated by this processor
        decoder: Decoder used for instruction text
        instructions_executed: Count of instructions that completed
    """

    def __init__(
        self,
        bank: Optional[RegisterBank] = None,
        decoder: Optional[Decoder] = None,
    ):
        """Initialize the processor.

        Args:
            bank: Register bank to own (fresh all-zero bank if None)
            decoder: Instruction decoder (default registry if None)
        """
        self.bank = bank if bank is not None else RegisterBank()
        self.decoder = decoder or Decoder()
        self.instructions_executed = 0

    def execute(self, line: str) -> Mapping[str, int]:
        """Execute a single instruction.

        Args:
            line: Instruction text (e.g., "SET A 10", "ADR C D")

        Returns:
            Snapshot of all registers after execution
        """
        snapshot = execute_one(self.bank, line, self.decoder)
        self.instructions_executed += 1
        return snapshot

    def execute_batch(self, lines: Iterable[str]) -> Mapping[str, int]:
        """Execute a batch of instructions in order.

        Args:
            lines: Ordered instruction lines

        Returns:
            Snapshot of all registers after the last instruction

        Raises:
            EmptyBatchError: If no instructions were given
            BatchExecutionError: With the failing index and line
        """
        lines = list(lines) if lines is not None else []
        try:
            snapshot = execute_batch(self.bank, lines, self.decoder)
        except BatchExecutionError as e:
            self.instructions_executed += e.executed_instructions
            raise
        self.instructions_executed += len(lines)
        return snapshot

    def check(self, lines: Iterable[str]) -> List[DecodeResult]:
        """Decode every line without executing anything.

        Args:
            lines: Instruction lines

        Returns:
            One DecodeResult per line, in order
        """
        return [self.decoder.try_decode(line) for line in lines]

    def get_register(self, name: str) -> int:
        """Get value of a register.

        Args:
            name: Register name (A-D, case insensitive)

        Returns:
            Register value
        """
        return get(self.bank, name)

    def get_registers(self) -> Mapping[str, int]:
        return get_all(self.bank)

    def dump_registers(self) -> Dict[str, int]:
        """Get all register values as a mutable dictionary."""
        return self.bank.dump_registers()

    def reset(self) -> Mapping[str, int]:
        return reset(self.bank)

    def get_summary(self) -> Dict:
        """Get execution summary.

        Returns:
            Dictionary with final registers and executed instruction count
        """
        return {
            "registers": self.dump_registers(),
            "instructions_executed": self.instructions_executed,
        }
