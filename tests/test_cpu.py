"""Tests for the Processor coordinator and module-level execution API."""

import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from opcode_cpu import (
    BatchExecutionError,
    EmptyBatchError,
    InvalidSyntaxError,
    OpcodeError,
    Processor,
    RegisterBank,
    UnknownInstructionError,
    UnknownRegisterError,
    execute_batch,
    execute_one,
    get,
    get_all,
    reset,
)


ZEROED = {"A": 0, "B": 0, "C": 0, "D": 0}


@pytest.fixture
def bank():
    return RegisterBank()


@pytest.fixture
def cpu():
    return Processor()


class TestExecuteOne:
    """Single instruction execution."""

    def test_returns_snapshot(self, bank):
        snapshot = execute_one(bank, "SET A 10")
        assert dict(snapshot) == {"A": 10, "B": 0, "C": 0, "D": 0}

    def test_round_trip(self, bank):
        """SET A 10, ADR B A, then B reads 10."""
        execute_one(bank, "SET A 10")
        execute_one(bank, "ADR B A")
        assert get(bank, "B") == 10

    def test_errors_propagate_unchanged(self, bank):
        with pytest.raises(UnknownInstructionError):
            execute_one(bank, "XXX B 20")
        with pytest.raises(InvalidSyntaxError):
            execute_one(bank, "RST A")
        with pytest.raises(UnknownRegisterError):
            execute_one(bank, "INR X")
        assert bank.dump_registers() == ZEROED

    def test_invalid_literal_leaves_register(self, bank):
        execute_one(bank, "SET A 3")
        with pytest.raises(InvalidSyntaxError):
            execute_one(bank, "SET A not_a_number")
        assert get(bank, "A") == 3


class TestExecuteBatch:
    """Batch execution semantics."""

    def test_success(self, bank):
        snapshot = execute_batch(bank, ["SET A 10", "SET B 20", "ADR A B"])
        assert dict(snapshot) == {"A": 30, "B": 20, "C": 0, "D": 0}

    def test_failure_reports_index_and_line(self, bank):
        with pytest.raises(BatchExecutionError) as exc_info:
            execute_batch(bank, ["SET A 10", "XXX B 20"])
        error = exc_info.value
        assert error.index == 1
        assert error.instruction == "XXX B 20"
        assert error.executed_instructions == 1
        assert isinstance(error.cause, UnknownInstructionError)
        assert error.__cause__ is error.cause
        assert str(error) == (
            "Error executing instruction at index 1: XXX B 20 - "
            "Unknown instruction type: XXX"
        )

    def test_failure_keeps_committed_work(self, bank):
        """No rollback: A stays 10 after the batch fails."""
        with pytest.raises(BatchExecutionError):
            execute_batch(bank, ["SET A 10", "XXX B 20", "SET C 5"])
        assert get(bank, "A") == 10
        assert get(bank, "B") == 0
        assert get(bank, "C") == 0

    def test_failure_at_first_line(self, bank):
        with pytest.raises(BatchExecutionError) as exc_info:
            execute_batch(bank, ["INR Z", "SET A 1"])
        assert exc_info.value.index == 0
        assert isinstance(exc_info.value.cause, UnknownRegisterError)
        assert bank.dump_registers() == ZEROED

    def test_failure_message_embeds_cause(self, bank):
        with pytest.raises(BatchExecutionError, match="Invalid value for SET instruction: x"):
            execute_batch(bank, ["SET A x"])

    def test_empty_batch(self, bank):
        with pytest.raises(EmptyBatchError, match="Instructions list cannot be empty"):
            execute_batch(bank, [])
        assert bank.dump_registers() == ZEROED

    def test_none_batch(self, bank):
        with pytest.raises(EmptyBatchError):
            execute_batch(bank, None)

    def test_empty_batch_is_not_batch_failure(self, bank):
        with pytest.raises(EmptyBatchError) as exc_info:
            execute_batch(bank, [])
        assert not isinstance(exc_info.value, BatchExecutionError)

    def test_accepts_generator(self, bank):
        snapshot = execute_batch(bank, (line for line in ["INR A", "INR A"]))
        assert snapshot["A"] == 2

    def test_sequential_dependency(self, bank):
        snapshot = execute_batch(bank, ["SET A 1", "MOV B A", "ADR B B", "MOV C B", "DCR C"])
        assert dict(snapshot) == {"A": 1, "B": 2, "C": 1, "D": 0}

    def test_failure_logged(self, bank, caplog):
        with caplog.at_level(logging.WARNING, logger="opcode_cpu.cpu"):
            with pytest.raises(BatchExecutionError):
                execute_batch(bank, ["SET A 10", "XXX B 20"])
        assert "Batch stopped at index 1" in caplog.text


class TestModuleAccessors:
    """get/get_all/reset helpers."""

    def test_get_unknown(self, bank):
        with pytest.raises(UnknownRegisterError):
            get(bank, "X")
        assert bank.dump_registers() == ZEROED

    def test_get_all(self, bank):
        bank.set("D", 4)
        assert dict(get_all(bank)) == {"A": 0, "B": 0, "C": 0, "D": 4}

    def test_reset(self, bank):
        execute_batch(bank, ["SET A 1", "SET B 2", "SET C 3", "SET D 4"])
        assert dict(reset(bank)) == ZEROED


class TestProcessor:
    """Processor owns one bank and counts executed instructions."""

    def test_execute(self, cpu):
        snapshot = cpu.execute("SET A 10")
        assert snapshot["A"] == 10
        assert cpu.get_register("a") == 10
        assert cpu.instructions_executed == 1

    def test_execute_batch(self, cpu):
        cpu.execute_batch(["SET A 10", "SET B 20", "ADR A B"])
        assert cpu.dump_registers() == {"A": 30, "B": 20, "C": 0, "D": 0}
        assert cpu.instructions_executed == 3

    def test_failed_batch_counts_committed(self, cpu):
        with pytest.raises(BatchExecutionError):
            cpu.execute_batch(["SET A 10", "XXX B 20"])
        assert cpu.instructions_executed == 1
        assert cpu.get_register("A") == 10

    def test_failed_single_not_counted(self, cpu):
        with pytest.raises(OpcodeError):
            cpu.execute("INR X")
        assert cpu.instructions_executed == 0

    def test_reset(self, cpu):
        cpu.execute("SET B 7")
        assert dict(cpu.reset()) == ZEROED

    def test_rst_instruction(self, cpu):
        cpu.execute_batch(["SET A 1", "SET D 9", "RST"])
        assert dict(cpu.get_registers()) == ZEROED

    def test_processors_are_independent(self):
        first = Processor()
        second = Processor()
        first.execute("SET A 5")
        assert second.get_register("A") == 0

    def test_uses_given_bank(self, bank):
        cpu = Processor(bank=bank)
        cpu.execute("SET C 3")
        assert bank.get("C") == 3

    def test_check_does_not_execute(self, cpu):
        results = cpu.check(["SET A 10", "XXX B 20", "RST A"])
        assert [r.valid for r in results] == [True, False, False]
        assert isinstance(results[1].error, UnknownInstructionError)
        assert isinstance(results[2].error, InvalidSyntaxError)
        assert cpu.dump_registers() == ZEROED

    def test_summary(self, cpu):
        cpu.execute_batch(["SET A 10", "INR A"])
        summary = cpu.get_summary()
        assert summary["registers"] == {"A": 11, "B": 0, "C": 0, "D": 0}
        assert summary["instructions_executed"] == 2
