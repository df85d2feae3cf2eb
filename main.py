#!/usr/bin/env python3
"""Opcode CPU Command Line Interface.

Run instruction programs against a fresh four-register processor.

Usage:
    python main.py --program programs/sum.ops
    python main.py --inline "SET A 10; SET B 20; ADR A B"
    python main.py --repl
"""

import argparse
import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from opcode_cpu import OpcodeError, Processor, parse_program
from opcode_cpu.errors import BatchExecutionError


def configure_logging(verbosity: int) -> None:
    """Map -v count to a log level: 0 WARNING, 1 INFO, 2+ DEBUG."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def print_registers(registers, quiet: bool = False) -> None:
    """Print register values; quiet mode prints only non-zero registers."""
    if quiet:
        for reg, value in registers.items():
            if value != 0:
                print(f"{reg}={value}")
    else:
        print(f"Registers: {dict(registers)}")


def run_check(cpu: Processor, instructions) -> int:
    """Decode every instruction without executing; returns exit status."""
    failures = 0
    for index, result in enumerate(cpu.check(instructions)):
        if result.valid:
            print(f"[{index}] OK    {result.raw_instruction}")
        else:
            failures += 1
            print(f"[{index}] ERROR {result.raw_instruction} - {result.error}")
    print(f"{len(instructions) - failures}/{len(instructions)} instructions valid")
    return 1 if failures else 0


def run_repl(cpu: Processor) -> int:
    """Line-oriented interactive loop on stdin."""
    print("Opcode CPU REPL. Commands: regs, get <NAME>, reset, quit")
    for raw in sys.stdin:
        line = raw.strip()
        if not line:
            continue
        command = line.split()
        keyword = command[0].lower()

        try:
            if keyword in ("quit", "exit"):
                break
            elif keyword == "regs":
                print_registers(cpu.get_registers())
            elif keyword == "get" and len(command) == 2:
                print(f"{command[1].upper()}={cpu.get_register(command[1])}")
            elif keyword == "reset":
                print_registers(cpu.reset())
            else:
                print_registers(cpu.execute(line))
        except OpcodeError as e:
            print(f"Error: {e}")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Opcode CPU: four-register microprocessor simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Run a program file
    python main.py --program programs/sum.ops

    # Run inline instructions
    python main.py --inline "SET A 10; SET B 20; ADR A B"

    # Print a single register after execution
    python main.py --inline "SET C 7; INR C" --register C

    # Validate a program without executing it
    python main.py --program programs/sum.ops --check
        """
    )

    parser.add_argument(
        "--program", "-p",
        type=str,
        help="Path to program file (one instruction per line)"
    )
    parser.add_argument(
        "--inline", "-i",
        type=str,
        help="Inline instructions (separate instructions with ;)"
    )
    parser.add_argument(
        "--repl",
        action="store_true",
        help="Read instructions interactively from stdin"
    )
    parser.add_argument(
        "--register", "-r",
        type=str,
        help="Print only this register after execution"
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Decode every instruction without executing"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Minimal output (non-zero registers only)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase log verbosity (-v INFO, -vv DEBUG)"
    )

    args = parser.parse_args()

    if not args.program and not args.inline and not args.repl:
        parser.error("One of --program, --inline or --repl is required")

    configure_logging(args.verbose)
    cpu = Processor()

    if args.repl:
        sys.exit(run_repl(cpu))

    # Load program
    if args.program:
        program_path = Path(args.program)
        if not program_path.exists():
            print(f"Error: Program file not found: {args.program}")
            sys.exit(1)
        source = program_path.read_text()
        if not args.quiet:
            print(f"Loading program: {args.program}")
    else:
        source = args.inline.replace(";", "\n")

    instructions = parse_program(source)

    if args.check:
        sys.exit(run_check(cpu, instructions))

    status = 0
    try:
        cpu.execute_batch(instructions)
    except BatchExecutionError as e:
        print(f"Error: {e}")
        print(f"Committed before failure: {e.executed_instructions}")
        status = 1
    except OpcodeError as e:
        print(f"Error: {e}")
        status = 1

    # Output
    if args.register:
        try:
            print(f"{args.register.upper()}={cpu.get_register(args.register)}")
        except OpcodeError as e:
            print(f"Error: {e}")
            status = 1
    else:
        if not args.quiet:
            summary = cpu.get_summary()
            print(f"Executed: {summary['instructions_executed']}")
        print_registers(cpu.get_registers(), quiet=args.quiet)

    sys.exit(status)


if __name__ == "__main__":
    main()
