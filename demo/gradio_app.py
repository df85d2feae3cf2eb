"""Opcode CPU Interactive Demo.

A Gradio web interface for driving a four-register processor.

Usage:
    cd /path/to/opcode-cpu
    python demo/gradio_app.py

Features:
    - Execute single instructions against a live register bank
    - Run batch programs and see where a failing batch stopped
    - Read a single register or reset all of them

Every browser session gets its own Processor, so sessions never share
register state.
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import gradio as gr
from opcode_cpu import OpcodeError, Processor, parse_program
from opcode_cpu.errors import BatchExecutionError


SERVER_NAME = "0.0.0.0"
SERVER_PORT = 7861


# =============================================================================
# Example Programs
# =============================================================================

EXAMPLE_PROGRAMS = {
    "Add registers": """SET A 10
SET B 20
ADR A B         ; A = 30""",

    "Countdown": """SET C 3
DCR C
DCR C
DCR C           ; C = 0
MOV D C
INR D           ; D = 1""",

    "Wraparound": """SET A 2147483647
INR A           ; A = -2147483648""",

    "Failing batch": """SET A 10
XXX B 20        ; unknown opcode, A stays 10
SET C 5""",

    "Custom": ""
}


# =============================================================================
# Execution Functions
# =============================================================================

def format_registers(processor: Processor) -> str:
    """Render the processor's registers as a fixed-width table."""
    lines = [
        "REGISTERS",
        "=" * 30,
    ]
    for reg, value in processor.get_registers().items():
        marker = " *" if value != 0 else ""
        lines.append(f"  {reg}: {value:>12}{marker}")
    lines.append("")
    lines.append(f"Executed: {processor.instructions_executed}")
    return "\n".join(lines)


def _session(processor):
    return processor if processor is not None else Processor()


def run_instruction(instruction: str, processor) -> tuple:
    """Execute one instruction.

    Returns:
        Tuple of (status_text, registers_text, processor)
    """
    processor = _session(processor)
    try:
        processor.execute(instruction)
        status = f"OK: {instruction.strip()}"
    except OpcodeError as e:
        status = f"Error: {e}"
    return status, format_registers(processor), processor


def run_program(program: str, processor) -> tuple:
    """Execute a program as one batch.

    Returns:
        Tuple of (status_text, registers_text, processor)
    """
    processor = _session(processor)
    instructions = parse_program(program)
    try:
        processor.execute_batch(instructions)
        status = f"OK: {len(instructions)} instructions executed"
    except BatchExecutionError as e:
        status = "\n".join([
            "BATCH FAILED",
            "=" * 40,
            f"Index:       {e.index}",
            f"Instruction: {e.instruction}",
            f"Committed:   {e.executed_instructions}",
            f"Cause:       {e.cause}",
        ])
    except OpcodeError as e:
        status = f"Error: {e}"
    return status, format_registers(processor), processor


def read_register(name: str, processor) -> tuple:
    processor = _session(processor)
    try:
        status = f"{name.strip().upper()} = {processor.get_register(name.strip())}"
    except OpcodeError as e:
        status = f"Error: {e}"
    return status, format_registers(processor), processor


def reset_registers(processor) -> tuple:
    processor = _session(processor)
    processor.reset()
    return "Registers reset", format_registers(processor), processor


def load_example(example_name: str) -> str:
    """Load an example program."""
    return EXAMPLE_PROGRAMS.get(example_name, "")


# =============================================================================
# Gradio Interface
# =============================================================================

def create_demo():
    """Create and return the Gradio demo interface."""

    with gr.Blocks(title="Opcode CPU Demo", theme=gr.themes.Soft()) as demo:
        gr.Markdown("""
        # Opcode CPU: Four-Register Microprocessor Simulator

        Instructions are decoded from text and executed against registers
        A, B, C and D (32-bit signed, wrapping on overflow).

        **Pipeline**: `text -> decode -> instruction -> execute -> registers`
        """)

        processor_state = gr.State(None)

        with gr.Row():
            with gr.Column(scale=2):
                gr.Markdown("### Single Instruction")
                instruction_input = gr.Textbox(
                    label="Instruction",
                    placeholder="SET A 10"
                )
                execute_button = gr.Button("Execute", variant="primary")

                gr.Markdown("### Batch Program")
                example_dropdown = gr.Dropdown(
                    choices=list(EXAMPLE_PROGRAMS.keys()),
                    value="Add registers",
                    label="Load Example"
                )
                program_input = gr.Textbox(
                    value=EXAMPLE_PROGRAMS["Add registers"],
                    label="Program",
                    lines=10,
                    placeholder="One instruction per line..."
                )
                run_button = gr.Button("Run Batch", variant="primary")

                gr.Markdown("### Registers")
                with gr.Row():
                    register_input = gr.Textbox(label="Register", placeholder="A")
                    read_button = gr.Button("Read")
                    reset_button = gr.Button("Reset", variant="stop")

            with gr.Column(scale=3):
                status_output = gr.Textbox(
                    label="Status",
                    lines=8,
                    interactive=False
                )
                registers_output = gr.Textbox(
                    label="Registers",
                    lines=8,
                    interactive=False
                )

        # ISA Reference
        with gr.Accordion("ISA Reference", open=False):
            gr.Markdown("""
            | Instruction | Description | Example |
            |-------------|-------------|---------|
            | `SET reg imm` | Load literal value | `SET A 10` |
            | `ADD reg imm` | Add literal value | `ADD A -3` |
            | `ADR dst src` | Add source register to target | `ADR A B` |
            | `MOV dst src` | Copy register | `MOV C A` |
            | `INR reg` | Increment by 1 | `INR D` |
            | `DCR reg` | Decrement by 1 | `DCR D` |
            | `RST` | Reset all registers | `RST` |

            **Registers**: A-D (4 general purpose, 32-bit signed)
            **Batches**: stop at the first failure; earlier instructions stay applied
            """)

        # Event handlers
        outputs = [status_output, registers_output, processor_state]

        execute_button.click(
            fn=run_instruction,
            inputs=[instruction_input, processor_state],
            outputs=outputs
        )
        run_button.click(
            fn=run_program,
            inputs=[program_input, processor_state],
            outputs=outputs
        )
        read_button.click(
            fn=read_register,
            inputs=[register_input, processor_state],
            outputs=outputs
        )
        reset_button.click(
            fn=reset_registers,
            inputs=[processor_state],
            outputs=outputs
        )
        example_dropdown.change(
            fn=load_example,
            inputs=[example_dropdown],
            outputs=[program_input]
        )

    return demo


# =============================================================================
# Main
# =============================================================================

if __name__ == "__main__":
    demo = create_demo()
    demo.launch(
        share=False,
        server_name=SERVER_NAME,
        server_port=SERVER_PORT,
        show_error=True
    )
