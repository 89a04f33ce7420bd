"""Stateful CHIP-8 driver built on the functional emulator core."""

from typing import Optional

import jax
import jax.numpy as jnp
import numpy as np

from chip8core import emulator
from chip8core.disassembler import disassemble_instruction
from chip8core.logging import ConsoleLogger
from chip8core.state import EmulatorState, create_state

_step = jax.jit(emulator.step)
_tick_timers = jax.jit(emulator.tick_timers)


class Chip8:
    """One emulation session.

    Owns a single :class:`EmulatorState` and replaces it on every operation.
    The driver is expected to call :meth:`step` several times per rendered
    frame and :meth:`tick_timers` once per frame, feeding key state in between.

    Args:
        rng: JAX random key used by the RND instruction
        logger: Logger for execution traces
        trace: Log the address and mnemonic of every executed instruction at DEBUG level
    """

    def __init__(
        self,
        rng: jax.Array = jax.random.PRNGKey(0),
        logger: Optional[ConsoleLogger] = None,
        trace: bool = False,
    ):
        self.rng = rng
        self.logger = logger or ConsoleLogger()
        self.trace = trace
        self.state: EmulatorState = create_state(rng)

    def reset(self):
        """Return to power-on state; loaded program bytes are discarded."""
        self.state = create_state(self.rng)

    def load(self, rom: bytes):
        """Copy a program into memory at the boot offset."""
        self.state = emulator.load_rom(self.state, rom)

    def step(self) -> str:
        """Execute one instruction and return its mnemonic."""
        pc = int(self.state.pc)
        self.state, instruction = _step(self.state)
        mnemonic = disassemble_instruction(int(instruction))
        if self.trace:
            self.logger.debug(f"{pc:03X}: {mnemonic}")
        return mnemonic

    def tick_timers(self):
        self.state = _tick_timers(self.state)

    def run_frame(self, cycles: int = 8):
        """Execute `cycles` instructions, then tick the timers once."""
        if self.trace:
            for _ in range(cycles):
                self.step()
            self.tick_timers()
        else:
            self.state = emulator.run_frame(self.state, cycles)

    def read_display(self) -> np.ndarray:
        """Linear framebuffer of 2048 pixels, each 0 or 1; pixel (x, y) is at y * 64 + x."""
        return np.asarray(self.state.display)

    def read_keypad(self) -> np.ndarray:
        return np.asarray(self.state.keypad)

    def read_sound_timer(self) -> int:
        return int(self.state.sound_timer)

    def read_delay_timer(self) -> int:
        return int(self.state.delay_timer)

    def set_key(self, key: int):
        """Mark key 0x0-0xF as pressed."""
        self.state = self.state.replace(keypad=self.state.keypad.at[key].set(True))

    def clear_all_keys(self):
        self.state = self.state.replace(keypad=jnp.zeros_like(self.state.keypad))

    @property
    def pc(self) -> int:
        return int(self.state.pc)

    @property
    def index(self) -> int:
        return int(self.state.I)

    @property
    def registers(self) -> np.ndarray:
        return np.asarray(self.state.V)
