"""Tests for ALU operations (8xxx)."""

import pytest
from chip8core import execute
from conftest import set_registers


class TestBasicALU:
    """Test basic ALU operations."""

    def test_alu_set_basic(self, fresh_state):
        """8XY0 - Set VX = VY."""
        state = set_registers(fresh_state, V1=0x42, V2=0x99)

        state = execute(state, 0x8120)  # V1 = V2

        assert state.V[1] == 0x99
        assert state.V[2] == 0x99

    def test_alu_or_basic(self, fresh_state):
        """8XY1 - OR operation."""
        state = set_registers(fresh_state, V1=0xF0, V2=0x0F)

        state = execute(state, 0x8121)  # V1 |= V2

        assert state.V[1] == 0xFF

    def test_alu_and_basic(self, fresh_state):
        """8XY2 - AND operation."""
        state = set_registers(fresh_state, V1=0xF0, V2=0xF1)

        state = execute(state, 0x8122)  # V1 &= V2

        assert state.V[1] == 0xF0

    def test_alu_xor_basic(self, fresh_state):
        """8XY3 - XOR operation."""
        state = set_registers(fresh_state, V1=0xFF, V2=0xF0)

        state = execute(state, 0x8123)  # V1 ^= V2

        assert state.V[1] == 0x0F

    @pytest.mark.parametrize("instruction", [0x8120, 0x8121, 0x8122, 0x8123])
    def test_logic_leaves_vf_untouched(self, fresh_state, instruction):
        """Logic operations never write the flag register."""
        state = set_registers(fresh_state, V1=0x0F, V2=0xF0, VF=0x77)

        state = execute(state, instruction)

        assert state.V[15] == 0x77

    def test_alu_xor_same(self, fresh_state):
        """8XY3 - XOR with same value should be 0."""
        state = set_registers(fresh_state, V3=0xAA, V4=0xAA)

        state = execute(state, 0x8343)  # V3 ^= V4

        assert state.V[3] == 0x00


class TestALUArithmetic:
    """Test arithmetic ALU operations."""

    def test_alu_add_no_carry(self, fresh_state):
        """8XY4 - Add without carry."""
        state = set_registers(fresh_state, V1=0x10, V2=0x20, VF=1)

        state = execute(state, 0x8124)  # V1 += V2

        assert state.V[1] == 0x30
        assert state.V[15] == 0

    def test_alu_add_with_carry(self, fresh_state):
        """8XY4 - Add with carry."""
        state = set_registers(fresh_state, V1=0xFF, V2=0x01)

        state = execute(state, 0x8124)  # V1 += V2

        assert state.V[1] == 0x00  # 256 wraps to 0
        assert state.V[15] == 1  # Carry set

    def test_alu_add_large_carry(self, fresh_state):
        state = set_registers(fresh_state, V1=200, V2=100)

        state = execute(state, 0x8124)

        assert state.V[1] == 44  # 300 mod 256
        assert state.V[15] == 1

    def test_alu_sub_xy_no_borrow(self, fresh_state):
        """8XY5 - Subtract VX - VY, no borrow."""
        state = set_registers(fresh_state, V1=0x30, V2=0x10)

        state = execute(state, 0x8125)  # V1 -= V2

        assert state.V[1] == 0x20
        assert state.V[15] == 1  # No borrow (VX >= VY)

    def test_alu_sub_xy_equal(self, fresh_state):
        """8XY5 - Equal operands do not borrow."""
        state = set_registers(fresh_state, V1=0x42, V2=0x42)

        state = execute(state, 0x8125)

        assert state.V[1] == 0
        assert state.V[15] == 1

    def test_alu_sub_xy_with_borrow(self, fresh_state):
        """8XY5 - Subtract VX - VY, with borrow."""
        state = set_registers(fresh_state, V3=0x10, V4=0x30)

        state = execute(state, 0x8345)  # V3 -= V4

        assert state.V[3] == 0xE0  # 16 - 48 = -32 → 224
        assert state.V[15] == 0  # Borrow (VX < VY)

    def test_alu_sub_yx_no_borrow(self, fresh_state):
        """8XY7 - Subtract VY - VX, no borrow."""
        state = set_registers(fresh_state, V1=0x10, V2=0x30)

        state = execute(state, 0x8127)  # V1 = V2 - V1

        assert state.V[1] == 0x20  # 48 - 16 = 32
        assert state.V[15] == 1  # No borrow (VY >= VX)

    def test_alu_sub_yx_with_borrow(self, fresh_state):
        """8XY7 - Subtract VY - VX, with borrow."""
        state = set_registers(fresh_state, V1=0x30, V2=0x10)

        state = execute(state, 0x8127)

        assert state.V[1] == 0xE0
        assert state.V[15] == 0


class TestALUShifts:
    """Test shift operations, which act on VX in place."""

    def test_shift_right_even(self, fresh_state):
        """8XY6 - Shift right, even number."""
        state = set_registers(fresh_state, V1=0x04, V2=0xFF)  # V2 ignored

        state = execute(state, 0x8126)  # V1 >>= 1

        assert state.V[1] == 0x02
        assert state.V[2] == 0xFF
        assert state.V[15] == 0  # LSB was 0

    def test_shift_right_odd(self, fresh_state):
        """8XY6 - Shift right, odd number."""
        state = set_registers(fresh_state, V3=0x05, V4=0xFF)

        state = execute(state, 0x8346)  # V3 >>= 1

        assert state.V[3] == 0x02
        assert state.V[15] == 1  # LSB was 1

    def test_shift_right_ignores_vy(self, fresh_state):
        state = set_registers(fresh_state, V1=0x08, V2=0x03)

        state = execute(state, 0x8126)

        assert state.V[1] == 0x04  # 8 >> 1, not 3 >> 1

    def test_shift_left_overflow(self, fresh_state):
        """8XYE - Shift left with overflow."""
        state = set_registers(fresh_state, V3=0x81, V4=0xFF)  # 10000001

        state = execute(state, 0x834E)  # V3 <<= 1

        assert state.V[3] == 0x02  # 129 << 1 = 258 → 2
        assert state.V[15] == 1  # MSB was 1

    def test_shift_left_no_overflow(self, fresh_state):
        state = set_registers(fresh_state, V3=0x41)

        state = execute(state, 0x834E)

        assert state.V[3] == 0x82
        assert state.V[15] == 0

    def test_shift_of_vf_shifts_the_flag(self, fresh_state):
        """VF is written before the shift, so shifting VF itself shifts the flag."""
        state = set_registers(fresh_state, VF=0x03)

        state = execute(state, 0x8F06)  # SHR VF

        assert state.V[15] == 0  # flag 1, then 1 >> 1

        state = set_registers(fresh_state, VF=0x80)
        state = execute(state, 0x8F0E)  # SHL VF

        assert state.V[15] == 2  # flag 1, then 1 << 1


class TestALUEdgeCases:
    """Test edge cases and comprehensive scenarios."""

    def test_alu_undefined_operations(self, fresh_state):
        """Undefined 8XYN variants are no-ops."""
        undefined_ops = [0x8, 0x9, 0xA, 0xB, 0xC, 0xD, 0xF]

        for op in undefined_ops:
            state = set_registers(fresh_state, V1=0x42, V2=0x99)

            instruction = 0x8120 | op
            state = execute(state, instruction)

            assert state.V[1] == 0x42, f"Undefined op {op:X} changed VX"
            assert state.V[15] == 0, f"Undefined op {op:X} set VF to non-zero"

    def test_alu_self_operations(self, fresh_state):
        """Test operations where VX and VY are the same register."""
        state = set_registers(fresh_state, V5=0xAA)

        # V5 ^= V5 (should become 0)
        state = execute(state, 0x8553)
        assert state.V[5] == 0x00, "Self XOR should result in 0"

        # Reset and test self ADD
        state = set_registers(state, V5=0x80)
        state = execute(state, 0x8554)  # V5 += V5
        assert state.V[5] == 0x00, "Self ADD should wrap on overflow"
        assert state.V[15] == 1, "Self ADD should set carry flag"

    def test_vf_as_destination_keeps_flag(self, fresh_state):
        """With VX = VF the flag is written last and wins."""
        state = set_registers(fresh_state, VF=0x10, V1=0x20)

        state = execute(state, 0x8F14)  # VF += V1

        assert state.V[15] == 0  # 0x30 is replaced by the carry flag

    def test_vf_register_operations(self, fresh_state):
        """Test that operations on VF work correctly."""
        state = set_registers(fresh_state, VF=0x42, V1=0x10)

        state = execute(state, 0x81F4)  # V1 += VF
        assert state.V[1] == 0x52, "Addition with VF as source failed"
        assert state.V[15] == 0, "VF should be overwritten by operation result"
