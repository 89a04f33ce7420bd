"""CHIP-8 rendering utilities for visualization."""

from typing import Optional, Sequence, Tuple

import numpy as np
from PIL import Image

from chip8core.constants import SCREEN_HEIGHT, SCREEN_WIDTH

BRAILLE_BASE = 0x2800
# Braille dot bit for each pixel of a 2-wide, 4-tall cell, indexed [row][col]
BRAILLE_DOTS = (
    (0x01, 0x08),
    (0x02, 0x10),
    (0x04, 0x20),
    (0x40, 0x80),
)

# Physical keypad layout: label shown and the key index it reports
KEYPAD_LAYOUT = (
    (("1", 0x1), ("2", 0x2), ("3", 0x3), ("C", 0xC)),
    (("4", 0x4), ("5", 0x5), ("6", 0x6), ("D", 0xD)),
    (("7", 0x7), ("8", 0x8), ("9", 0x9), ("E", 0xE)),
    (("A", 0xA), ("0", 0x0), ("B", 0xB), ("F", 0xF)),
)

# Colour bars cycled across the screen, one per 4 Braille cells
SMPTE_COLORS = (
    "\033[37m", "\033[33m", "\033[36m", "\033[32m",
    "\033[35m", "\033[31m", "\033[34m", "\033[37m",
)


def _as_image(display) -> np.ndarray:
    """Reshape a linear display into a (height, width) boolean image."""
    return np.asarray(display, dtype=np.uint8).reshape(SCREEN_HEIGHT, SCREEN_WIDTH).astype(np.bool_)


def display_to_rgb(
    display,
    scale: int = 8,
    on_color: Tuple[int, int, int] = (0, 255, 0),
    off_color: Tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """Convert CHIP-8 display to RGB array with optional upscaling.

    Args:
        display: Linear display of 2048 pixels (pixel (x, y) at y * 64 + x)
        scale: Upscaling factor for better visibility (default: 8x)
        on_color: RGB color for "on" pixels (default: green)
        off_color: RGB color for "off" pixels (default: black)

    Returns:
        RGB array of shape (32*scale, 64*scale, 3) with uint8 values
    """
    pixels = _as_image(display)

    rgb_frame = np.zeros((SCREEN_HEIGHT, SCREEN_WIDTH, 3), dtype=np.uint8)
    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    # Nearest neighbor upscaling
    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    return rgb_frame


def create_color_scheme(
    scheme: str = "classic",
) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    """Get predefined color schemes for CHIP-8 rendering.

    Args:
        scheme: Color scheme name ("classic", "amber", "white", "blue", "retro")

    Returns:
        Tuple of (on_color, off_color) as RGB tuples
    """
    schemes = {
        "classic": ((0, 255, 0), (0, 0, 0)),  # Green on black
        "amber": ((255, 176, 0), (0, 0, 0)),  # Amber on black
        "white": ((255, 255, 255), (0, 0, 0)),  # White on black
        "blue": ((0, 255, 255), (0, 0, 64)),  # Cyan on dark blue
        "retro": ((255, 255, 0), (64, 0, 64)),  # Yellow on purple
    }

    if scheme not in schemes:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(schemes.keys())}"
        )

    return schemes[scheme]


def save_screenshot(display, filename: str, scale: int = 8, color_scheme: str = "classic") -> None:
    """Save the display as an image file (format chosen from the extension)."""
    on_color, off_color = create_color_scheme(color_scheme)
    Image.fromarray(display_to_rgb(display, scale, on_color, off_color)).save(filename)


def display_to_braille(display) -> str:
    """Render the display as 8 lines of 32 Braille characters.

    Each character covers a 2x4 block of pixels, so the whole 64x32 screen fits
    in a small terminal window.
    """
    pixels = _as_image(display)
    lines = []
    for top in range(0, SCREEN_HEIGHT, 4):
        cells = []
        for left in range(0, SCREEN_WIDTH, 2):
            code = 0
            for row in range(4):
                for col in range(2):
                    if pixels[top + row, left + col]:
                        code |= BRAILLE_DOTS[row][col]
            cells.append(chr(BRAILLE_BASE + code))
        lines.append("".join(cells))
    return "\n".join(lines)


def render_terminal_frame(
    display,
    sound_timer: int = 0,
    keypad: Optional[Sequence[bool]] = None,
    smpte: bool = False,
) -> str:
    """Draw a boxed terminal frame: screen, beep indicator and optional keypad.

    Args:
        display: Linear display of 2048 pixels
        sound_timer: Current sound timer; a nonzero value lights the beep indicator
        keypad: Sixteen key states; pressed keys are shown in reverse video
        smpte: Tint the screen with colour bars, switching colour every 4 cells

    Returns:
        Multi-line string ready to print
    """
    inner_width = SCREEN_WIDTH // 2
    beep = "●" if sound_timer > 0 else "○"
    title = "─CHIP-8"
    status = f"BEEP─{beep}─"

    lines = [
        "╭" + title + "─" * (inner_width + 2 - len(title) - len(status)) + status + "╮",
        "│╭" + "─" * inner_width + "╮│",
    ]
    color_ptr = 0
    for row in display_to_braille(display).split("\n"):
        if smpte:
            cells = ""
            for x, cell in enumerate(row):
                if x % 4 == 0:
                    cells += SMPTE_COLORS[color_ptr]
                    color_ptr = (color_ptr + 1) % len(SMPTE_COLORS)
                cells += cell
            row = cells + "\033[0m"
        lines.append("││" + row + "││")
    lines.append("│╰" + "─" * inner_width + "╯│")

    if keypad is not None:
        margin = " " * ((inner_width + 2 - 20) // 2)
        pad = " " * (inner_width + 2 - 20 - len(margin))
        lines.append("│" + margin + "╭───╮" * 4 + pad + "│")
        for i, row in enumerate(KEYPAD_LAYOUT):
            keys = ""
            for label, key in row:
                face = f" {label} "
                if keypad[key]:
                    face = f"\033[7m{face}\033[0m"
                keys += f"│{face}│"
            lines.append("│" + margin + keys + pad + "│")
            border = "├───┤" if i < len(KEYPAD_LAYOUT) - 1 else "╰───╯"
            lines.append("│" + margin + border * 4 + pad + "│")

    lines.append("╰" + "─" * (inner_width + 2) + "╯")
    return "\n".join(lines)
