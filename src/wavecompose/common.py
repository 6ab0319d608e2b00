"""wavecompose.common — shared utilities.

Contains: hex color parsing and normalization, the renderer's color
form, and ${var} path substitution for manifests.
"""

import re


HEX_DIGITS = "0123456789abcdefABCDEF"


# ── Color utilities ────────────────────────────────────────────────

def parse_hex_color(hex_str: str) -> tuple[int, int, int]:
    """Convert '#RRGGBB' or 'RRGGBB' string to (R, G, B) tuple."""
    hex_str = hex_str.lstrip("#")
    return (int(hex_str[0:2], 16), int(hex_str[2:4], 16), int(hex_str[4:6], 16))


def is_hex_color(value: str) -> bool:
    """True for '#RRGGBB' or bare 'RRGGBB'."""
    digits = value[1:] if value.startswith("#") else value
    return len(digits) == 6 and all(c in HEX_DIGITS for c in digits)


def normalize_hex_color(value: str) -> str:
    """Return the canonical lowercase '#rrggbb' form of a hex color.

    Raises ValueError for anything that is not six hex digits.
    """
    if not isinstance(value, str) or not is_hex_color(value):
        raise ValueError(f"Invalid hex color: {value!r}. Expected '#RRGGBB'.")
    return "#" + value.lstrip("#").lower()


def resolve_color(value: str, palette: dict[str, str]) -> str:
    """Resolve a color reference — palette key name or inline '#RRGGBB'.

    Palette keys are tried first. Returns the normalized '#rrggbb' string.
    """
    if value in palette:
        return normalize_hex_color(palette[value])
    if isinstance(value, str) and is_hex_color(value):
        return normalize_hex_color(value)
    raise ValueError(
        f"Unknown color: '{value}'. Not in palette and not a hex value."
    )


def renderer_color(hex_str: str) -> str:
    """Translate '#RRGGBB' to the '0xRRGGBB' form ffmpeg filters expect."""
    return "0x" + hex_str.lstrip("#")


# ── Path utilities ─────────────────────────────────────────────────

def resolve_path_vars(text: str, paths: dict[str, str]) -> str:
    """Replace ${name} variables in a string using the paths dict."""
    def _replace(match):
        key = match.group(1)
        if key not in paths:
            raise ValueError(f"Unknown path variable: ${{{key}}}")
        return paths[key]
    return re.sub(r"\$\{(\w+)\}", _replace, text)
