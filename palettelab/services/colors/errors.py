"""
PaletteLab Color Errors

Exceptions raised by the color extraction core.
"""


class DecodeFailure(ValueError):
    """Image data could not be decoded or yielded no usable pixels."""


class InvalidColorFormat(ValueError):
    """A color string is not a well-formed #RRGGBB hex value."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid hex color format: {value!r}")
