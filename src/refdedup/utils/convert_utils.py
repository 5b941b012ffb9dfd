"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
Size conversions for the --ignore-sizes option and the statistics summary.
Units are binary: 1K == 1KB == 1024 bytes.
"""
import re

_UNIT_POWERS = {"": 0, "K": 1, "M": 2, "G": 3, "T": 4, "P": 5}
_DISPLAY_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")

# "4096", "4K", "4 kb", "1.5MB", "10B"
_SIZE_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)\s*([KMGTP]?)B?$")


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """Render a byte count with two decimals, e.g. 1.50KB."""
        if size_bytes < 0:
            return "0B"

        value = float(size_bytes)
        for unit in _DISPLAY_UNITS:
            if value < 1024:
                return f"{value:.2f}{unit}"
            value /= 1024
        return f"{value:.2f}EB"

    @staticmethod
    def human_to_bytes(size_str: str) -> int:
        """
        Parse a size such as '4096', '4K', '4KB' or '1.5MB' into bytes.
        Raises ValueError for negative or malformed sizes.
        """
        text = size_str.strip().upper()
        if text.startswith("-"):
            raise ValueError(f"Negative size not allowed: '{size_str}'")

        match = _SIZE_PATTERN.match(text)
        if match is None:
            raise ValueError(
                f"Invalid size format: '{size_str}'. "
                f"Supported formats: 4096, 4K, 4KB, 1.5MB, etc."
            )

        number, prefix = match.groups()
        return int(float(number) * 1024 ** _UNIT_POWERS[prefix])

    @staticmethod
    def is_valid_size_format(size_str: str) -> bool:
        try:
            ConvertUtils.human_to_bytes(size_str)
        except ValueError:
            return False
        return True
