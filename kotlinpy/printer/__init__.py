"""Source printer for the lossless tree."""

from kotlinpy.printer.printer import BYTE_ORDER_MARK, print_right_padded, print_space, print_tree

__all__ = ["BYTE_ORDER_MARK", "print_right_padded", "print_space", "print_tree"]
