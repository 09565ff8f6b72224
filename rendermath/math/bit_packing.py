# rendermath/math/bit_packing.py
"""
Битовые поля внутри целого числа: shift задаёт позицию, mask – ширину.
"""


class BitPacking:

    @staticmethod
    def set(storage: int, value: int, shift: int, mask: int = 1) -> int:
        """Записать value в поле (поле предварительно очищается)."""
        storage &= ~(mask << shift)
        return storage | (value << shift)

    @staticmethod
    def get(storage: int, shift: int, mask: int = 1) -> int:
        return (storage >> shift) & mask

    @staticmethod
    def all(storage: int, shift: int, mask: int = 1) -> bool:
        """Все биты маски установлены."""
        shifted = mask << shift
        return (storage & shifted) == shifted

    @staticmethod
    def any(storage: int, shift: int, mask: int = 1) -> bool:
        return (storage & (mask << shift)) != 0
