import binascii
from typing import Tuple


class CRC16Context:
    '''
    CRC-16 with polynomial 0x1021 fed MSB first, seeded with 0xFFFF and no
    final xor, as used for the IP.BIN device information field
    '''
    CRC16_SEED = 0xFFFF

    @staticmethod
    def calculate(buffer: bytes) -> int:
        return binascii.crc_hqx(buffer, CRC16Context.CRC16_SEED)

    @classmethod
    def data(cls, data: bytes, length: int = None) -> Tuple[str, bytes]:
        if length is None:
            length = len(data)
        crc = cls.calculate(data[:length])
        hash_bytes = crc.to_bytes(2, byteorder='big')
        return hash_bytes.hex().upper(), hash_bytes
