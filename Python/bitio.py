#Bradford Arrington 2025
import sys
from io import SEEK_SET
from typing import BinaryIO


class CompressorBitio:
    PACIFIER_COUNT = 2047
    EOF = -1

    class BitFile:
        def __init__(self, name: str, input_mode: bool, stream: BinaryIO = None,
                     pacifier: bool = True, close_stream: bool = True):
            self.is_input = input_mode
            if stream is None:
                mode = "rb" if input_mode else "wb"
                stream = open(name, mode)
            self.file_stream: BinaryIO = stream
            self.rack: int = 0
            self.mask: int = 0x80
            self.pacifier: bool = pacifier
            self.pacifier_counter: int = 0
            self.close_stream: bool = close_stream
            self.bits_read: int = 0
            self.bits_written: int = 0
            self._start: int = stream.tell() if input_mode and stream.seekable() else 0

        @staticmethod
        def open_output_bit_file(name: str) -> 'CompressorBitio.BitFile':
            return CompressorBitio.BitFile(name, False)

        @staticmethod
        def open_input_bit_file(name: str) -> 'CompressorBitio.BitFile':
            return CompressorBitio.BitFile(name, True)

        @staticmethod
        def from_stream(stream: BinaryIO, input_mode: bool,
                        close_stream: bool = False) -> 'CompressorBitio.BitFile':
            """Wrap an already open binary stream, e.g. io.BytesIO."""
            return CompressorBitio.BitFile(None, input_mode, stream=stream,
                                           pacifier=False, close_stream=close_stream)

        def close_bit_file(self):
            if not self.is_input and self.mask != 0x80:
                self.file_stream.write(bytes([self.rack]))
                self.rack = 0
                self.mask = 0x80
            if self.close_stream:
                self.file_stream.close()
            else:
                self.file_stream.flush()

        def _pacify(self):
            self.pacifier_counter += 1
            if self.pacifier and (self.pacifier_counter & CompressorBitio.PACIFIER_COUNT) == 0:
                sys.stdout.write(".")
                sys.stdout.flush()

        def _put_rack(self):
            self.file_stream.write(bytes([self.rack]))
            self._pacify()
            self.rack = 0
            self.mask = 0x80

        def _get_rack(self) -> bool:
            read = self.file_stream.read(1)
            if not read:
                return False
            self.rack = read[0]
            self._pacify()
            return True

        def reset(self):
            """Rewind an input bit file to where it started."""
            if not self.is_input:
                raise ValueError("reset() needs an input bit file")
            self.file_stream.seek(self._start, SEEK_SET)
            self.rack = 0
            self.mask = 0x80

        def output_bits(self, code: int, count: int):
            # low `count` bits of code, most significant first
            if count <= 0:
                return
            mask_code: int = 1 << (count - 1)
            while mask_code != 0:
                if (mask_code & code) != 0:
                    self.rack |= self.mask
                self.mask >>= 1
                if self.mask == 0:
                    self._put_rack()
                mask_code >>= 1
            self.bits_written += count

        def input_bit(self) -> int:
            if self.mask == 0x80 and not self._get_rack():
                return CompressorBitio.EOF
            value = self.rack & self.mask
            self.mask >>= 1
            if self.mask == 0:
                self.mask = 0x80
            self.bits_read += 1
            return 1 if value != 0 else 0

        def read_bits(self, bit_count: int) -> int:
            """Read bit_count bits as an unsigned int, or EOF if the stream runs out."""
            mask_code: int = 1 << (bit_count - 1)
            return_value: int = 0
            while mask_code != 0:
                if self.mask == 0x80:
                    # whole byte on a byte boundary
                    if mask_code >= 0x80:
                        if not self._get_rack():
                            return CompressorBitio.EOF
                        mask_code >>= 7
                        return_value |= self.rack * mask_code
                        mask_code >>= 1
                        self.bits_read += 8
                        continue
                    if not self._get_rack():
                        return CompressorBitio.EOF
                if (self.rack & self.mask) != 0:
                    return_value |= mask_code
                mask_code >>= 1
                self.mask >>= 1
                if self.mask == 0:
                    self.mask = 0x80
                self.bits_read += 1
            return return_value
