#Brad Arrington
import io
import heapq
import sys
from collections import namedtuple
from typing import BinaryIO, List, Optional

from bitio import CompressorBitio

BITS_PER_WORD = 8
BITS_PER_INT = 32
SYMBOL_BITS = BITS_PER_WORD + 1
ALPH_SIZE = 1 << BITS_PER_WORD
END_OF_STREAM = ALPH_SIZE
HUFF_NUMBER = 0xface8200
HUFF_TREE = HUFF_NUMBER | 1
COMPRESSION_NAME = "static order 0 model with Huffman coding, tree header"
USAGE = "infile outfile [-d] [-v]\n\nSpecifying -d will dump the modeling data\nSpecifying -v will report queue and bit counts\n"

DEBUG_LOW = 1
DEBUG_HIGH = 4
debug_level = 0

# deepest a valid tree of ALPH_SIZE + 1 leaves can nest
MAX_TREE_DEPTH = ALPH_SIZE

EOF = CompressorBitio.EOF

Code = namedtuple("Code", ["code", "code_bits"])


class HuffException(Exception):
    pass


class HuffFormatError(HuffException):
    """Input is not a well formed tree-header stream."""


class HuffInternalError(HuffException):
    """The tree or code table broke one of its own invariants."""


class Node:
    __slots__ = ["value", "weight", "child_0", "child_1"]

    def __init__(self, value: int, weight: int, child_0: Optional['Node'] = None, child_1: Optional['Node'] = None):
        self.value = value
        self.weight = weight
        self.child_0 = child_0
        self.child_1 = child_1

    def is_leaf(self) -> bool:
        return self.child_0 is None and self.child_1 is None


def compress_file(input_bit_file: 'CompressorBitio.BitFile', output_bit_file: 'CompressorBitio.BitFile', argc: int, argv: List[str]):
    dump, verbose = parse_args(argc, argv)

    counts = count_bytes(input_bit_file)
    root_node = build_tree(counts)
    codes = make_codes(root_node)

    output_bit_file.output_bits(HUFF_TREE, BITS_PER_INT)
    write_tree_header(root_node, output_bit_file)

    if dump:
        print_model(root_node, codes)

    compress_data(input_bit_file, output_bit_file, codes)
    output_bit_file.close_bit_file()

    if verbose or debug_level >= DEBUG_HIGH:
        print(f"bits read {input_bit_file.bits_read} bits written {output_bit_file.bits_written}")


def expand_file(input_bit_file: 'CompressorBitio.BitFile', output_file: BinaryIO, argc: int, argv: List[str]):
    dump, verbose = parse_args(argc, argv)

    magic = input_bit_file.read_bits(BITS_PER_INT)
    if magic != HUFF_TREE:
        raise HuffFormatError(f"illegal header starts with {magic:#x}" if magic != EOF else "input too short for header")

    root_node = read_tree_header(input_bit_file)
    if root_node.is_leaf():
        raise HuffFormatError("bad input, tree header holds a single leaf")

    if dump:
        print_model(root_node, make_codes(root_node))

    count = expand_data(input_bit_file, output_file, root_node)

    if verbose or debug_level >= DEBUG_HIGH:
        print(f"bits read {input_bit_file.bits_read} bytes written {count}")


def compress_bytes(data: bytes) -> bytes:
    output = io.BytesIO()
    input_bit_file = CompressorBitio.BitFile.from_stream(io.BytesIO(data), True)
    output_bit_file = CompressorBitio.BitFile.from_stream(output, False)
    compress_file(input_bit_file, output_bit_file, 0, [])
    return output.getvalue()


def expand_bytes(data: bytes) -> bytes:
    output = io.BytesIO()
    input_bit_file = CompressorBitio.BitFile.from_stream(io.BytesIO(data), True)
    expand_file(input_bit_file, output, 0, [])
    return output.getvalue()


def parse_args(argc: int, argv: List[str]):
    dump = False
    verbose = False
    for arg in argv[:argc]:
        if arg == "-d":
            dump = True
        elif arg == "-v":
            verbose = True
        else:
            print(f"Unknown argument: {arg}")
    return dump, verbose


def count_bytes(input_bit_file: 'CompressorBitio.BitFile') -> List[int]:
    counts = [0] * (ALPH_SIZE + 1)
    counts[END_OF_STREAM] = 1

    while True:
        value = input_bit_file.read_bits(BITS_PER_WORD)
        if value == EOF:
            break
        counts[value] += 1

    return counts


def build_tree(counts: List[int]) -> Node:
    # (weight, sequence, node): equal weights leave in insertion order
    queue = []
    sequence = 0
    for value, count in enumerate(counts):
        if count > 0:
            queue.append((count, sequence, Node(value, count)))
            sequence += 1

    if len(queue) == 1:
        # empty input: only the sentinel, give it a zero weight sibling
        queue.insert(0, (0, -1, Node(0, 0)))

    heapq.heapify(queue)

    if debug_level >= DEBUG_HIGH:
        print(f"pq created with {len(queue)} nodes")

    while len(queue) > 1:
        weight_0, _, child_0 = heapq.heappop(queue)
        weight_1, _, child_1 = heapq.heappop(queue)
        node = Node(-1, weight_0 + weight_1, child_0, child_1)
        heapq.heappush(queue, (node.weight, sequence, node))
        sequence += 1

    return queue[0][2]


def make_codes(root_node: Node) -> List[Optional[Code]]:
    codes = [None] * (ALPH_SIZE + 1)
    convert_tree_to_code(codes, 0, 0, root_node)
    return codes


def convert_tree_to_code(codes: List[Optional[Code]], code_so_far: int, bits: int, node: Node):
    if node.is_leaf():
        codes[node.value] = Code(code_so_far, bits)
        return
    if node.child_0 is None or node.child_1 is None:
        raise HuffInternalError(f"node at depth {bits} has a single child")

    code_so_far <<= 1
    bits += 1
    convert_tree_to_code(codes, code_so_far, bits, node.child_0)
    convert_tree_to_code(codes, code_so_far | 1, bits, node.child_1)


def write_tree_header(node: Node, output_bit_file: 'CompressorBitio.BitFile'):
    if node.is_leaf():
        output_bit_file.output_bits(1, 1)
        output_bit_file.output_bits(node.value, SYMBOL_BITS)
    else:
        output_bit_file.output_bits(0, 1)
        write_tree_header(node.child_0, output_bit_file)
        write_tree_header(node.child_1, output_bit_file)


def read_tree_header(input_bit_file: 'CompressorBitio.BitFile', depth: int = 0) -> Node:
    bit = input_bit_file.read_bits(1)
    if bit == EOF:
        raise HuffFormatError("bad input, header ends before the tree is complete")

    if bit == 0:
        if depth >= MAX_TREE_DEPTH:
            raise HuffFormatError("bad input, header nests deeper than any tree")
        child_0 = read_tree_header(input_bit_file, depth + 1)
        child_1 = read_tree_header(input_bit_file, depth + 1)
        return Node(-1, 0, child_0, child_1)

    value = input_bit_file.read_bits(SYMBOL_BITS)
    if value == EOF:
        raise HuffFormatError("bad input, header ends inside a leaf")
    if value > END_OF_STREAM:
        raise HuffFormatError(f"bad input, leaf value {value} out of range")
    return Node(value, 0)


def compress_data(input_bit_file: 'CompressorBitio.BitFile', output_bit_file: 'CompressorBitio.BitFile', codes: List[Optional[Code]]):
    input_bit_file.reset()

    while True:
        value = input_bit_file.read_bits(BITS_PER_WORD)
        if value == EOF:
            break
        code = codes[value]
        if code is None:
            raise HuffInternalError(f"no code for byte {value}")
        output_bit_file.output_bits(code.code, code.code_bits)

    last = codes[END_OF_STREAM]
    if last is None:
        raise HuffInternalError("no code for END_OF_STREAM")
    output_bit_file.output_bits(last.code, last.code_bits)


def expand_data(input_bit_file: 'CompressorBitio.BitFile', output_file: BinaryIO, root_node: Node) -> int:
    """Decode until the END_OF_STREAM leaf, returns the number of bytes written."""
    written = 0
    node = root_node

    while True:
        bit = input_bit_file.input_bit()
        if bit == EOF:
            raise HuffFormatError("bad input, no END_OF_STREAM")

        node = node.child_1 if bit else node.child_0
        if node is None:
            raise HuffInternalError("decoding walked off the tree")

        if node.is_leaf():
            if node.value == END_OF_STREAM:
                return written
            output_file.write(bytes([node.value]))
            written += 1
            node = root_node


def print_char(c):
    if 0x20 <= c < 127:
        print(f"'{chr(c)}'", end="")
    elif c == END_OF_STREAM:
        print("EOS", end="")
    else:
        print(f"{c:3d}", end="")


def print_model(root_node: Node, codes: List[Optional[Code]]):
    weights = {}

    def collect(node):
        if node.is_leaf():
            weights[node.value] = node.weight
        else:
            collect(node.child_0)
            collect(node.child_1)

    collect(root_node)
    for value in sorted(weights):
        print("node=", end="")
        print_char(value)
        print(f"  count={weights[value]:3d}", end="")
        code = codes[value]
        if code is not None:
            print("  Huffman code=", end="")
            sys.stdout.write(f"<{code.code:0{code.code_bits}b}>" if code.code_bits else "<>")
        print()
