import importlib.util
import os

import pytest

from bitio import CompressorBitio
from huff import HuffInternalError

HERE = os.path.dirname(os.path.abspath(__file__))
SCRIPTS = os.path.join(HERE, os.pardir, "Python")


def _load(file_name):
    spec = importlib.util.spec_from_file_location(file_name.replace("-", "_")[:-3], os.path.join(SCRIPTS, file_name))
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def compressor():
    return _load("main-c.py")


@pytest.fixture
def expander():
    return _load("main-e.py")


def test_compress_then_expand_files(tmp_path, compressor, expander, capsys):
    source = tmp_path / "input.txt"
    packed = tmp_path / "input.huf"
    restored = tmp_path / "restored.txt"
    source.write_bytes(b"she sells sea shells by the sea shore\n" * 200)

    assert compressor.main(["main-c", str(source), str(packed)]) == 0
    assert expander.main(["main-e", str(packed), str(restored)]) == 0
    assert restored.read_bytes() == source.read_bytes()

    printed = capsys.readouterr().out
    assert "CompressFile" in printed
    assert "Compression ratio:" in printed
    assert "ExpandFile" in printed


def test_usage(compressor, expander, capsys):
    assert compressor.main(["main-c"]) == 0
    assert expander.main(["main-e.py", "only-one"]) == 0
    printed = capsys.readouterr().out
    assert "Usage:  main-c infile outfile" in printed
    assert "Usage:  main-e infile outfile" in printed


def test_missing_input(tmp_path, compressor, capsys):
    missing = tmp_path / "nope.txt"
    assert compressor.main(["main-c", str(missing), str(tmp_path / "out.huf")]) == 1
    assert "not found" in capsys.readouterr().out


def test_expand_rejects_foreign_file(tmp_path, expander, capsys):
    foreign = tmp_path / "plain.txt"
    foreign.write_bytes(b"definitely not compressed")
    assert expander.main(["main-e", str(foreign), str(tmp_path / "out.txt")]) == 1
    assert "illegal header" in capsys.readouterr().out


def _record_input_files(monkeypatch):
    opened = []
    original = CompressorBitio.BitFile.open_input_bit_file

    def recording(name):
        bit_file = original(name)
        opened.append(bit_file)
        return bit_file

    monkeypatch.setattr(CompressorBitio.BitFile, "open_input_bit_file", staticmethod(recording))
    return opened


def test_compress_to_missing_directory(tmp_path, compressor, monkeypatch, capsys):
    opened = _record_input_files(monkeypatch)
    source = tmp_path / "in.txt"
    source.write_bytes(b"abc")

    assert compressor.main(["main-c", str(source), str(tmp_path / "nodir" / "out.huf")]) == 1
    printed = capsys.readouterr().out
    assert "cannot open output file" in printed
    assert "Input file" not in printed
    assert len(opened) == 1
    assert opened[0].file_stream.closed


def test_expand_to_missing_directory(tmp_path, compressor, expander, monkeypatch, capsys):
    source = tmp_path / "in.txt"
    packed = tmp_path / "in.huf"
    source.write_bytes(b"abc")
    assert compressor.main(["main-c", str(source), str(packed)]) == 0
    opened = _record_input_files(monkeypatch)
    capsys.readouterr()

    assert expander.main(["main-e", str(packed), str(tmp_path / "nodir" / "out.txt")]) == 1
    printed = capsys.readouterr().out
    assert "cannot open output file" in printed
    assert "Input file" not in printed
    assert opened[0].file_stream.closed


def test_failed_compress_flushes_and_closes_output(tmp_path, compressor, monkeypatch, capsys):
    source = tmp_path / "in.txt"
    packed = tmp_path / "out.huf"
    source.write_bytes(b"abc")
    outputs = []

    def failing(input_bit_file, output_bit_file, argc, argv):
        outputs.append(output_bit_file)
        output_bit_file.output_bits(0b101, 3)
        raise HuffInternalError("no code for byte 97")

    monkeypatch.setattr(compressor, "compress_file", failing)
    assert compressor.main(["main-c", str(source), str(packed)]) == 1
    assert "no code for byte 97" in capsys.readouterr().out
    assert outputs[0].file_stream.closed
    assert packed.read_bytes() == b"\xa0"
