import io
import json

import pytest

from bencodekit import cli


def test_demo(capsys):
    cli.main(["demo"])
    out = capsys.readouterr().out

    assert "'i3e' -> 3 (BencodeInt)" in out
    assert "'i-7e' -> -7 (BencodeInt)" in out
    assert "'i07e' -> error [LeadingZeroError]" in out
    assert "'5:hello' -> \"hello\" (BencodeString)" in out
    assert "'0:' -> \"\" (BencodeString)" in out


def test_decode_file(tmp_path, capsys):
    path = tmp_path / "sample.torrent"
    path.write_bytes(b"d4:infod6:lengthi5e4:name5:a.txte6:pieces3:\x00\x01\x02e")

    cli.main(["decode", str(path)])
    out = capsys.readouterr().out

    assert '"info": {' in out
    assert '"length": 5' in out
    assert '"name": "a.txt"' in out
    assert '"pieces": <3 bytes: 000102>' in out


def test_decode_all_values(tmp_path, capsys):
    path = tmp_path / "stream.bin"
    path.write_bytes(b"i1e4:spamle")

    cli.main(["decode", "--all", str(path)])
    assert capsys.readouterr().out.splitlines() == ["1", '"spam"', "[]"]


def test_decode_reports_duplicates(tmp_path, capsys):
    path = tmp_path / "dup.bin"
    path.write_bytes(b"d1:ai1e1:ai2ee")

    cli.main(["decode", str(path)])
    captured = capsys.readouterr()
    assert '"a": 2' in captured.out
    assert 'duplicate keys "a"' in captured.err


def test_decode_error_exit_code(tmp_path, capsys):
    path = tmp_path / "bad.bin"
    path.write_bytes(b"i-0e")

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["decode", str(path)])
    assert exc_info.value.code == 2
    assert "error [NegativeZeroError]" in capsys.readouterr().err


def test_decode_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(b"li1ei2ee")))
    cli.main(["decode", "-"])
    assert capsys.readouterr().out.splitlines() == ["[", "  1", "  2", "]"]


def test_encode_json_file(tmp_path):
    src = tmp_path / "in.json"
    dst = tmp_path / "out.bin"
    src.write_text(json.dumps({"spam": "eggs", "cow": "moo"}))

    cli.main(["encode", str(src), "--output", str(dst)])
    assert dst.read_bytes() == b"d3:cow3:moo4:spam4:eggse"


def test_encode_rejects_floats(tmp_path, capsys):
    src = tmp_path / "in.json"
    src.write_text("[1.5]")

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["encode", str(src)])
    assert exc_info.value.code == 2
    assert "UnsupportedValueError" in capsys.readouterr().err


def test_no_command_prints_help():
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])
    assert exc_info.value.code == 1


def test_format_bytes():
    assert cli.format_bytes(b"spam") == '"spam"'
    assert cli.format_bytes(b"\xff\x00") == "<2 bytes: ff00>"
    assert cli.format_bytes(b"\x00" * 40).endswith("...>")
