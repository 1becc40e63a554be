from bmgedit.cli import main
from bmgedit.terminal import help_text


def test_no_arguments_prints_help(capsys):
    assert main([]) == 0
    assert capsys.readouterr().out == help_text()


def test_help_flag(capsys):
    assert main(["-h"]) == 0
    assert capsys.readouterr().out == help_text()


def test_help_flag_before_filename(capsys):
    assert main(["-h", "file.bmg"]) == 0
    assert capsys.readouterr().out == help_text()


def test_version(capsys):
    assert main(["-v"]) == 0
    assert capsys.readouterr().out.strip() == "1.0.0"


def test_version_before_filename(capsys):
    assert main(["-r", "-v", "file.bmg"]) == 0
    assert capsys.readouterr().out.strip() == "1.0.0"


def test_unknown_argument(capsys):
    assert main(["-x", "file.bmg"]) == 1
    assert capsys.readouterr().out.strip() == "Unknown argument: -x."


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.bmg")]) == 1
    assert "does not exist." in capsys.readouterr().out


def test_flags_pass_through_to_editor(tmp_path, capsys):
    path = tmp_path / "bad.bmg"
    path.write_bytes(b"XXXXbmg1")
    assert main(["-r", "-a", str(path)]) == 1
    assert "File is not a BMG file." in capsys.readouterr().out