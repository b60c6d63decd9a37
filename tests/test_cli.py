"""Headless command line runs."""

from chip8.cli import EXIT_FAULT, EXIT_LOAD_ERROR, EXIT_OK, main


def write_rom(tmp_path, program):
    rom = tmp_path / "test.ch8"
    rom.write_bytes(bytes(program))
    return str(rom)


def test_headless_run_prints_registers(tmp_path, capsys):
    rom = write_rom(tmp_path, [0x64, 0xAA, 0xA1, 0x23])
    assert main([rom, "--headless"]) == EXIT_OK
    out = capsys.readouterr().out
    assert "V4=AA" in out
    assert "PC=204" in out
    assert "I=123" in out


def test_headless_feeds_keys_to_waits(tmp_path, capsys):
    rom = write_rom(tmp_path, [0xF3, 0x0A, 0xF4, 0x0A])
    assert main([rom, "--headless", "--keys", "9c"]) == EXIT_OK
    out = capsys.readouterr().out
    assert "V3=09" in out
    assert "V4=0C" in out


def test_headless_stops_when_keys_run_out(tmp_path, capsys):
    rom = write_rom(tmp_path, [0xF3, 0x0A])
    assert main([rom, "--headless"]) == EXIT_OK
    assert "PC=200" in capsys.readouterr().out


def test_headless_max_steps(tmp_path, capsys):
    rom = write_rom(tmp_path, [0x70, 0x01, 0x12, 0x00])
    assert main([rom, "--headless", "--max-steps", "10"]) == EXIT_OK
    assert "V0=05" in capsys.readouterr().out


def test_fault_exit_code(tmp_path, capsys):
    rom = write_rom(tmp_path, [0x00, 0xEE])
    assert main([rom, "--headless"]) == EXIT_FAULT


def test_program_too_large(tmp_path):
    rom = write_rom(tmp_path, [0] * 4000)
    assert main([rom, "--headless"]) == EXIT_LOAD_ERROR


def test_missing_rom(tmp_path):
    assert main([str(tmp_path / "missing.ch8"), "--headless"]) == EXIT_LOAD_ERROR


def test_bad_keys(tmp_path):
    rom = write_rom(tmp_path, [0xF3, 0x0A])
    assert main([rom, "--headless", "--keys", "xyz"]) == EXIT_LOAD_ERROR
