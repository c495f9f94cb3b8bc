"""Tests for the command-line interface."""

from route_poster.cli import main

SMALL = ['--width', '100', '--height', '150', '--pixel-ratio', '1']


def test_cli_renders_poster(tmp_path, gpx_file, capsys):
    output = tmp_path / 'poster.png'

    exit_code = main([str(gpx_file), '-o', str(output)] + SMALL)

    assert exit_code == 0
    assert output.read_bytes().startswith(b'\x89PNG')
    assert 'Morning Loop' in capsys.readouterr().out


def test_cli_info_does_not_render(tmp_path, gpx_file, capsys, monkeypatch):
    monkeypatch.chdir(tmp_path)

    exit_code = main([str(gpx_file), '--info'])

    assert exit_code == 0
    assert 'Elevation gain: 30 m' in capsys.readouterr().out
    assert not list(tmp_path.glob('*.png'))


def test_cli_default_output_name(tmp_path, gpx_file, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert main([str(gpx_file), '--theme', 'dark'] + SMALL) == 0
    assert (tmp_path / 'morning-loop-poster.png').exists()


def test_cli_custom_theme(tmp_path, gpx_file):
    output = tmp_path / 'custom.png'

    exit_code = main([str(gpx_file), '-o', str(output), '--theme', 'custom',
                      '--background', '#f4efe6', '--stroke', '#1f3b2d', '--no-stats'] + SMALL)

    assert exit_code == 0
    assert output.exists()


def test_cli_malformed_file(tmp_path, capsys):
    path = tmp_path / 'broken.gpx'
    path.write_text('not a gpx <<<', encoding='utf-8')

    assert main([str(path)]) == 1
    assert 'Failed to parse GPX file' in capsys.readouterr().err


def test_cli_missing_file(tmp_path):
    assert main([str(tmp_path / 'missing.gpx')]) == 1


def test_cli_rejects_non_positive_size(tmp_path, gpx_file, capsys):
    output = tmp_path / 'poster.png'

    assert main([str(gpx_file), '-o', str(output), '--width=-5', '--height', '150']) == 1
    assert 'must be positive' in capsys.readouterr().err
    assert not output.exists()

    assert main([str(gpx_file), '-o', str(output), '--pixel-ratio', '0']) == 1
    assert not output.exists()
