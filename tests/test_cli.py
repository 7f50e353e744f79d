import os

import pytest

from colorplate.colorplate_extract import main


def test_missing_tags_root(tmp_path, capsys):
    (tmp_path / 'data').mkdir()
    assert main([str(tmp_path / 'nope'), str(tmp_path / 'data'), 'all']) == 1
    assert 'does not exist' in capsys.readouterr().err


def test_missing_data_root(tmp_path, capsys):
    (tmp_path / 'tags').mkdir()
    assert main([str(tmp_path / 'tags'), str(tmp_path / 'nope'), 'all']) == 1


def test_wrong_argument_count(capsys):
    with pytest.raises(SystemExit) as e:
        main(['only-one'])
    assert e.value.code != 0


def test_single_tag(tmp_path, write_tag, capsys):
    rel = write_tag(os.path.join('ui', 'hud.bitmap'))
    assert main([str(tmp_path / 'tags'), str(tmp_path / 'data'), rel]) == 0
    assert (tmp_path / 'data' / 'ui' / 'hud.tif').is_file()
    assert f"Extracted {rel}" in capsys.readouterr().out


def test_single_tag_never_overwrites(tmp_path, write_tag):
    rel = write_tag('hud.bitmap')
    args = [str(tmp_path / 'tags'), str(tmp_path / 'data'), rel]
    assert main(args) == 0
    assert main(args) == 1


def test_single_tag_wrong_extension(tmp_path, write_tag, capsys):
    write_tag('hud.bitmap')
    assert main([str(tmp_path / 'tags'), str(tmp_path / 'data'), 'hud.tif']) == 1
    assert 'does not end with .bitmap' in capsys.readouterr().err


def test_single_tag_invalid(tmp_path, write_tag, make_tag):
    rel = write_tag('hud.bitmap', data=make_tag(length=0))
    assert main([str(tmp_path / 'tags'), str(tmp_path / 'data'), rel]) == 1


def test_all_reports_summary_and_succeeds(tmp_path, write_tag, make_tag, capsys):
    write_tag('a.bitmap')
    write_tag('b.bitmap', data=make_tag(length=0))

    assert main([str(tmp_path / 'tags'), str(tmp_path / 'data'), 'all', '-j', '2', '-q']) == 0

    out, err = capsys.readouterr()
    assert 'Extracted 1 / 2 color plates in ' in out
    assert 'has no color plate data' in err
    assert 'Extracted a.bitmap' not in out


def test_all_overwrite(tmp_path, write_tag, capsys):
    write_tag('a.bitmap')
    tags, data = str(tmp_path / 'tags'), str(tmp_path / 'data')
    assert main([tags, data, 'all']) == 0
    assert main([tags, data, 'all']) == 0
    assert main([tags, data, 'all-overwrite']) == 0
    summaries = [line for line in capsys.readouterr().out.splitlines()
                 if line.startswith('Extracted ') and ' / ' in line]
    assert [s.split(' in ')[0] for s in summaries] == [
        'Extracted 1 / 1 color plate',
        'Extracted 0 / 1 color plate',
        'Extracted 1 / 1 color plate',
    ]


def test_bad_jobs(tmp_path, write_tag):
    with pytest.raises(SystemExit):
        main([str(tmp_path / 'tags'), str(tmp_path / 'data'), 'all', '--jobs', '0'])
