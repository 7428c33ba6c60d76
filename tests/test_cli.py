import json

import pytest

from lodegen.cli import EXIT_ERROR, EXIT_INVALID, EXIT_OK, main
from lodegen.level.corpus import load_level_file
from lodegen.level.level_grid import get_spawn_position


def test_train_writes_model(tmp_path, capsys):
    model = tmp_path / "model.json"
    assert main(["train", "--output", str(model), "--top", "3"]) == EXIT_OK
    data = json.loads(model.read_text())
    assert "X|X|X" in data
    assert len(capsys.readouterr().out.strip().splitlines()) == 3


def test_train_from_corpus_dir(tmp_path):
    corpus = tmp_path / "corpus"
    corpus.mkdir()
    (corpus / "one.txt").write_text("...\n.M.\nBBB\n")
    model = tmp_path / "model.json"
    assert main(["train", "--corpus", str(corpus), "--output", str(model), "--no-augment"]) == EXIT_OK
    assert json.loads(model.read_text())["X|X|X"] == {".": 1.0}


def test_train_empty_corpus_dir_fails(tmp_path):
    assert main(["train", "--corpus", str(tmp_path), "--output", str(tmp_path / "m.json")]) == EXIT_ERROR


def test_generate_with_model_and_preview(tmp_path):
    model = tmp_path / "model.json"
    main(["train", "--output", str(model)])
    out = tmp_path / "out"
    code = main(["generate", "--model", str(model), "--count", "2", "--seed", "3",
                 "--output-dir", str(out), "--preview", "--config", str(tmp_path / "none.json")])
    assert code in (EXIT_OK, EXIT_INVALID)
    assert sorted(p.name for p in out.iterdir()) == [
        "level001.png", "level001.txt", "level002.png", "level002.txt",
    ]
    level = load_level_file(str(out / "level001.txt"))
    assert len(level) == 16 and len(level[0]) == 28
    assert get_spawn_position(level) is not None


def test_generate_constructive(tmp_path):
    out = tmp_path / "out"
    code = main(["generate", "--method", "constructive", "--seed", "1", "--width", "20",
                 "--height", "12", "--output-dir", str(out), "--config", str(tmp_path / "none.json")])
    assert code in (EXIT_OK, EXIT_INVALID)
    level = load_level_file(str(out / "level001.txt"))
    assert (len(level[0]), len(level)) == (20, 12)


def test_generate_rejects_bad_config_values(tmp_path):
    code = main(["generate", "--width", "0", "--output-dir", str(tmp_path),
                 "--config", str(tmp_path / "none.json")])
    assert code == EXIT_ERROR


def test_generate_rejects_zero_count(tmp_path):
    with pytest.raises(SystemExit):
        main(["generate", "--count", "0", "--output-dir", str(tmp_path)])


def test_validate_exit_codes(tmp_path, capsys):
    good = tmp_path / "good.txt"
    good.write_text("M.G\nBBB\n")
    bad = tmp_path / "bad.txt"
    bad.write_text("M..\nBBB\n")

    assert main(["validate", str(good)]) == EXIT_OK
    assert main(["validate", str(good), str(bad)]) == EXIT_INVALID
    assert "No gold (G) found in level" in capsys.readouterr().out


def test_validate_full(tmp_path, capsys):
    level = tmp_path / "level.txt"
    level.write_text("#..\n#..\nM.G\nBBB\n")
    assert main(["validate", "--full", str(level)]) == EXIT_INVALID
    assert "No path found" in capsys.readouterr().out


def test_validate_unreadable(tmp_path):
    broken = tmp_path / "broken.txt"
    broken.write_text("M.x\nBBB\n")
    assert main(["validate", str(broken)]) == EXIT_ERROR
    assert main(["validate", str(tmp_path / "missing.txt")]) == EXIT_ERROR
