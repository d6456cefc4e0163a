import json

from deeps.cli import main


def test_ascii_output(capsys):
    assert main(["--level", "2", "--total-floors", "5", "--seed", "7", "--width", "40", "--height", "30"]) == 0
    out = capsys.readouterr().out
    lines = out.splitlines()
    assert lines[0] == "#" * 40
    assert "<" in out and ">" in out
    assert "seed=7 level=2/5 difficulty=normal" in out
    assert any(line.startswith("rooms=") for line in lines)


def test_json_output_is_stable(capsys):
    args = ["--level", "1", "--seed", "3", "--width", "40", "--height", "30", "--json"]
    assert main(args) == 0
    first = capsys.readouterr().out
    assert main(args) == 0
    second = capsys.readouterr().out
    assert first == second
    payload = json.loads(first)
    assert payload["level"] == 1
    assert payload["upStairs"] == []
    assert len(payload["tiles"]) == 30


def test_out_of_range_level_fails(capsys):
    assert main(["--level", "11", "--total-floors", "10", "--seed", "1"]) == 2
    assert "floor level out of range" in capsys.readouterr().err


def test_custom_difficulty_table(tmp_path, capsys):
    table = tmp_path / "table.yaml"
    table.write_text("tiers:\n  normal:\n    mob_count_multiplier: 0.1\n    variant_weights: {easy: 1}\n", encoding="utf-8")
    assert main(["--seed", "4", "--width", "40", "--height", "30", "--difficulty-table", str(table), "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["mobs"] == {}
