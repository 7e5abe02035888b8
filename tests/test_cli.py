import json

import cli


def test_cli_add_review_and_due(db, capsys):
    assert cli.main(["add", "alice", "John 3:16", "For God so loved the world", "--notes", "week 1"]) == 0
    out = capsys.readouterr().out
    assert "John 3:16" in out
    assert "level 0" in out
    assert "notes: week 1" in out

    assert cli.main(["--json", "due", "alice"]) == 0
    due = json.loads(capsys.readouterr().out)
    assert [card["verse_reference"] for card in due] == ["John 3:16"]
    card_id = due[0]["id"]

    assert cli.main(["review", str(card_id), "success"]) == 0
    assert "level 1" in capsys.readouterr().out

    assert cli.main(["due", "alice"]) == 0
    assert "No verses due." in capsys.readouterr().out

    assert cli.main(["history", str(card_id)]) == 0
    assert "level 0 -> 1  +3d" in capsys.readouterr().out


def test_cli_reports_errors(db, capsys):
    assert cli.main(["add", "alice", "John 3:16", "text"]) == 0
    capsys.readouterr()
    assert cli.main(["add", "alice", "John 3:16", "text"]) == 1
    assert "already in the memorization list" in capsys.readouterr().err
    assert cli.main(["review", "999", "failure"]) == 1
    assert "not found" in capsys.readouterr().err
    assert cli.main(["show", "bob", "John 3:16"]) == 1


def test_cli_notes_and_remove(db, capsys):
    cli.main(["--json", "add", "alice", "Psalm 23:1", "The LORD is my shepherd"])
    card_id = json.loads(capsys.readouterr().out)[0]["id"]
    assert cli.main(["notes", str(card_id), "David's psalm"]) == 0
    assert "notes: David's psalm" in capsys.readouterr().out
    assert cli.main(["remove", str(card_id)]) == 0
    assert cli.main(["list", "alice"]) == 0
    assert capsys.readouterr().out.strip() == f"Removed card {card_id}"


def test_cli_json_history_and_remove(db, capsys):
    cli.main(["--json", "add", "alice", "John 3:16", "For God so loved the world"])
    card_id = json.loads(capsys.readouterr().out)[0]["id"]
    cli.main(["review", str(card_id), "failure"])
    capsys.readouterr()

    assert cli.main(["--json", "history", str(card_id)]) == 0
    history = json.loads(capsys.readouterr().out)
    assert [(entry["outcome"], entry["mastery_after"], entry["interval_days"]) for entry in history] == [
        ("failure", 0, 1)
    ]

    assert cli.main(["--json", "remove", str(card_id)]) == 0
    assert json.loads(capsys.readouterr().out) == {"removed": card_id}
