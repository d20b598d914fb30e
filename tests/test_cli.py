from __future__ import annotations

from fleet_rental import app


def test_init_then_dashboard(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(app, "configure_logging", lambda: None)
    db_path = tmp_path / "cli.db"

    assert app.main(["--db", str(db_path), "init"]) == 0
    assert "parameters seeded" in capsys.readouterr().out

    assert app.main(["--db", str(db_path), "dashboard"]) == 0
    output = capsys.readouterr().out
    assert "Total revenue" in output
    assert "TND" in output


def test_due_dates_and_missing_invoice(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(app, "configure_logging", lambda: None)
    db_path = tmp_path / "cli.db"

    assert app.main(["--db", str(db_path), "due-dates", "--days", "7"]) == 0
    assert "Overdue (0)" in capsys.readouterr().out

    assert app.main(["--db", str(db_path), "invoice-pdf", "missing"]) == 1
