import json

import pandas as pd

from app.cli import main


def write_profile(tmp_path, inputs, **extra):
    path = tmp_path / "profile.json"
    path.write_text(json.dumps({"inputs": inputs, **extra}), encoding="utf-8")
    return path


def test_cli_prints_results_and_writes_ledger(tmp_path, capsys):
    profile = write_profile(
        tmp_path,
        {"dataInicio": "2025-01-01", "currentWalletBalance": "500.00", "withdrawStrategy": "max"},
        portfolio=[{"val": 100, "date": "2025-01-01", "days": 10, "rate": 1}],
    )
    ledger_csv = tmp_path / "ledger.csv"

    code = main([str(profile), "--today", "2025-01-01", "--ledger-csv", str(ledger_csv), "--monthly"])

    assert code == 0
    out = capsys.readouterr().out
    assert "All checks passed" in out
    assert "Final Balance" in out
    assert "2025-01-06: 360.00" in out
    assert "2025-01" in out

    df = pd.read_csv(ledger_csv, index_col="date")
    assert len(df) == 31
    assert df.loc["2025-01-11", "returns"] == 11000


def test_cli_unconfigured_profile(tmp_path, capsys):
    profile = write_profile(tmp_path, {"currentWalletBalance": "10"})

    assert main([str(profile)]) == 1
    captured = capsys.readouterr()
    assert "Start date" in captured.out
    assert "not configured" in captured.err
