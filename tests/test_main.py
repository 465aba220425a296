import importlib

from flotation.config import DEFAULT_CONFIG


def test_cli_defaults_follow_default_config(tmp_path, monkeypatch):
    # The entry script opens its log file in the working directory on import.
    monkeypatch.chdir(tmp_path)
    main = importlib.import_module("main")

    args = main.parse_args(["plant.csv"])
    assert args.horizon == DEFAULT_CONFIG.forecast_horizon_days
    assert args.window == DEFAULT_CONFIG.moving_average_window
    assert args.pairing == DEFAULT_CONFIG.correlation_pairing
    assert args.output_dir == DEFAULT_CONFIG.output_dir
