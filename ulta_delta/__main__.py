from ulta_delta.cli import run


raise SystemExit(run())
