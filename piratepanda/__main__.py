from piratepanda.main import run

raise SystemExit(run())
