import argparse
from pathlib import Path

from nicestats.common.settings import DEFAULT_SCHEMA_PATH, load_settings


def main() -> int:
    parser = argparse.ArgumentParser(description="Validate a nicestats settings.yaml")
    parser.add_argument("--config", required=True, help="Path to settings.yaml")
    parser.add_argument(
        "--schema", default=str(DEFAULT_SCHEMA_PATH), help="Path to schema.json"
    )
    args = parser.parse_args()

    try:
        settings = load_settings(Path(args.config), Path(args.schema))
    except FileNotFoundError as exc:
        raise SystemExit(str(exc))

    print(
        f"OK display={settings.display} level={settings.log_level} "
        f"app_log={settings.app_log_path or '-'} metrics_log={settings.metrics_log_path or '-'}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
