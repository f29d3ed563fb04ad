import argparse
import json

from dotenv import load_dotenv

# Load environment variables from .env before the package reads them
load_dotenv()


def load_filters_arg(path):
    """Read an ad-hoc filter file; returns None to use the default filters."""
    if not path:
        return None
    from carwatch.schemas import validate_filters

    with open(path, "r", encoding="utf-8") as fh:
        return validate_filters(json.load(fh))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run one scrape and save the ranked snapshot.")
    parser.add_argument("--filters", help="JSON file with search filters (defaults to config.json)")
    args = parser.parse_args()

    from carwatch.errors import CarwatchError
    from carwatch.pipeline import Pipeline

    print("Running scraper pipeline...")
    try:
        scored = Pipeline().run(load_filters_arg(args.filters))
    except CarwatchError as e:
        raise SystemExit(f"Scrape failed: {e}")

    print(f"Saved {len(scored)} listing(s).")
    for item in scored[:5]:
        print(f"  {item.score:>3}  {item.price:>7}  {item.title}")
