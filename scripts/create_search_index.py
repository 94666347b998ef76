#!/usr/bin/env python3
"""
Create the Elasticsearch index of every configured search engine with raw HTTP (no Python ES client).
Use this when the API's startup bootstrap cannot reach ES, or to recreate indices by hand:
  python scripts/create_search_index.py
  python scripts/create_search_index.py --engine default

Reads ELASTICSEARCH_URL and SEARCH_ENGINES from .env (defaults: http://localhost:9200, {"default": "posts"}).
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import httpx
from swp_api.config import get_settings
from swp_api.search.elasticsearch_client import posts_index_mappings


def create_index(client: httpx.Client, base: str, index: str) -> bool:
    url = f"{base}/{index}"
    r = client.head(url)
    if r.status_code == 200:
        print(f"Index '{index}' already exists. Delete it first if you want to recreate:")
        print(f"  curl -X DELETE '{url}'")
        return True
    body = {
        "settings": {"index": {"number_of_replicas": 0}},
        "mappings": posts_index_mappings(),
    }
    r = client.put(url, json=body)
    if r.status_code not in (200, 201):
        print(f"Failed to create index '{index}': {r.status_code}")
        print(r.text[:500])
        return False
    print(f"Created index '{index}' with number_of_replicas=0.")
    return True


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--engine", help="Only create the index of this engine")
    opts = parser.parse_args()

    settings = get_settings()
    engines = settings.search_engines
    if opts.engine:
        if opts.engine not in engines:
            print(f"Unknown engine '{opts.engine}'. Configured: {', '.join(sorted(engines))}")
            sys.exit(1)
        engines = {opts.engine: engines[opts.engine]}

    base = settings.elasticsearch_url.rstrip("/")
    ok = True
    with httpx.Client(timeout=30.0, verify=settings.elasticsearch_verify_certs) as client:
        for name, index in sorted(engines.items()):
            print(f"Engine '{name}' -> index '{index}'")
            ok = create_index(client, base, index) and ok
    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
