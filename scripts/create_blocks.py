"""Create WardDataSource blocks for the known ward datasets.

Saves (or overwrites) a WardDataSource block for each dataset. Requires a
running Prefect server (PREFECT_API_URL).

The default "ward-data" block is created from environment variables when
set:

    WARD_ANALYTICS_BACKEND    -- "mock" or "geofile"
    WARD_ANALYTICS_DATA_PATH  -- ward GeoJSON / GeoParquet file

If the env vars are absent the default block uses the bundled sample data.

Usage:
    PREFECT_API_URL=http://localhost:4200/api uv run python scripts/create_blocks.py
"""

from __future__ import annotations

from ward_analytics.data_access.source import BackendType, WardDataSource, data_source_from_env

SOURCES: list[dict[str, str | None]] = [
    {"name": "ward-data-mock", "backend": "mock", "data_path": None},
    {"name": "ward-data-iebc", "backend": "geofile", "data_path": "data/kenya_wards.geojson"},
]


def main() -> None:
    default_block = data_source_from_env()
    default_block.save("ward-data", overwrite=True)
    print(f"Saved block 'ward-data' ({default_block.backend.value}, {default_block.data_path})")

    for source in SOURCES:
        block = WardDataSource(backend=BackendType(source["backend"]), data_path=source["data_path"])
        block.save(str(source["name"]), overwrite=True)
        print(f"Saved block '{source['name']}' ({block.backend.value}, {block.data_path})")


if __name__ == "__main__":
    main()
