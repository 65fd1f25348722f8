#!/usr/bin/env python3
"""
Seed the document store with sample production sites and records.

    python scripts/seed_data.py            # add missing sample items
    python scripts/seed_data.py --reset    # clear both collections first
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path to import sitetracker modules
sys.path.append(str(Path(__file__).parent.parent))

from sitetracker.core.config import get_settings  # noqa: E402
from sitetracker.core.database import create_engine, create_session_factory  # noqa: E402
from sitetracker.core.exceptions import ConflictException  # noqa: E402
from sitetracker.core.store import DocumentStore  # noqa: E402
from sitetracker.dal.production import ProductionDAL, split_partition_key  # noqa: E402
from sitetracker.dal.production_site import ProductionSiteDAL  # noqa: E402

SAMPLE_SITES = [
    {
        "companyId": 1,
        "productionSiteId": 1,
        "name": "Star_Radhapuram_600KW",
        "location": "Tirunelveli, Radhapuram",
        "type": "Wind",
        "banking": 1,
        "capacity_MW": 0.6,
        "annualProduction_L": 9,
        "htscNo": "79204721131",
        "injectionVoltage_KV": 33,
        "status": "Active",
    },
    {
        "companyId": 1,
        "productionSiteId": 2,
        "name": "DVN_Keelathur_1WM",
        "location": "Pudukkottai, Keelathur",
        "type": "Solar",
        "banking": 0,
        "capacity_MW": 1.0,
        "annualProduction_L": 18,
        "htscNo": "69534460069",
        "injectionVoltage_KV": 22,
        "status": "Active",
    },
]

_SAMPLE_MATRIX = {
    "c1": 1, "c2": 2, "c3": 3, "c4": 4, "c5": 5,
    "c001": 6, "c002": 7, "c003": 8, "c004": 9, "c005": 10,
    "c006": 11, "c007": 12, "c008": 13, "c009": 14, "c010": 15,
}

SAMPLE_RECORDS = [
    {"pk": "1_1", "sk": "122024", **_SAMPLE_MATRIX},
    {"pk": "1_2", "sk": "112024", **_SAMPLE_MATRIX},
]


async def seed(reset: bool = False) -> None:
    settings = get_settings()
    engine = create_engine(settings)
    store = DocumentStore(create_session_factory(engine))
    sites = ProductionSiteDAL(store, settings.PRODUCTION_SITES_TABLE)
    productions = ProductionDAL(store, settings.PRODUCTION_TABLE)

    try:
        await store.create_tables()

        if reset:
            for collection in store.collections:
                removed = await store.clear(collection)
                print(f"Cleared {removed} items from {collection}")

        print(f"\nPopulating {sites.table_name}:")
        for site in SAMPLE_SITES:
            try:
                created = await sites.create(site)
                print(f"  added {created['companyId']}/{created['productionSiteId']} {created['name']}")
            except ConflictException:
                print(f"  skipped {site['companyId']}/{site['productionSiteId']} (already exists)")

        print(f"\nPopulating {productions.table_name}:")
        for record in SAMPLE_RECORDS:
            company_id, production_site_id = split_partition_key(record["pk"])
            try:
                created = await productions.create(
                    company_id, production_site_id, record["sk"], record
                )
                print(f"  added {created['pk']} {created['sk']} totalUnit={created['totalUnit']}")
            except ConflictException:
                print(f"  skipped {record['pk']} {record['sk']} (already exists)")

        print("\nSeeding completed successfully")
    finally:
        await engine.dispose()


def main():
    """Main function"""
    parser = argparse.ArgumentParser(description="Seed sample production sites and records")
    parser.add_argument(
        "--reset", action="store_true", help="delete existing sites and records first"
    )
    args = parser.parse_args()
    asyncio.run(seed(reset=args.reset))


if __name__ == "__main__":
    main()
