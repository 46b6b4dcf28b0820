# demo_collection_admin.py
# Version: v1
#
# Demo: run the collection tasks directly and print the normalized results.
#
# Usage:
#
#   export COSMOS_CONNECTION_URI="mongodb://<account>:<key>@<account>.documents.azure.com:10255/?ssl=true&authSource=<db>"
#   export COSMOS_COLLECTION=orders
#   export COSMOS_PARTITION_KEY=customerId
#   python demo_collection_admin.py
#
# Set COSMOS_MOCK_MODE=1 to try it without an account.

import asyncio
from typing import Any, Dict

from cosmos_collection_admin.tools import tasks


def _show(label: str, result: Dict[str, Any]) -> None:
    if result.get("ok"):
        print(f"{label}: ok  value={result.get('value')!r}")
    else:
        error = result.get("error") or {}
        print(f"{label}: FAILED  [{error.get('code')}] {error.get('message')}")


async def main() -> None:
    exists = await tasks.collection_exists()
    _show("collection_exists", exists)

    if exists.get("ok") and not exists.get("value"):
        _show(
            "create_collection",
            await tasks.create_collection(
                throughput=400, index_names=["id", "customerId", "status"]
            ),
        )

    _show("update_throughput", await tasks.update_throughput(throughput=1000))
    _show("update_indexes", await tasks.update_indexes(index_names=["customerId", "status"]))


if __name__ == "__main__":
    asyncio.run(main())
