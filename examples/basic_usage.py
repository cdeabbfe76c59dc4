#!/usr/bin/env python3
"""
Basic usage examples for the DynamoDB table replicator.

This example demonstrates:
1. Setting up configuration
2. Upserting one table into another
3. Wiping the destination before copying
4. Reporting progress through a callback
5. Inspecting the structured result
"""

from dynamodb_replicator import (
    ReplicationOrchestrator,
    ReplicationRequest,
    ReplicatorConfig,
    configure_logging,
    create_progress,
    replicate,
)


def main():
    """Demonstrate replicating a restored table back into its original."""
    configure_logging()

    # 1. Configure the connection
    print("1. Setting up replicator configuration...")
    config = ReplicatorConfig.from_env()  # Uses environment variables
    # Or for DynamoDB Local / LocalStack:
    # config = ReplicatorConfig.for_local_development("http://localhost:8000")

    # 2. Upsert: destination items not in the source are kept
    print("\n2. Upserting orders-restored into orders...")
    result = replicate("ap-southeast-2", "orders-restored", "orders", config=config)
    print(f"   Status: {result.status.value}, written: {result.copy_stats.submitted if result.copy_stats else 0}")

    # 3. Wipe first: destination ends up holding exactly the source items
    print("\n3. Wiping orders, then copying...")
    result = replicate("ap-southeast-2", "orders-restored", "orders", wipe_first=True, config=config)
    if result.wipe:
        print(f"   Deleted: {result.wipe.submitted}")

    # 4. Progress through a callback instead of the terminal bar
    print("\n4. Replicating with a progress callback...")

    def on_progress(current, total, label):
        print(f"   {label}{current}/{total}")

    orchestrator = ReplicationOrchestrator(
        config.model_copy(update={"region_name": "ap-southeast-2"}),
        progress=create_progress(callback=on_progress)
    )
    result = orchestrator.run(ReplicationRequest(
        region="ap-southeast-2",
        source_table="orders-restored",
        destination_table="orders"
    ))

    # 5. Inspect the outcome
    print("\n5. Result...")
    if result.succeeded:
        print(f"   Done, {result.total_unprocessed} operations left unconfirmed")
    else:
        print(f"   {result.status.value} in {result.error.phase}: {result.error.message}")
    print(f"   Exit code: {result.exit_code}")


if __name__ == "__main__":
    main()
