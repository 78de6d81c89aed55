#!/usr/bin/env python
"""
Demo Account Seeder

Creates (or signs in to) an account and fills it with demo products, sales
and calendar events.

Usage:
    python scripts/seed_demo.py --email demo@shop.test --password demo123
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import structlog

from inventory_soft.config import get_settings
from inventory_soft.config.logging import configure_logging
from inventory_soft.data import seed_inventory
from inventory_soft.database import close_database, get_session_factory, init_database
from inventory_soft.errors import AuthenticationError
from inventory_soft.services.auth import AuthService
from inventory_soft.state import InventoryState
from inventory_soft.store import RecordStore

logger = structlog.get_logger("seed_demo")


async def main(args: argparse.Namespace) -> None:
    settings = get_settings()
    configure_logging(settings.monitoring)
    await init_database(settings.database)
    try:
        session_factory = get_session_factory()
        auth = AuthService(session_factory, settings.security)
        try:
            await auth.sign_up(args.email, args.password, args.name)
        except AuthenticationError:
            logger.info("Account exists, seeding it", email=args.email)
        session = await auth.sign_in(args.email, args.password)

        state = InventoryState(RecordStore(session_factory), session.owner_id)
        await state.fetch_all()
        await seed_inventory(
            state,
            products=args.products,
            sales=args.sales,
            events=args.events,
            seed=args.seed,
        )
        await auth.sign_out(session.token)
        print(
            f"Seeded {args.email}: {len(state.products)} products, "
            f"{len(state.sales)} sales, {len(state.events)} events"
        )
    finally:
        await close_database()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed an Inventory Soft account with demo data")
    parser.add_argument("--email", default="demo@inventory.test")
    parser.add_argument("--password", default="demo1234")
    parser.add_argument("--name", default="Demo User")
    parser.add_argument("--products", type=int, default=20)
    parser.add_argument("--sales", type=int, default=60)
    parser.add_argument("--events", type=int, default=8)
    parser.add_argument("--seed", type=int, default=42, help="Random seed for reproducible data")

    asyncio.run(main(parser.parse_args()))
