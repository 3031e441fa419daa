# scripts/setup/init_db.py
"""
Initialize database — creates all tables and seeds the fleet.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py [--admin-email admin@corp.com --admin-password secret]
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from app.database import SessionLocal, create_tables, engine
from app.config import settings
from app.models.enums import UserRole
from app.models.vehicle import Vehicle
from app.schemas.user import UserCreate
from app.services.user_service import create_user, get_user_by_email
from app.utils.dates import utcnow
from sqlalchemy import inspect, text

SEED_VEHICLES = [
    {"name": "Pool Car 1", "make": "Toyota", "model": "Corolla", "year": 2022,
     "plate_number": "FLT-001", "color": "White", "seats": 5},
    {"name": "Pool Car 2", "make": "Toyota", "model": "Corolla", "year": 2022,
     "plate_number": "FLT-002", "color": "Silver", "seats": 5},
    {"name": "Cargo Van", "make": "Ford", "model": "Transit", "year": 2021,
     "plate_number": "FLT-003", "color": "White", "seats": 3},
    {"name": "Site Pickup", "make": "Nissan", "model": "Navara", "year": 2023,
     "plate_number": "FLT-004", "color": "Grey", "seats": 5},
    {"name": "Shuttle", "make": "Mercedes-Benz", "model": "Sprinter", "year": 2020,
     "plate_number": "FLT-005", "color": "Blue", "seats": 12},
]


def seed_vehicles(db) -> int:
    existing = {plate for (plate,) in db.query(Vehicle.plate_number).all()}
    added = 0
    for row in SEED_VEHICLES:
        if row["plate_number"] in existing:
            continue
        db.add(Vehicle(created_at=utcnow(), **row))
        added += 1
    db.commit()
    return added


def main():
    parser = argparse.ArgumentParser(description="Create tables and seed the fleet")
    parser.add_argument("--admin-email")
    parser.add_argument("--admin-password")
    parser.add_argument("--admin-name", default="Fleet Admin")
    args = parser.parse_args()

    print("🗄️  Fleet DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    # Test connection
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        print("\nMake sure PostgreSQL is running:")
        print("  docker-compose up -d db")
        print("  # or: sudo systemctl start postgresql")
        sys.exit(1)

    # Create all tables
    print("\n📋 Creating tables...")
    create_tables()
    tables = sorted(inspect(engine).get_table_names())
    print(f"📊 Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    db = SessionLocal()
    try:
        added = seed_vehicles(db)
        print(f"\n🚗 Seeded {added} vehicle(s)")

        if args.admin_email and args.admin_password:
            if get_user_by_email(db, args.admin_email):
                print(f"👤 Admin {args.admin_email} already exists")
            else:
                admin = create_user(db, UserCreate(
                    email=args.admin_email, password=args.admin_password,
                    name=args.admin_name, role=UserRole.admin,
                ))
                print(f"👤 Admin created: {admin.email} (id={admin.id})")
    finally:
        db.close()

    print("\n🎉 Database ready! You can now start the backend:")
    print("   uvicorn app.main:app --host 0.0.0.0 --port 8080 --reload")


if __name__ == "__main__":
    main()
