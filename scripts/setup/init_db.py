"""
Initialize database - creates all tables and the default admin users.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from app.database import SessionLocal, create_tables, engine
from app.config import settings
from app.services.auth_service import seed_default_users
from sqlalchemy import inspect, text


def main():
    print("🗄️  Vehicle Entry Log DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DB_HOST}:{settings.DB_PORT}/{settings.DB_NAME}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        print("\nMake sure PostgreSQL is running:")
        print("  sudo systemctl start postgresql")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    tables = sorted(inspect(engine).get_table_names())
    print(f"✅ Tables ready ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    print("\n👤 Seeding default admins...")
    db = SessionLocal()
    try:
        created = seed_default_users(db)
    finally:
        db.close()
    if created:
        for username in created:
            print(f"   ✓ {username}")
    else:
        print("   (all default admins already exist)")

    print("\n🎉 Database ready! You can now start the backend:")
    print(f"   uvicorn app.main:app --host 0.0.0.0 --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()
