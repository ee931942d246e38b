"""
Check the database connection and list tables.
Run with: python -m caps_dashboard.scripts.check_db
"""
from sqlalchemy import inspect, func, select
from caps_dashboard.core.db import get_engine
from caps_dashboard.models.tables import Base

def main():
    try:
        engine = get_engine()
        insp = inspect(engine)

        print("Database Connection: SUCCESS\n")
        print("Tables in database:")

        tables = set(insp.get_table_names())
        if tables:
            with engine.connect() as conn:
                for name, table in Base.metadata.tables.items():
                    if name not in tables:
                        print(f"  - {name}: MISSING")
                        continue
                    count = conn.execute(select(func.count()).select_from(table)).scalar_one()
                    print(f"  - {name}: {count} rows")
        else:
            print("  No tables found")

    except Exception as e:
        print("Database Connection: FAILED")
        print(f"Error: {e}")

if __name__ == "__main__":
    main()
