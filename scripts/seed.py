"""
Storefront - Development Seeder
=================================
Seeds users, categories and products, then prints bearer tokens so the
API can be exercised locally.

Usage:
    python scripts/seed.py          # Seed (idempotent)
    python scripts/seed.py --reset  # Drop all data and reseed
"""

import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.database import SessionLocal, Base, engine
from common.security import create_user_token
from modules.user.models import User, UserRole
from modules.customer.address_models import Address  # noqa: F401
from modules.catalog.models import Category, Product
from modules.cart.models import CartLine  # noqa: F401
from modules.order.models import Order, OrderLine  # noqa: F401
from modules.payment.models import Payment  # noqa: F401


USERS = [
    {"email": "admin@example.com", "first_name": "Store", "last_name": "Admin", "role": UserRole.ADMIN},
    {"email": "alice@example.com", "first_name": "Alice", "last_name": "Buyer", "role": UserRole.CUSTOMER},
    {"email": "bob@example.com", "first_name": "Bob", "last_name": "Buyer", "role": UserRole.CUSTOMER},
]

CATEGORIES = ["Books", "Electronics", "Kitchen"]

PRODUCTS = [
    # name, category, price, stock
    ("Paperback Notebook", "Books", "4.50", 200),
    ("Field Guide to Birds", "Books", "18.00", 12),
    ("USB-C Cable", "Electronics", "9.99", 75),
    ("Noise Cancelling Headphones", "Electronics", "149.00", 5),
    ("Chef's Knife", "Kitchen", "39.90", 20),
    ("Cast Iron Skillet", "Kitchen", "27.50", 0),
]


def seed():
    db = SessionLocal()
    try:
        print("=" * 50)
        print("  Storefront - Development Seeder")
        print("=" * 50)

        Base.metadata.create_all(bind=engine)

        # ==========================================
        # 1. Users
        # ==========================================
        print("\n[1/3] Users")
        for data in USERS:
            existing = db.query(User).filter(User.email == data["email"]).first()
            if not existing:
                db.add(User(
                    email=data["email"],
                    first_name=data["first_name"],
                    last_name=data["last_name"],
                    role=data["role"].value,
                ))
                print(f"  + {data['role'].value}: {data['email']}")
            else:
                print(f"  = exists: {data['email']}")
        db.flush()

        # ==========================================
        # 2. Categories
        # ==========================================
        print("\n[2/3] Categories")
        categories = {}
        for name in CATEGORIES:
            cat = db.query(Category).filter(Category.name == name).first()
            if not cat:
                cat = Category(name=name)
                db.add(cat)
                db.flush()
                print(f"  + {name}")
            else:
                print(f"  = exists: {name}")
            categories[name] = cat

        # ==========================================
        # 3. Products
        # ==========================================
        print("\n[3/3] Products")
        for name, cat_name, price, stock in PRODUCTS:
            if db.query(Product).filter(Product.name == name).first():
                print(f"  = exists: {name}")
                continue
            db.add(Product(
                name=name,
                unit_price=Decimal(price),
                stock_quantity=stock,
                category_id=categories[cat_name].id,
            ))
            print(f"  + {name} ({price}, stock {stock})")

        db.commit()

        print("\nBearer tokens:")
        for user in db.query(User).order_by(User.id).all():
            print(f"  {user.email:<20} {create_user_token(user.id, user.role)}")

    except Exception as e:
        db.rollback()
        print(f"\nSeed failed: {e}")
        raise
    finally:
        db.close()


def reset_and_seed():
    """Drop all tables and recreate + seed."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    print("All tables recreated")
    seed()


if __name__ == "__main__":
    if "--reset" in sys.argv:
        confirm = input("This will DELETE ALL DATA. Type 'yes' to confirm: ")
        if confirm.strip().lower() == "yes":
            reset_and_seed()
        else:
            print("Aborted.")
    else:
        seed()
