# init_db.py
from config import Config
from database import init_db


if __name__ == '__main__':
    print(f"Creating bookmark tables at: {Config.DATABASE_URL}")
    init_db()
    print("Bookmark tables created successfully!")
