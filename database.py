"""
Database Manager for KeyCalc
Stores opaque blobs (the calculation history) in SQLite
"""
import sqlite3
from datetime import datetime
import config


class Database:
    def __init__(self, db_path=config.DB_PATH):
        self.db_path = db_path
        self.init_database()

    def get_connection(self):
        """Create and return a database connection"""
        return sqlite3.connect(self.db_path)

    def init_database(self):
        """Initialize database tables"""
        conn = self.get_connection()
        cursor = conn.cursor()

        # Key/value blob table
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS blobs (
                key TEXT PRIMARY KEY,
                data BLOB NOT NULL,
                updated_at TEXT NOT NULL
            )
        ''')

        conn.commit()
        conn.close()

    def get_blob(self, key):
        """Return the blob stored under key, or None"""
        conn = self.get_connection()
        cursor = conn.cursor()
        cursor.execute('SELECT data FROM blobs WHERE key = ?', (key,))
        row = cursor.fetchone()
        conn.close()
        if row is None:
            return None
        data = row[0]
        return data.encode('utf-8') if isinstance(data, str) else bytes(data)

    def put_blob(self, key, data):
        """Insert or replace the blob stored under key"""
        updated_at = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        conn = self.get_connection()
        cursor = conn.cursor()
        cursor.execute('''
            INSERT OR REPLACE INTO blobs (key, data, updated_at)
            VALUES (?, ?, ?)
        ''', (key, sqlite3.Binary(data), updated_at))
        conn.commit()
        conn.close()

    def load_history_blob(self):
        """Load the serialized calculation history"""
        return self.get_blob(config.HISTORY_BLOB_KEY)

    def save_history_blob(self, data):
        """Save the serialized calculation history"""
        self.put_blob(config.HISTORY_BLOB_KEY, data)
