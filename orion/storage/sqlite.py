import os
import sqlite3

import orion.functions
from orion.storage.common import DatabaseStorage

SQL_SCRIPT = "@orion/sql/sqlite/orion.sql"


class SqliteStorage(DatabaseStorage):
    protocol = 'sqlite'
    placeholder = '?'

    def connect(self):
        """
        Establish and return a connection with the storage layer.
        Will store the connection object also in the 'db' attribute so in the future we can reuse it.
        :return The connection instance if established successfully, otherwise None.
        """
        path = orion.functions.getWritableFilePath(self.dsn[len('sqlite://'):])
        self.console.bot("Using database file: %s", path)
        is_new_database = path == ':memory:' or not os.path.isfile(path)
        try:
            self.db = sqlite3.connect(path, check_same_thread=False)
            self.db.isolation_level = None  # autocommit
        except sqlite3.Error as e:
            self.db = None
            self.console.error('Database connection failed: %s', e)
            return None

        if is_new_database:
            self.console.info("Importing SQL file: %s...", orion.functions.getAbsolutePath(SQL_SCRIPT))
            self.queryFromFile(SQL_SCRIPT)

        return self.db

    def getConnection(self):
        """
        Return the database connection. If the connection has not been established yet, will establish a new one.
        :return The connection instance, or None if no connection can be established.
        """
        if self.db:
            return self.db
        return self.connect()

    def shutdown(self):
        """
        Close the current active database connection.
        """
        if self.db:
            self.console.bot('Closing connection with SQLite database...')
            self.db.close()
        self.db = None

    def getTables(self):
        """
        List the tables of the current database.
        :return: List of strings.
        """
        with self.query("SELECT tbl_name FROM sqlite_master WHERE type='table'") as cursor:
            return [row['tbl_name'] for row in cursor]

    def truncateTable(self, table):
        """
        Empty a database table (or a collection of tables)
        :param table: The database table or a collection of tables
        :raise KeyError: If the table is not present in the database
        """
        current_tables = self.getTables()
        for name in (table if isinstance(table, (tuple, list)) else (table,)):
            if name not in current_tables:
                raise KeyError(f"could not find table '{name}' in the database")
            self.query(f"DELETE FROM `{name}`")
            self.query("DELETE FROM sqlite_sequence WHERE name = ?", (name,))

    def status(self):
        """
        Check whether the connection with the storage layer is active or not.
        :return True if the connection is active, False otherwise.
        """
        return self.db is not None
