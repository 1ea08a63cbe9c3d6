import sys
from time import time
from traceback import extract_tb

import pymysql

import orion.functions
from orion.storage.common import DatabaseStorage

SQL_SCRIPT = "@orion/sql/mysql/orion.sql"


class MysqlStorage(DatabaseStorage):
    _lastConnectAttempt = 0
    _reconnectDelay = 60
    protocol = 'mysql'
    placeholder = '%s'

    def __init__(self, dsn, dsnDict, console):
        """
        Object constructor.
        Every exception raised from here should make Orion non-operational since we won't have storage support.
        :param dsn: The database connection string.
        :param dsnDict: The database connection string parsed into a dict.
        :param console: The object holding the logger delegates.
        :raise AttributeError: if the given dsnDict is missing required information.
        """
        super().__init__(dsn, dsnDict, console)
        if not self.dsnDict['host']:
            raise AttributeError(
                "invalid MySQL host in %(protocol)s://%(user)s:******@%(host)s:%(port)s%(path)s" % self.dsnDict)
        if not self.dsnDict['path'] or not self.dsnDict['path'][1:]:
            raise AttributeError(
                "missing MySQL database name in %(protocol)s://%(user)s:******@%(host)s:%(port)s%(path)s" % self.dsnDict)

    def connect(self):
        """
        Establish and return a connection with the storage layer.
        Will store the connection object also in the 'db' attribute so in the future we can reuse it.
        :return The connection instance if established successfully, otherwise None.
        """
        # do not hammer a MySQL server which just refused us
        if time() - self._lastConnectAttempt < self._reconnectDelay:
            self.db = None
            self.console.bot('New MySQL database connection requested but last connection attempt '
                             'failed less than %s seconds ago: exiting...', self._reconnectDelay)
            return None

        self.shutdown()
        self.console.bot('Connecting to MySQL database: %(protocol)s://%(user)s:******@%(host)s:%(port)s%(path)s...',
                         self.dsnDict)
        try:
            self.db = pymysql.connect(host=self.dsnDict['host'],
                                      port=self.dsnDict['port'],
                                      user=self.dsnDict['user'],
                                      password=self.dsnDict['password'],
                                      database=self.dsnDict['path'][1:],
                                      charset="utf8mb4",
                                      autocommit=True)
        except pymysql.MySQLError as e:
            self.console.error('Database connection failed: %s - %s', e, extract_tb(sys.exc_info()[2]))
            self.db = None
            self._lastConnectAttempt = time()
            return None

        self.console.bot('Successfully established a connection with MySQL database')
        self._lastConnectAttempt = 0

        if not self.getTables():
            self.console.info("Missing MySQL database tables: importing SQL file: %s...",
                              orion.functions.getAbsolutePath(SQL_SCRIPT))
            try:
                self.queryFromFile(SQL_SCRIPT)
            except Exception as e:
                self.shutdown()
                self.console.critical("Missing MySQL database tables. You need to create the necessary tables for "
                                      "Orion to work by importing %s into your database. An attempt of creating "
                                      "tables automatically just failed: %s",
                                      orion.functions.getAbsolutePath(SQL_SCRIPT), e)

        return self.db

    def getConnection(self):
        """
        Return the database connection. If the connection has not been established yet, will establish a new one.
        :return The connection instance, or None if no connection can be established.
        """
        if self.db and self.db.open:
            return self.db
        return self.connect()

    def shutdown(self):
        """
        Close the current active database connection.
        """
        if self.db and self.db.open:
            self.console.bot('Closing connection with MySQL database...')
            self.db.close()
        self.db = None

    def status(self):
        """
        Check whether the connection with the storage layer is active or not.
        :return True if the connection is active, False otherwise.
        """
        return bool(self.db and self.db.open)

    def getTables(self):
        """
        List the tables of the current database.
        :return: list of strings.
        """
        with self.query("SHOW TABLES") as cursor:
            return [list(row.values())[0] for row in cursor]

    def truncateTable(self, table):
        """
        Empty a database table (or a collection of tables)
        :param table: The database table or a collection of tables
        :raise KeyError: If the table is not present in the database
        """
        try:
            self.query("SET FOREIGN_KEY_CHECKS=0;")
            current_tables = self.getTables()
            for name in (table if isinstance(table, (tuple, list)) else (table,)):
                if name not in current_tables:
                    raise KeyError(f"could not find table '{name}' in the database")
                self.query(f"TRUNCATE TABLE `{name}`;")
        finally:
            self.query("SET FOREIGN_KEY_CHECKS=1;")
