import os
import sys
import threading
from traceback import extract_tb

import orion.functions
from orion.clients import Client, Group
from orion.storage import Storage
from orion.storage.cursor import Cursor as DBCursor


class QueryBuilder:
    """
    Build SQL statements together with the values to bind to them.
    Every builder method returns a (statement, values) tuple.
    """

    def __init__(self, placeholder="?"):
        """
        Object constructor.
        :param placeholder: The bind parameter marker used by the database driver.
        """
        self.placeholder = placeholder

    @staticmethod
    def fieldStr(fields):
        """
        Return a list of fields whose keywords are surrounded by backticks.
        :param fields: The list of fields to format.
        """
        if isinstance(fields, (tuple, list)):
            return "`%s`" % "`, `".join(fields)
        elif isinstance(fields, str):
            return fields if fields == "*" else f"`{fields}`"
        else:
            raise TypeError("field must be a tuple, list, or string")

    def WhereClause(self, where, concat=" AND "):
        """
        Construct a where clause for an SQL query.
        :param where: A dict of field => value (a list or tuple value builds an IN clause).
        :param concat: The concat value for multiple where clauses
        """
        sql = []
        values = []
        for field, value in where.items():
            if isinstance(value, (list, tuple)):
                sql.append(f"`{field}` IN (%s)" % ", ".join([self.placeholder] * len(value)))
                values.extend(value)
            elif value is None:
                sql.append(f"`{field}` IS NULL")
            else:
                sql.append(f"`{field}` = {self.placeholder}")
                values.append(value)
        return concat.join(sql), values

    def SelectQuery(self, fields, table, where=None, orderby=None, limit=0):
        """
        Construct a SQL select query.
        :param fields: A list of fields to select.
        :param table: The table from where to fetch data.
        :param where: A dict used to build the WHERE clause.
        :param orderby: The ORDER BY clause for this select statement.
        :param limit: The amount of data data to collect.
        """
        sql = [f"SELECT {self.fieldStr(fields)} FROM `{table}`"]
        values = []
        if where:
            clause, values = self.WhereClause(where)
            sql.append(f"WHERE {clause}")
        if orderby:
            sql.append(f"ORDER BY {orderby}")
        if limit:
            sql.append(f"LIMIT {int(limit)}")
        return " ".join(sql), values

    def UpdateQuery(self, data, table, where):
        """
        Construct a SQL update query.
        :param data: A dictionary of key-value pairs for the update.
        :param table: The table to update.
        :param where: A dict used to build the WHERE clause.
        """
        sets = ", ".join(f"`{k}` = {self.placeholder}" for k in data)
        clause, values = self.WhereClause(where)
        return f"UPDATE `{table}` SET {sets} WHERE {clause}", list(data.values()) + values

    def InsertQuery(self, data, table):
        """
        Construct a SQL insert query.
        :param data: A dictionary of key-value pairs to insert.
        :param table: The table to insert data into.
        """
        marks = ", ".join([self.placeholder] * len(data))
        return f"INSERT INTO `{table}` ({self.fieldStr(list(data))}) VALUES ({marks})", list(data.values())


class DatabaseStorage(Storage):
    """
    Storage backed by a DB-API 2.0 driver.
    """
    _consoleNotice = True
    placeholder = "?"

    def __init__(self, dsn, dsnDict, console):
        """
        Object constructor.
        :param dsn: The database connection string.
        :param dsnDict: The database connection string parsed into a dict.
        :param console: The object holding the logger delegates.
        """
        self.dsn = dsn
        self.dsnDict = dsnDict
        self.console = console
        self.db = None
        self._lock = threading.Lock()
        self._groups = None

    def builder(self):
        return QueryBuilder(self.placeholder)

    def closeConnection(self):
        """
        Just an alias for shutdown.
        """
        self.shutdown()

    def _getClient(self, where):
        with self.query(*self.builder().SelectQuery("*", "clients", where, None, 1)) as cursor:
            if not (row := cursor.getOneRow()):
                return None
            return self._createClientFromRow(row)

    def getClientById(self, id):
        """
        Return the client with the given storage id, or None.
        """
        return self._getClient({"id": id})

    def getClientByGuid(self, guid):
        """
        Return the client with the given guid, or None.
        """
        return self._getClient({"guid": guid.upper()})

    def getClientByAuth(self, auth):
        """
        Return the client with the given auth login, or None.
        """
        return self._getClient({"auth": auth.lower()})

    def setClient(self, client):
        """
        Insert/update a client in the storage.
        :param client: The client to be saved.
        :return: The ID of the client stored into the database.
        """
        data = {
            "group_id": client.group.id if client.group else None,
            "name": client.name,
            "connections": client.connections,
            "ip": client.ip,
            "guid": client.guid,
            "auth": client.auth,
            "time_add": client.time_add,
            "time_edit": client.time_edit,
        }

        if client.id:
            self.query(*self.builder().UpdateQuery(data, "clients", {"id": client.id}))
        else:
            with self.query(*self.builder().InsertQuery(data, "clients")) as cursor:
                client.id = cursor.lastrowid

        return client.id

    def _createClientFromRow(self, row):
        """
        Create a Client object given a result set row.
        :param row: The result set row
        """
        client = Client(ip=row["ip"], guid=row["guid"], name=row["name"], auth=row["auth"])
        client.id = int(row["id"])
        client.connections = int(row["connections"])
        client.time_add = int(row["time_add"]) if row["time_add"] is not None else None
        client.time_edit = int(row["time_edit"]) if row["time_edit"] is not None else None
        if row["group_id"] is not None:
            client.group = next((g for g in self.getGroups() if g.id == int(row["group_id"])), None)
        return client

    def getGroups(self):
        """
        Return the list of available client groups, ordered by level.
        """
        if not self._groups:
            with self.query(*self.builder().SelectQuery("*", "groups", None, "`level`")) as cursor:
                self._groups = [Group(id=int(row["id"]), name=row["name"], keyword=row["keyword"],
                                      level=int(row["level"])) for row in cursor]
        return self._groups

    def getGroup(self, keyword=None, level=None):
        """
        Return the group matching the given keyword or level, or None.
        :raise ValueError: If neither keyword nor level is given
        """
        if keyword is None and level is None:
            raise ValueError("cannot find Group as no keyword/level provided")
        for group in self.getGroups():
            if (keyword is not None and group.keyword == keyword) or (keyword is None and group.level == level):
                return group
        return None

    def setCallvote(self, callvote):
        """
        Insert a callvote in the storage.
        :param callvote: The callvote to be saved.
        :return: The ID of the callvote stored into the database.
        """
        data = {
            "client_id": callvote.client.id,
            "type": callvote.type,
            "data": callvote.data,
            "yes": callvote.yes,
            "no": callvote.no,
            "time_add": callvote.time_add,
        }
        with self.query(*self.builder().InsertQuery(data, "callvotes")) as cursor:
            return cursor.lastrowid

    def _query(self, query, bindata=None):
        """
        Execute a query on the storage layer (internal method).
        :param query: The query to execute.
        :param bindata: Data to bind to the given query.
        :raise Exception: If the query cannot be evaluated.
        """
        with self._lock:
            cursor = self.db.cursor()
            if bindata is None:
                cursor.execute(query)
            else:
                cursor.execute(query, bindata)
            return DBCursor(cursor, self.db)

    def query(self, query, bindata=None):
        """
        Execute a query on the storage layer.
        :param query: The query to execute.
        :param bindata: Data to bind to the given query.
        :raise Exception: If the query cannot be evaluated.
        """
        # use existing connection or create a new one
        if not self.getConnection():
            raise Exception("lost connection with the storage layer during query")

        try:
            return self._query(query=query, bindata=bindata)
        except Exception as e:
            # log so we can inspect the issue and raise again
            self.console.error("Query failed [%s] %r: %s %s", query, bindata, e, extract_tb(sys.exc_info()[2]))
            raise

    def queryFromFile(self, fp):
        """
        This method executes an external sql file on the current database.
        :param fp: The filepath of the file containing the SQL statements.
        :raise Exception: If the query cannot be evaluated or if the given path cannot be resolved.
        """
        if not self.getConnection():
            raise Exception("lost connection with the storage layer during query")

        path = orion.functions.getAbsolutePath(fp)
        if not os.path.exists(path):
            raise Exception(f"SQL file does not exist: {path}")

        with open(path, "r") as sqlfile:
            statements = self.getQueriesFromFile(sqlfile)

        for stmt in statements:
            # will stop if a single query generate an exception
            self.query(stmt)

    @staticmethod
    def getQueriesFromFile(sqlfile):
        """
        Return a list of SQL queries given an open file pointer.
        :param sqlfile: An open file pointer to a SQL script file.
        :return: List of strings
        """
        lines = [x.strip() for x in sqlfile if x and not x.startswith("#") and not x.startswith("--")]
        return [x.strip() for x in " ".join(lines).split(";") if x.strip()]
