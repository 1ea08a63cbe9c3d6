class Cursor:
    """
    Thin wrapper over a DB-API cursor exposing rows as dicts.
    """
    EOF = False

    def __init__(self, cursor, conn):
        """
        Object constructor.
        :param cursor: The opened result cursor.
        :param conn: The database connection instance.
        """
        self._cursor = cursor
        self._conn = conn
        self.rowcount = cursor.rowcount
        self.lastrowid = cursor.lastrowid
        self.columns = [x[0] for x in cursor.description] if cursor.description else None
        self.fields = None
        if self.columns:
            self.moveNext()
        else:
            # not a select statement
            self.close()

    def moveNext(self):
        """
        Move the cursor to the next available record.
        :return True if the end of the result set has been reached, False otherwise.
        """
        if not self.EOF:
            self.fields = self._cursor.fetchone()
            if self.fields is None:
                self.close()
        return self.EOF

    def getOneRow(self, default=None):
        """
        Return a row from the current result set and close it.
        :return The row fetched from the result set or default if the result set is empty.
        """
        if self.EOF:
            return default
        row = self.getRow()
        self.close()
        return row

    def getRow(self):
        """
        Return the current result set row as a dict (empty at EOF).
        """
        if self.EOF:
            return {}
        return dict(zip(self.columns, self.fields))

    def getValue(self, key, default=None):
        """
        Return a value from the current result set row.
        """
        return self.getRow().get(key, default)

    def close(self):
        """
        Close the active result set.
        """
        if self._cursor:
            self._cursor.close()
        self._cursor = None
        self.EOF = True

    def __iter__(self):
        while not self.EOF:
            yield self.getRow()
            self.moveNext()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __bool__(self):
        return not self.EOF
