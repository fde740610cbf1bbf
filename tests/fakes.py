# tests/fakes.py
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from uuid import uuid4
import re


def ago(days: float = 0, minutes: float = 0) -> str:
    return (datetime.now(timezone.utc) - timedelta(days=days, minutes=minutes)).isoformat()


def _text(value):
    return None if value is None else str(value)


def _like(pattern: str):
    parts = []
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == "\\" and i + 1 < len(pattern):
            parts.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        parts.append(".*" if c in "%*" else "." if c == "_" else re.escape(c))
        i += 1
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


class FakeQuery:
    """Just enough of the postgrest request builder for the services"""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.limit_n = None

    def select(self, *columns, count=None):
        self.op = "select"
        return self

    def insert(self, data):
        self.op = "insert"
        self.payload = data
        return self

    def update(self, data):
        self.op = "update"
        self.payload = data
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: _text(row.get(column)) == _text(value))
        return self

    def neq(self, column, value):
        self.filters.append(lambda row: _text(row.get(column)) != _text(value))
        return self

    def ilike(self, column, pattern):
        regex = _like(pattern)
        self.filters.append(lambda row: row.get(column) is not None and bool(regex.fullmatch(str(row[column]))))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def execute(self):
        self.db.calls.append((self.table, self.op))
        failure = self.db.failures.get((self.table, self.op))
        if failure:
            raise Exception(failure)

        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            row = {"id": str(uuid4()), "created_at": ago(), **self.payload}
            rows.append(row)
            return SimpleNamespace(data=[dict(row)], count=None)

        matched = [row for row in rows if all(f(row) for f in self.filters)]

        if self.op == "update":
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=[dict(row) for row in matched], count=None)

        if self.order_by:
            column, desc = self.order_by
            matched.sort(key=lambda row: _text(row.get(column)) or "", reverse=desc)
        if self.limit_n is not None:
            matched = matched[:self.limit_n]
        return SimpleNamespace(data=[dict(row) for row in matched], count=len(matched))


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def upload(self, path, file, file_options=None):
        self.storage.objects[(self.name, path)] = (file, dict(file_options or {}))
        return {"Key": f"{self.name}/{path}"}

    def create_signed_url(self, path, expires_in):
        return {"signedURL": f"https://storage.example/{self.name}/{path}?expires_in={expires_in}"}


class FakeStorage:
    def __init__(self):
        self.objects = {}

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeSupabase:
    """In-memory stand-in for supabase.Client.

    `failures` maps (table, op) to an error message raised on execute;
    `calls` records every (table, op) executed.
    """

    def __init__(self):
        self.tables = {}
        self.calls = []
        self.failures = {}
        self.storage = FakeStorage()

    def table(self, name):
        return FakeQuery(self, name)

    def seed(self, table, **row):
        row.setdefault("id", str(uuid4()))
        self.tables.setdefault(table, []).append(row)
        return row

    def rows(self, table, **match):
        return [r for r in self.tables.get(table, []) if all(_text(r.get(k)) == _text(v) for k, v in match.items())]

    def ops(self, table=None, op=None):
        return [c for c in self.calls if (table is None or c[0] == table) and (op is None or c[1] == op)]
