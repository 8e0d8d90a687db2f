import asyncpg


class Database:
    def __init__(self, dsn: str):
        self.dsn = dsn
        self.pool = None

    async def connect(self):
        self.pool = await asyncpg.create_pool(dsn=self.dsn, min_size=1, max_size=10)

    async def close(self):
        if self.pool:
            await self.pool.close()
            self.pool = None

    def _require_pool(self):
        if self.pool is None:
            raise ConnectionError("Database pool is not connected")
        return self.pool

    async def execute(self, query, *args, **kwargs):
        async with self._require_pool().acquire() as conn:
            return await conn.execute(query, *args, **kwargs)

    async def fetch(self, query, *args, **kwargs):
        async with self._require_pool().acquire() as conn:
            return await conn.fetch(query, *args, **kwargs)

    async def fetchrow(self, query, *args, **kwargs):
        async with self._require_pool().acquire() as conn:
            return await conn.fetchrow(query, *args, **kwargs)

    async def fetchval(self, query, *args, **kwargs):
        async with self._require_pool().acquire() as conn:
            return await conn.fetchval(query, *args, **kwargs)
